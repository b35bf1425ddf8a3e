"""Cache database schema and initialization."""

import pathlib
import sqlite3

SCHEMA = """
CREATE TABLE IF NOT EXISTS cards (
    id TEXT PRIMARY KEY,
    front_text TEXT,
    back_text TEXT,
    category TEXT NOT NULL,
    last_modified INTEGER
);

CREATE TABLE IF NOT EXISTS strength (
    id TEXT PRIMARY KEY REFERENCES cards(id),
    strength_value REAL NOT NULL,
    last_computed_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_cards_category ON cards(category);
"""


def init_db(db_path: pathlib.Path | str) -> sqlite3.Connection:
    db_path = pathlib.Path(db_path)
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=5)
    conn.row_factory = sqlite3.Row
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA)
    conn.commit()
    return conn
