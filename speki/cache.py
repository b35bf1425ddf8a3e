"""Cache index: a rebuildable SQLite index over the card store.

Rows are advisory. A cached category is only returned after checking that
the card file is really there; otherwise the store is scanned and the row
is corrected, or removed when the card is gone for good.
"""

import sqlite3
import sys
import time
from dataclasses import dataclass

from speki import scheduler
from speki.categories import Category
from speki.models import Card
from speki.store import CardNotFound, CardParseError, CardStore


@dataclass
class Resolution:
    card_id: str
    category: Category | None
    repaired: bool = False

    @property
    def found(self) -> bool:
        return self.category is not None


class CacheIndex:
    def __init__(self, conn: sqlite3.Connection, store: CardStore):
        self.conn = conn
        self.store = store

    def cached_category(self, card_id: str) -> Category | None:
        row = self.conn.execute(
            "SELECT category FROM cards WHERE id=?", (card_id,)).fetchone()
        if row is None:
            return None
        return Category.from_string(row["category"])

    def resolve(self, card_id: str) -> Resolution:
        cached = self.cached_category(card_id)
        if cached is not None and self.store.exists(cached, card_id):
            return Resolution(card_id, cached)

        located = self.store.locate(card_id)
        if located is None:
            if cached is not None:
                self.delete(card_id)
            return Resolution(card_id, None, repaired=cached is not None)

        if cached is not None:
            print(f"Warning: card {card_id} moved from '{cached}' to '{located}', "
                  "cache repaired", file=sys.stderr)
        if not self._heal(card_id, located):
            # gone again between the scan and the read
            if cached is not None:
                self.delete(card_id)
            return Resolution(card_id, None, repaired=cached is not None)
        return Resolution(card_id, located, repaired=True)

    def _heal(self, card_id: str, category: Category) -> bool:
        try:
            card = self.store.load(category, card_id)
        except CardNotFound:
            return False
        except CardParseError as e:
            print(f"Warning: {e}", file=sys.stderr)
            self.conn.execute("""
                INSERT INTO cards (id, category) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET category=excluded.category
            """, (card_id, category.joined()))
            self.conn.commit()
            return True
        self.index_card(card, category)
        return True

    def index_card(self, card: Card, category: Category, last_modified: float | None = None):
        self.conn.execute("""
            INSERT INTO cards (id, front_text, back_text, category, last_modified)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                front_text=excluded.front_text,
                back_text=excluded.back_text,
                category=excluded.category,
                last_modified=COALESCE(excluded.last_modified, cards.last_modified)
        """, (card.id, card.front.text, card.back.text, category.joined(),
              None if last_modified is None else int(last_modified)))
        self.conn.commit()

    def index_strength(self, card: Card, now: float | None = None) -> float | None:
        """Memoize the card's current strength. The card must already be indexed."""
        now = time.time() if now is None else now
        value = scheduler.strength(card, now)
        if value is None:
            return None
        self.conn.execute("""
            INSERT INTO strength (id, strength_value, last_computed_at) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                strength_value=excluded.strength_value,
                last_computed_at=excluded.last_computed_at
        """, (card.id, value, int(now)))
        self.conn.commit()
        return value

    def cached_strength(self, card_id: str) -> tuple[float, int] | None:
        row = self.conn.execute(
            "SELECT strength_value, last_computed_at FROM strength WHERE id=?",
            (card_id,)).fetchone()
        if row is None:
            return None
        return row["strength_value"], row["last_computed_at"]

    def index_all(self, now: float | None = None) -> dict:
        """Index every card on disk and drop rows for card files that are gone.

        A file that is present but fails to parse keeps its row.
        """
        stats = {"indexed": 0, "strength": 0, "removed": 0}
        seen: set[str] = set()
        for card, category, mtime in self.store.enumerate_all():
            seen.add(card.id)
            self.index_card(card, category, mtime)
            stats["indexed"] += 1
            if card.history and self.index_strength(card, now) is not None:
                stats["strength"] += 1

        present = seen | self.store.all_ids()
        stale = [r["id"] for r in self.conn.execute("SELECT id FROM cards")
                 if r["id"] not in present]
        for card_id in stale:
            self.delete(card_id)
        stats["removed"] = len(stale)
        return stats

    def delete(self, card_id: str):
        self.conn.execute("DELETE FROM strength WHERE id=?", (card_id,))
        self.conn.execute("DELETE FROM cards WHERE id=?", (card_id,))
        self.conn.commit()

    def invalidate(self, card_id: str):
        self.delete(card_id)

    def clear(self):
        self.conn.execute("DELETE FROM strength")
        self.conn.execute("DELETE FROM cards")
        self.conn.commit()

    def rebuild_from(self, store: CardStore, now: float | None = None) -> dict:
        self.store = store
        self.clear()
        return self.index_all(now)

    def search(self, text: str) -> list[dict]:
        return [dict(r) for r in self.conn.execute("""
            SELECT id, front_text, back_text, category FROM cards
            WHERE front_text LIKE ? ORDER BY front_text
        """, (f"%{text}%",))]

    def weakest(self, limit: int = 10) -> list[dict]:
        return [dict(r) for r in self.conn.execute("""
            SELECT c.id, c.front_text, c.category, s.strength_value, s.last_computed_at
            FROM strength s JOIN cards c ON c.id = s.id
            ORDER BY s.strength_value ASC LIMIT ?
        """, (limit,))]

    def counts(self) -> dict:
        cards = self.conn.execute("SELECT COUNT(*) AS cnt FROM cards").fetchone()["cnt"]
        scored = self.conn.execute("SELECT COUNT(*) AS cnt FROM strength").fetchone()["cnt"]
        return {"cards": cards, "scored": scored}
