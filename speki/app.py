"""App: central object that wires together share dir, card store, cache and scheduler."""

import pathlib
import sqlite3
import time

from speki import scheduler
from speki.cache import CacheIndex
from speki.categories import Category
from speki.config import cache_path, cards_dir, get_share_dir, load_settings
from speki.db import init_db
from speki.importer import read_csv
from speki.models import Card, Grade
from speki.store import CardNotFound, CardStore


class App:
    """Holds all shared state for a speki session.

    Usage:
        app = App(share_dir="/path/to/speki")
        app.init_cache()                 # uses share_dir/cache.db
        card = app.add_card("2+2", "4")
        app.review_card(card.id, Grade.PERFECT)
        app.close()

    For testing:
        app = App(share_dir=tmp_path)
        app.init_cache(":memory:")
    """

    def __init__(self, share_dir: pathlib.Path | str | None = None):
        if share_dir is None:
            share_dir = get_share_dir()
        self.share_dir = pathlib.Path(share_dir)
        self.settings = load_settings(self.share_dir)
        self.store = CardStore(cards_dir(self.share_dir))
        self.conn: sqlite3.Connection | None = None
        self.cache: CacheIndex | None = None

    def init_cache(self, db_path: pathlib.Path | str | None = None) -> CacheIndex:
        """Connect to the cache database and create its schema if missing.

        Args:
            db_path: SQLite file, or ":memory:" for tests. Defaults to
                     share_dir/cache.db.
        """
        if db_path is None:
            db_path = cache_path(self.share_dir)
        self.store.tree.create(Category.root())
        self.conn = init_db(db_path)
        self.cache = CacheIndex(self.conn, self.store)
        return self.cache

    def locate(self, card_id: str) -> Category:
        resolution = self.cache.resolve(card_id)
        if not resolution.found:
            raise CardNotFound(card_id)
        return resolution.category

    def load_card(self, card_id: str) -> tuple[Card, Category]:
        category = self.locate(card_id)
        return self.store.load(category, card_id), category

    def add_card(self, front: str, back: str, category: Category | None = None,
                 tags: list[str] | None = None, finished: bool = True) -> Card:
        card = Card.new(front, back, tags=tags, finished=finished)
        category = category or Category.root()
        # Fresh id, so there is nothing to resolve or relocate.
        self.store.save(card, category)
        self.cache.index_card(card, category)
        return card

    def save_card(self, card: Card, category: Category | None = None) -> pathlib.Path:
        """Write the whole card. Saving to a new category relocates the file."""
        current = self.cache.resolve(card.id).category
        if category is None:
            category = current or Category.root()
        path = self.store.save(card, category)
        if current is not None and current != category:
            self.store.delete(card.id, current)
        self.cache.index_card(card, category)
        if card.history:
            self.cache.index_strength(card)
        return path

    def move_card(self, card_id: str, category: Category) -> pathlib.Path:
        card, current = self.load_card(card_id)
        path = self.store.move(card_id, current, category)
        self.cache.index_card(card, category)
        return path

    def review_card(self, card_id: str, grade: Grade, time_spent: int = 0,
                    now: float | None = None) -> Card:
        """Record a review. The card file is rewritten before this returns."""
        now = time.time() if now is None else now
        card, category = self.load_card(card_id)
        scheduler.record_review(card, grade, now, time_spent)
        self.store.save(card, category)
        self.cache.index_card(card, category)
        self.cache.index_strength(card, now)
        return card

    def delete_card(self, card_id: str):
        category = self.locate(card_id)
        self.store.delete(card_id, category)
        self.cache.delete(card_id)

    def collect(self, category: Category | None = None,
                now: float | None = None) -> dict[str, list[tuple[Card, Category]]]:
        """Due, pending and unfinished cards in `category` and below."""
        now = time.time() if now is None else now
        groups = {scheduler.DUE: [], scheduler.PENDING: [], scheduler.UNFINISHED: []}
        for cat in self.store.tree.subcategories(category or Category.root()):
            for card, _ in self.store.cards_in_category(cat):
                kind = scheduler.classify(card, now)
                if kind is not None:
                    groups[kind].append((card, cat))
        return groups

    def reindex(self) -> dict:
        return self.cache.index_all()

    def import_csv(self, csv_path: pathlib.Path | str,
                   category: Category | None = None) -> list[Card]:
        if category is None:
            category = Category.from_user_input(str(self.settings["import_category"]))
        cards = read_csv(csv_path)
        for card in cards:
            self.store.save(card, category)
            self.cache.index_card(card, category)
        return cards

    def import_pending(self) -> list[Card]:
        """Import share_dir/import.csv if present, then rename it to imported.csv."""
        pending = self.share_dir / "import.csv"
        if not pending.exists():
            return []
        cards = self.import_csv(pending)
        pending.rename(self.share_dir / "imported.csv")
        return cards

    def close(self):
        """Close the cache connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self.cache = None
