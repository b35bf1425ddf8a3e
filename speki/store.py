"""Card store: one YAML file per card, laid out along the category tree."""

import pathlib
import sys
from typing import Iterator

import yaml

from speki.categories import Category, CategoryTree
from speki.models import Card

CARD_EXT = ".yaml"


class CardNotFound(LookupError):
    def __init__(self, card_id: str, path: pathlib.Path | None = None):
        self.card_id = card_id
        self.path = path
        super().__init__(f"No such card: {card_id}")


class CardParseError(ValueError):
    def __init__(self, path: pathlib.Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


def dump_card(card: Card) -> str:
    return yaml.safe_dump(card.to_dict(), sort_keys=False, allow_unicode=True)


def parse_card(text: str, path: pathlib.Path) -> Card:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CardParseError(path, str(e)) from e
    if not isinstance(data, dict):
        raise CardParseError(path, "not a mapping")
    try:
        return Card.from_dict(data)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise CardParseError(path, f"{type(e).__name__}: {e}") from e


class CardStore:
    """Filesystem operations on card files.

    Files are keyed by card id (`<id>.yaml`), so two cards with the same
    front text never collide inside a category.
    """

    def __init__(self, root: pathlib.Path | str):
        self.tree = CategoryTree(root)

    @property
    def root(self) -> pathlib.Path:
        return self.tree.root

    def path_for(self, category: Category, card_id: str) -> pathlib.Path:
        return self.tree.resolve_to_path(category) / f"{card_id}{CARD_EXT}"

    def exists(self, category: Category, card_id: str) -> bool:
        return self.path_for(category, card_id).is_file()

    def locate(self, card_id: str) -> Category | None:
        """Full scan of the tree for `<card_id>.yaml`.

        O(total files); only used when the cache cannot answer.
        """
        for category in self.tree.enumerate_all():
            if self.exists(category, card_id):
                return category
        return None

    def load(self, category: Category, card_id: str) -> Card:
        return self.load_path(self.path_for(category, card_id), card_id)

    def load_path(self, path: pathlib.Path, card_id: str | None = None) -> Card:
        path = pathlib.Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CardNotFound(card_id or path.stem, path) from None
        except UnicodeDecodeError as e:
            raise CardParseError(path, f"not valid UTF-8: {e}") from e
        return parse_card(text, path)

    def save(self, card: Card, category: Category) -> pathlib.Path:
        self.tree.create(category)
        path = self.path_for(category, card.id)
        path.write_text(dump_card(card), encoding="utf-8")
        return path

    def delete(self, card_id: str, category: Category | None = None) -> pathlib.Path:
        """Remove the card file. Dependency ids held by other cards are left alone."""
        if category is None:
            category = self.locate(card_id)
            if category is None:
                raise CardNotFound(card_id)
        path = self.path_for(category, card_id)
        try:
            path.unlink()
        except FileNotFoundError:
            raise CardNotFound(card_id, path) from None
        return path

    def move(self, card_id: str, src: Category, dst: Category) -> pathlib.Path:
        if src == dst:
            return self.path_for(dst, card_id)
        old_path = self.path_for(src, card_id)
        if not old_path.is_file():
            raise CardNotFound(card_id, old_path)
        self.tree.create(dst)
        new_path = self.path_for(dst, card_id)
        old_path.rename(new_path)
        return new_path

    def card_paths(self, category: Category) -> list[pathlib.Path]:
        directory = self.tree.resolve_to_path(category)
        try:
            entries = sorted(directory.iterdir())
        except FileNotFoundError:
            return []
        return [p for p in entries if p.is_file() and p.suffix == CARD_EXT]

    def ids_in_category(self, category: Category) -> list[str]:
        return [p.stem for p in self.card_paths(category)]

    def all_ids(self) -> set[str]:
        """Ids of every card file present, whether or not it parses."""
        return {p.stem for category in self.tree.enumerate_all()
                for p in self.card_paths(category)}

    def cards_in_category(self, category: Category) -> Iterator[tuple[Card, float]]:
        """Cards directly in `category` with their mtime.

        A file that vanished or fails to parse is reported and skipped.
        """
        for path in self.card_paths(category):
            try:
                mtime = path.stat().st_mtime
                card = self.load_path(path)
            except (CardNotFound, FileNotFoundError):
                print(f"Warning: {path} disappeared while reading", file=sys.stderr)
                continue
            except CardParseError as e:
                print(f"Warning: skipping {path}: {e.reason}", file=sys.stderr)
                continue
            yield card, mtime

    def enumerate_all(self) -> Iterator[tuple[Card, Category, float]]:
        """Every card in the store. Each call performs a fresh walk."""
        for category in self.tree.enumerate_all(sort=True):
            for card, mtime in self.cards_in_category(category):
                yield card, category, mtime
