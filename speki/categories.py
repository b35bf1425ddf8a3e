"""Category tree: the nested directories cards are grouped into."""

import os
import pathlib
from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """Ordered path segments naming a directory below the store root.

    The empty tuple is the root category.
    """
    segments: tuple[str, ...] = ()

    def __post_init__(self):
        for segment in self.segments:
            if not is_valid_segment(segment):
                raise ValueError(f"Invalid category segment: {segment!r}")

    @classmethod
    def root(cls) -> "Category":
        return cls(())

    @classmethod
    def from_string(cls, s: str) -> "Category":
        return cls(tuple(part for part in s.split("/") if part))

    @classmethod
    def from_user_input(cls, s: str) -> "Category":
        """Parse a typed category path, normalizing every segment."""
        segments = []
        for part in s.split("/"):
            if not part.strip():
                continue
            name = normalize_category_name(part)
            if not name:
                raise ValueError(f"Invalid category name: {part!r}")
            segments.append(name)
        return cls(tuple(segments))

    def joined(self) -> str:
        return "/".join(self.segments)

    def is_root(self) -> bool:
        return not self.segments

    def is_within(self, other: "Category") -> bool:
        """True if this category is `other` or one of its descendants."""
        n = len(other.segments)
        return self.segments[:n] == other.segments

    def name(self) -> str:
        return self.segments[-1] if self.segments else "root"

    def display_with_depth(self) -> str:
        return "  " * len(self.segments) + self.name()

    def __str__(self) -> str:
        return self.joined()


def is_valid_segment(segment: str) -> bool:
    if segment in ("", ".", ".."):
        return False
    return not any(sep and sep in segment for sep in ("/", os.sep, os.altsep))


def normalize_category_name(name: str) -> str:
    return "".join(c for c in name if (c.isascii() and c.isalnum()) or c == " ").strip()


class CategoryTree:
    def __init__(self, root: pathlib.Path | str):
        self.root = pathlib.Path(root)

    def resolve_to_path(self, category: Category) -> pathlib.Path:
        """Directory for `category`. No check that it exists."""
        return self.root.joinpath(*category.segments)

    def create(self, category: Category) -> pathlib.Path:
        path = self.resolve_to_path(category)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def enumerate_all(self, sort: bool = False) -> list[Category]:
        """Every directory under the root, the root included, empty ones too."""
        categories = [Category.root()]
        if self.root.is_dir():
            for dirpath, dirnames, _ in os.walk(self.root):
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
                rel = pathlib.Path(dirpath).relative_to(self.root)
                for d in dirnames:
                    categories.append(Category(rel.parts + (d,)))
        if sort:
            categories.sort(key=Category.joined)
        return categories

    def subcategories(self, category: Category) -> list[Category]:
        return [c for c in self.enumerate_all(sort=True) if c.is_within(category)]
