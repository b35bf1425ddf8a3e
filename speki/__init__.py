"""speki: spaced repetition flashcards stored as plain files."""

__version__ = "0.1.0"

from speki.models import Card, Grade, Review
from speki.categories import Category
from speki.app import App

__all__ = ["App", "Card", "Category", "Grade", "Review"]
