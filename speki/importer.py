"""CSV import: bulk-create cards from `front,back,front_url,back_url,front_local,back_local` rows."""

import csv
import pathlib
import sys

from speki.models import AudioSource, Card, Side


def _column(row: list[str], index: int) -> str | None:
    if index < len(row):
        value = row[index].strip()
        return value or None
    return None


def read_csv(path: pathlib.Path | str) -> list[Card]:
    cards = []
    with open(path, newline="") as f:
        for lineno, row in enumerate(csv.reader(f), start=1):
            if len(row) < 2 or not row[0].strip():
                print(f"Warning: {path}:{lineno}: skipping row without front and back",
                      file=sys.stderr)
                continue
            front = Side(text=row[0], audio=AudioSource.from_parts(_column(row, 4), _column(row, 2)))
            back = Side(text=row[1], audio=AudioSource.from_parts(_column(row, 5), _column(row, 3)))
            cards.append(Card(front=front, back=back))
    return cards
