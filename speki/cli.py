"""CLI: command-line interface for speki."""

import argparse
import datetime
import sys

from speki import scheduler
from speki.app import App
from speki.categories import Category
from speki.models import Grade
from speki.store import CardNotFound, CardParseError


def _category(value: str) -> Category:
    try:
        return Category.from_user_input(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _label(category: Category) -> str:
    return "(root)" if category.is_root() else category.joined()


def cmd_add(args, app: App):
    card = app.add_card(args.front, args.back, args.category,
                        tags=args.tag, finished=not args.unfinished)
    print(card.id)


def cmd_show(args, app: App):
    card, category = app.load_card(args.id)
    print(f"Category: {_label(category)}")
    print(f"Front:    {card.front.text}")
    print(f"Back:     {card.back.text}")
    if card.meta.tags:
        print(f"Tags:     {', '.join(card.meta.tags)}")
    if card.meta.stability is not None:
        days = card.meta.stability.total_seconds() / 86400
        print(f"Stability: {days:.2f} days")
    value = scheduler.strength(card)
    if value is not None:
        print(f"Strength: {value:.3f}")
    print(f"Reviews:  {len(card.history)}")
    for review in card.history:
        ts = datetime.datetime.fromtimestamp(review.timestamp).strftime("%Y-%m-%d %H:%M")
        print(f"  {ts}  {review.grade.value}")


def cmd_review(args, app: App):
    try:
        grade = Grade.parse(args.grade)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(2)
    card = app.review_card(args.id, grade, time_spent=args.time_spent)
    days = card.meta.stability.total_seconds() / 86400
    print(f"Recorded {grade.value}; next review in about {days:.1f} days")


def cmd_due(args, app: App):
    groups = app.collect(args.category)
    for kind in (scheduler.DUE, scheduler.PENDING, scheduler.UNFINISHED):
        entries = groups[kind]
        print(f"{kind.capitalize()}: {len(entries)}")
        for card, category in entries:
            print(f"  {card.id}  [{_label(category)}]  {card.front.text}")


def cmd_delete(args, app: App):
    app.delete_card(args.id)
    print(f"Deleted {args.id}")


def cmd_move(args, app: App):
    app.move_card(args.id, args.category)
    print(f"Moved {args.id} to {_label(args.category)}")


def cmd_search(args, app: App):
    rows = app.cache.search(args.text)
    for row in rows:
        print(f"  {row['id']}  [{row['category'] or '(root)'}]  {row['front_text']}")
    print(f"{len(rows)} match(es)")


def cmd_categories(args, app: App):
    for category in app.store.tree.enumerate_all(sort=True):
        count = len(app.store.ids_in_category(category))
        print(f"{category.display_with_depth()} ({count})")


def cmd_reindex(args, app: App):
    stats = app.reindex()
    print(f"Indexed: {stats['indexed']} cards, {stats['strength']} scored, "
          f"{stats['removed']} stale removed")


def cmd_status(args, app: App):
    counts = app.cache.counts()
    groups = app.collect()
    print(f"Cards:      {counts['cards']} indexed ({counts['scored']} scored)")
    print(f"Due now:    {len(groups[scheduler.DUE])}")
    print(f"Pending:    {len(groups[scheduler.PENDING])}")
    print(f"Unfinished: {len(groups[scheduler.UNFINISHED])}")
    weakest = app.cache.weakest(5)
    if weakest:
        print("\nWeakest:")
        for row in weakest:
            print(f"  {row['strength_value']:.3f}  {row['front_text']}")


def cmd_import(args, app: App):
    cards = app.import_csv(args.csv, args.category)
    print(f"Imported {len(cards)} card(s)")


COMMANDS = {
    "add": cmd_add,
    "show": cmd_show,
    "review": cmd_review,
    "due": cmd_due,
    "delete": cmd_delete,
    "move": cmd_move,
    "search": cmd_search,
    "categories": cmd_categories,
    "reindex": cmd_reindex,
    "status": cmd_status,
    "import": cmd_import,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="speki", description="Spaced repetition flashcards")
    subparsers = parser.add_subparsers(dest="command")

    p_add = subparsers.add_parser("add", help="Create a card")
    p_add.add_argument("front")
    p_add.add_argument("back")
    p_add.add_argument("--category", type=_category, help="Category path, e.g. maths/calculus")
    p_add.add_argument("--tag", action="append", default=[], help="Tag (repeatable)")
    p_add.add_argument("--unfinished", action="store_true", help="Mark the card unfinished")

    p_show = subparsers.add_parser("show", help="Show a card and its history")
    p_show.add_argument("id")

    p_review = subparsers.add_parser("review", help="Record a review grade for a card")
    p_review.add_argument("id")
    p_review.add_argument("grade", help="1-4 or none/late/some/perfect")
    p_review.add_argument("--time-spent", type=int, default=0, help="Seconds spent recalling")

    p_due = subparsers.add_parser("due", help="List due, pending and unfinished cards")
    p_due.add_argument("--category", type=_category, help="Limit to a category and its subcategories")

    p_delete = subparsers.add_parser("delete", help="Delete a card")
    p_delete.add_argument("id")

    p_move = subparsers.add_parser("move", help="Move a card to another category")
    p_move.add_argument("id")
    p_move.add_argument("category", type=_category)

    p_search = subparsers.add_parser("search", help="Find cards whose front text contains TEXT")
    p_search.add_argument("text")

    subparsers.add_parser("categories", help="List categories with card counts")
    subparsers.add_parser("reindex", help="Rebuild the cache from the card files")
    subparsers.add_parser("status", help="Show card counts")

    p_import = subparsers.add_parser("import", help="Import cards from a CSV file")
    p_import.add_argument("csv")
    p_import.add_argument("--category", type=_category,
                          help="Target category (default: import_category setting)")
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    app = App()
    if not app.share_dir.exists():
        app.share_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created speki directory: {app.share_dir}")
    app.init_cache()

    try:
        imported = app.import_pending()
        if imported:
            print(f"Imported {len(imported)} card(s) from import.csv")
        COMMANDS[args.command](args, app)
    except (CardNotFound, CardParseError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        app.close()
