"""Seed the dictionary from a CSV file or the built-in starter list."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from loguru import logger

from flashcards.db.session import SessionLocal
from flashcards.services.dictionary_import import DictionaryImporter
from flashcards.utils.exceptions import FlashcardsException


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "csv_path",
        nargs="?",
        help="CSV with term,translation,example_sentence columns",
    )
    parser.add_argument(
        "--starter",
        action="store_true",
        help="Load the built-in starter words instead of a CSV file",
    )
    parser.add_argument("--batch-size", type=int, default=100)
    args = parser.parse_args(argv)
    if not args.csv_path and not args.starter:
        parser.error("provide a CSV path or --starter")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    db = SessionLocal()
    try:
        importer = DictionaryImporter(db, batch_size=args.batch_size)
        if args.starter:
            report = importer.seed_starter_words()
        else:
            report = importer.import_csv(args.csv_path)
    except FlashcardsException as exc:
        logger.error(f"Dictionary import failed: {exc.message}")
        return 1
    finally:
        db.close()

    print(f"Created {report.created} entries, skipped {report.skipped}, invalid {len(report.invalid)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
