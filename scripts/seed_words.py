#!/usr/bin/env python3
"""Copy the JSON word list and pattern vocabulary into PostgreSQL."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server.file_storage import FileStorage, default_data_dir
from server.postgres_storage import PostgresStorage

logger = logging.getLogger(__name__)


def seed(source: FileStorage, target: PostgresStorage) -> tuple[int, int]:
    """Replace the database contents with the files' contents."""
    words = source.load_words()
    vocabulary = source.load_vocabulary()
    target.seed_words(words)
    target.seed_patterns(vocabulary)
    return len(words), len(vocabulary)


def main():
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description='Seed the jargon database from JSON files')
    parser.add_argument('--data-dir', default=default_data_dir(), help='Directory with words.json and patterns.json')
    parser.add_argument('--db-url', default=None, help='Database URL (default: $DATABASE_URL)')
    args = parser.parse_args()

    target = PostgresStorage(db_url=args.db_url)
    try:
        words, patterns = seed(FileStorage(args.data_dir), target)
    finally:
        target.close()
    print(f"Seeded {words} words and {patterns} patterns")
    return 0


if __name__ == '__main__':
    sys.exit(main())
