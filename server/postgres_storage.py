"""PostgreSQL storage implementation."""

import logging
import os

import psycopg2
from psycopg2.extras import RealDictCursor, execute_values

from core.interfaces import WordSource

logger = logging.getLogger(__name__)


class PostgresStorage(WordSource):
    """PostgreSQL-backed word list and pattern vocabulary."""

    def __init__(self, db_url: str = None):
        self.db_url = db_url or os.environ.get(
            'DATABASE_URL',
            'postgresql://localhost:5432/jargon'
        )
        self._conn = None
        self._initialized = False

    @property
    def conn(self):
        """Lazy connection initialization."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            if not self._initialized:
                self._init_db()
                self._initialized = True
        return self._conn

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._conn.cursor() as cur:
            # Word list in dictionary order
            cur.execute("""
                CREATE TABLE IF NOT EXISTS words (
                    position INTEGER PRIMARY KEY,
                    word VARCHAR(255) NOT NULL
                )
            """)
            # Pattern vocabulary in vocabulary order
            cur.execute("""
                CREATE TABLE IF NOT EXISTS patterns (
                    position INTEGER PRIMARY KEY,
                    pattern VARCHAR(64) NOT NULL,
                    length INTEGER NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_patterns_pattern ON patterns(pattern)
            """)
        self._conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_words(self) -> list[str]:
        try:
            with self.conn.cursor() as cur:
                cur.execute("SELECT word FROM words ORDER BY position")
                rows = cur.fetchall()
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error loading words: {e}")
            self.conn.rollback()
            raise
        return [row[0] for row in rows]

    def load_vocabulary(self) -> dict:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT pattern, length FROM patterns ORDER BY position")
                rows = cur.fetchall()
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error loading patterns: {e}")
            self.conn.rollback()
            raise
        return {row['pattern']: {'length': row['length']} for row in rows}

    def seed_words(self, words: list[str]) -> None:
        """Replace the stored word list."""
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM words")
                execute_values(
                    cur,
                    "INSERT INTO words (position, word) VALUES %s",
                    list(enumerate(words))
                )
            self.conn.commit()
            logger.info(f"Seeded {len(words)} words")
        except Exception as e:
            logger.error(f"Error seeding words: {e}")
            self.conn.rollback()
            raise

    def seed_patterns(self, vocabulary: dict) -> None:
        """Replace the stored pattern vocabulary."""
        rows = [
            (position, pattern, int(entry['length']))
            for position, (pattern, entry) in enumerate(vocabulary.items())
        ]
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM patterns")
                execute_values(
                    cur,
                    "INSERT INTO patterns (position, pattern, length) VALUES %s",
                    rows
                )
            self.conn.commit()
            logger.info(f"Seeded {len(rows)} patterns")
        except Exception as e:
            logger.error(f"Error seeding patterns: {e}")
            self.conn.rollback()
            raise
