"""Pattern catalog: the loaded word list with its index and pattern records."""

import logging
import time
from datetime import datetime, timezone

from .errors import LoadFailure
from .indexer import AffixIndex, build_index
from .interfaces import WordSource
from .patterns import PatternRecord, aggregate_patterns

logger = logging.getLogger(__name__)


def _check_words(words) -> list[str]:
    if not isinstance(words, list):
        raise LoadFailure(f"Word list must be a list, got {type(words).__name__}")
    for word in words:
        if not isinstance(word, str):
            raise LoadFailure(f"Word list contains a non-string entry: {word!r}")
    return words


def _check_vocabulary(vocabulary) -> dict:
    if not isinstance(vocabulary, dict):
        raise LoadFailure(f"Pattern vocabulary must be a mapping, got {type(vocabulary).__name__}")
    return vocabulary


class PatternCatalog:
    """Holds everything built from one word list and pattern vocabulary.

    Built wholesale by load(); a failed load keeps whatever was there before
    and never exposes a partial index. Nothing can be queried before the first
    successful load.
    """

    def __init__(self):
        self._index = None
        self._records = None
        self.vocabulary_size = 0
        self.loaded_at = None
        self.load_ms = 0

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    @property
    def index(self) -> AffixIndex:
        if self._index is None:
            raise LoadFailure("Word list has not been loaded")
        return self._index

    @property
    def records(self) -> list[PatternRecord]:
        if self._records is None:
            raise LoadFailure("Pattern vocabulary has not been loaded")
        return self._records

    def load(self, source: WordSource) -> list[PatternRecord]:
        """Load both inputs and rebuild the index and the records."""
        start_time = time.time()
        try:
            words = _check_words(source.load_words())
            vocabulary = _check_vocabulary(source.load_vocabulary())
            index = build_index(words)
            records = aggregate_patterns(index, vocabulary)
        except LoadFailure:
            logger.error("Catalog load failed", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Catalog load failed: {type(e).__name__}: {e}")
            raise LoadFailure(f"{type(e).__name__}: {e}") from e

        self._index = index
        self._records = records
        self.vocabulary_size = len(vocabulary)
        self.loaded_at = datetime.now(timezone.utc)
        self.load_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Loaded {len(index)} words, {len(vocabulary)} patterns -> "
                    f"{len(records)} records in {self.load_ms}ms")
        return records

    def status(self) -> dict:
        if not self.is_loaded:
            return {'loaded': False}
        return {
            'loaded': True,
            'word_count': len(self._index),
            'vocabulary_size': self.vocabulary_size,
            'record_count': len(self._records),
            'length_mismatches': sum(1 for r in self._records if r.length_mismatch),
            'loaded_at': self.loaded_at.isoformat(),
            'load_ms': self.load_ms
        }
