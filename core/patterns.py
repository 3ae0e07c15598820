"""Pattern aggregation, rarity tiers and browsing filters."""

import logging
import math

from .config import (
    MIN_PATTERN_OCCURRENCES, PAGE_SIZE,
    ULTRA_RARE_MAX, RARE_MAX, UNCOMMON_MAX, COMMON_MAX
)
from .indexer import AffixIndex
from .utils import has_prefix, has_suffix

logger = logging.getLogger(__name__)

ULTRA_RARE = 'ultra-rare'
RARE = 'rare'
UNCOMMON = 'uncommon'
COMMON = 'common'
VERY_COMMON = 'very-common'

RARITY_TIERS = [ULTRA_RARE, RARE, UNCOMMON, COMMON, VERY_COMMON]

RARITY_LABELS = {
    ULTRA_RARE: f'Ultra Rare (≤{ULTRA_RARE_MAX})',
    RARE: f'Rare (≤{RARE_MAX})',
    UNCOMMON: f'Uncommon (≤{UNCOMMON_MAX})',
    COMMON: f'Common (≤{COMMON_MAX})',
    VERY_COMMON: f'Very Common (>{COMMON_MAX})',
}


class PatternRecord:
    """One pattern with the words that end and start with it."""

    def __init__(self, pattern: str, length: int, ends_words: list[str],
                 starts_words: list[str], length_mismatch: bool = False):
        self.pattern = pattern
        self.length = length
        self.ends_words = list(ends_words)
        self.starts_words = list(starts_words)
        self.length_mismatch = length_mismatch

    @property
    def ends_count(self) -> int:
        return len(self.ends_words)

    @property
    def starts_count(self) -> int:
        return len(self.starts_words)

    @property
    def total_count(self) -> int:
        return self.ends_count + self.starts_count

    @property
    def rarity(self) -> str:
        return classify_rarity(self.total_count)

    def to_dict(self) -> dict:
        return {
            'pattern': self.pattern,
            'length': self.length,
            'ends_words': list(self.ends_words),
            'starts_words': list(self.starts_words),
            'ends_count': self.ends_count,
            'starts_count': self.starts_count,
            'total_count': self.total_count,
            'rarity': self.rarity,
            'length_mismatch': self.length_mismatch
        }

    def __repr__(self):
        return f"<PatternRecord {self.pattern} ({self.total_count})>"


def _declared_length(pattern: str, entry) -> int:
    """Read the length field of a vocabulary entry (dict or object)."""
    if isinstance(entry, dict):
        length = entry.get('length')
    else:
        length = getattr(entry, 'length', None)
    if isinstance(length, bool) or not isinstance(length, int):
        raise ValueError(f"Pattern '{pattern}' has no integer length: {length!r}")
    return length


def aggregate_patterns(index: AffixIndex, vocabulary: dict) -> list[PatternRecord]:
    """Build one record per vocabulary pattern seen at least twice.

    Records come back rarest first. Python's sort is stable, so patterns with
    equal totals keep their vocabulary order. Patterns that differ only in case
    share one record: the later entry wins, the first position is kept.
    """
    records = {}
    mismatches = 0
    for pattern, entry in vocabulary.items():
        length = _declared_length(pattern, entry)
        lower = pattern.lower()
        ends_words = index.ends_by.get(lower, [])
        starts_words = index.starts_by.get(lower, [])
        if len(ends_words) + len(starts_words) < MIN_PATTERN_OCCURRENCES:
            continue
        mismatch = length != len(lower)
        if mismatch:
            mismatches += 1
            logger.warning(f"Pattern '{lower}' declares length {length} but has {len(lower)} characters")
        records[lower] = PatternRecord(lower, length, ends_words, starts_words, mismatch)

    if mismatches:
        logger.warning(f"{mismatches} patterns have a declared length that differs from their text")
    return sorted(records.values(), key=lambda record: record.total_count)


def classify_rarity(count: int) -> str:
    """Map an occurrence count to its rarity tier."""
    if count <= ULTRA_RARE_MAX:
        return ULTRA_RARE
    if count <= RARE_MAX:
        return RARE
    if count <= UNCOMMON_MAX:
        return UNCOMMON
    if count <= COMMON_MAX:
        return COMMON
    return VERY_COMMON


def filter_patterns(records: list[PatternRecord], query: str = None, length: int = None,
                    rarity: str = None) -> list[PatternRecord]:
    """Apply the browse filters. All given filters must match.

    `query` matches the pattern text itself: a record is kept when its pattern
    ends or starts with the lowercased query.
    """
    if rarity is not None and rarity not in RARITY_TIERS:
        raise ValueError(f"Unknown rarity tier: {rarity}")

    filtered = list(records)
    if query and query.strip():
        q = query.lower()
        filtered = [r for r in filtered if has_suffix(r.pattern, q) or has_prefix(r.pattern, q)]
    if length is not None:
        filtered = [r for r in filtered if r.length == length]
    if rarity is not None:
        filtered = [r for r in filtered if classify_rarity(r.total_count) == rarity]
    return filtered


def find_pattern(records: list[PatternRecord], pattern: str) -> PatternRecord | None:
    """Find a record by pattern text, ignoring case."""
    lower = pattern.lower()
    for record in records:
        if record.pattern == lower:
            return record
    return None


class PatternPage:
    """One window of a filtered pattern list."""

    def __init__(self, items: list[PatternRecord], page: int, page_size: int, total: int):
        self.items = items
        self.page = page
        self.page_size = page_size
        self.total = total

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def first(self) -> int:
        """1-based position of the first item shown (0 when empty)."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last(self) -> int:
        """1-based position of the last item shown (0 when empty)."""
        if not self.items:
            return 0
        return min(self.page * self.page_size, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self) -> dict:
        return {
            'items': [r.to_dict() for r in self.items],
            'page': self.page,
            'page_size': self.page_size,
            'total': self.total,
            'total_pages': self.total_pages,
            'first': self.first,
            'last': self.last,
            'has_previous': self.has_previous,
            'has_next': self.has_next
        }


def paginate(records: list[PatternRecord], page: int = 1, page_size: int = PAGE_SIZE) -> PatternPage:
    """Cut a 1-indexed page out of `records`. Out of range pages are clamped."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    total_pages = max(1, math.ceil(len(records) / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return PatternPage(records[start:start + page_size], page, page_size, len(records))


class PatternBrowser:
    """Browse state over a fixed set of records.

    Any filter change sends the browser back to page 1.
    """

    def __init__(self, records: list[PatternRecord], page_size: int = PAGE_SIZE):
        self.records = records
        self.page_size = page_size
        self.query = None
        self.length = None
        self.rarity = None
        self.page = 1
        self.expanded = None
        self._filtered = list(records)

    def set_filters(self, query: str = None, length: int = None, rarity: str = None) -> None:
        """Replace all filters and go back to the first page."""
        filtered = filter_patterns(self.records, query, length, rarity)
        self.query = query
        self.length = length
        self.rarity = rarity
        self._filtered = filtered
        self.page = 1

    def filtered(self) -> list[PatternRecord]:
        return list(self._filtered)

    def current_page(self) -> PatternPage:
        window = paginate(self._filtered, self.page, self.page_size)
        self.page = window.page
        return window

    def next_page(self) -> PatternPage:
        window = self.current_page()
        if window.has_next:
            self.page += 1
        return self.current_page()

    def previous_page(self) -> PatternPage:
        if self.page > 1:
            self.page -= 1
        return self.current_page()

    def toggle_expand(self, pattern: str) -> str | None:
        """Expand a pattern's word lists, or collapse it if already expanded."""
        lower = pattern.lower()
        self.expanded = None if self.expanded == lower else lower
        return self.expanded
