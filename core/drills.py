"""Split pattern records into drillable prefix and suffix patterns."""

from .config import (
    DRILL_MIN_COUNT, DRILL_MAX_COUNT, DRILL_MIN_LENGTH,
    SIDE_ENDS, SIDE_STARTS, SIDE_ALL, SIDES
)
from .utils import fold, has_prefix, has_suffix


class DrillablePattern:
    """One side of a pattern record that can be quizzed."""

    def __init__(self, pattern: str, side: str, length: int, words: list[str]):
        self.pattern = pattern
        self.side = side
        self.length = length
        self.words = tuple(words)

    @property
    def count(self) -> int:
        return len(self.words)

    @property
    def key(self) -> str:
        return pattern_key(self.pattern, self.side)

    def display(self) -> str:
        """Pattern text with a dash on the open side, e.g. '-ING' or 'PRE-'."""
        text = self.pattern.upper()
        return f"-{text}" if self.side == SIDE_ENDS else f"{text}-"

    def build_word(self, fragment: str) -> str:
        """Complete a user fragment into a full word on the open side."""
        if self.side == SIDE_ENDS:
            return fragment + self.pattern
        return self.pattern + fragment

    def to_dict(self) -> dict:
        return {
            'key': self.key,
            'pattern': self.pattern,
            'side': self.side,
            'length': self.length,
            'words': list(self.words),
            'count': self.count,
            'display': self.display()
        }

    def __repr__(self):
        return f"<DrillablePattern {self.key} ({self.count})>"


def pattern_key(pattern: str, side: str) -> str:
    """Selection key for a drillable pattern, e.g. 'ing_ends'."""
    return f"{pattern}_{side}"


def parse_pattern_key(key: str) -> tuple[str, str]:
    """Split a selection key back into (pattern, side)."""
    pattern, sep, side = key.rpartition('_')
    if not sep or not pattern or side not in SIDES:
        raise ValueError(f"Invalid pattern key: {key}")
    return pattern, side


def _drillable(count: int, length: int) -> bool:
    return DRILL_MIN_COUNT <= count <= DRILL_MAX_COUNT and length >= DRILL_MIN_LENGTH


def build_drill_set(records, side: str = SIDE_ALL, affix_query: str = None) -> list[DrillablePattern]:
    """Turn pattern records into drillable patterns.

    Each record yields an ends entry then a starts entry, for every side whose
    word count is within DRILL_MIN_COUNT..DRILL_MAX_COUNT on a pattern of at
    least DRILL_MIN_LENGTH characters. With an affix query, ends entries must
    end with it and starts entries must start with it.
    """
    if side not in (SIDE_ALL,) + SIDES:
        raise ValueError(f"Unknown side: {side}")

    patterns = []
    for record in records:
        if side in (SIDE_ALL, SIDE_ENDS) and _drillable(record.ends_count, record.length):
            patterns.append(DrillablePattern(record.pattern, SIDE_ENDS, record.length, record.ends_words))
        if side in (SIDE_ALL, SIDE_STARTS) and _drillable(record.starts_count, record.length):
            patterns.append(DrillablePattern(record.pattern, SIDE_STARTS, record.length, record.starts_words))

    query = fold(affix_query)
    if query:
        patterns = [
            p for p in patterns
            if (p.side == SIDE_ENDS and has_suffix(p.pattern, query))
            or (p.side == SIDE_STARTS and has_prefix(p.pattern, query))
        ]
    return patterns
