from .catalog import PatternCatalog
from .drills import DrillablePattern, build_drill_set, pattern_key, parse_pattern_key
from .errors import JargonError, LoadFailure, EmptySelection
from .indexer import AffixIndex, build_index
from .interfaces import WordSource
from .patterns import (
    PatternRecord, PatternPage, PatternBrowser,
    aggregate_patterns, classify_rarity, filter_patterns, find_pattern, paginate,
    RARITY_TIERS, RARITY_LABELS
)
from .session import LearningSession

__all__ = [
    'PatternCatalog',
    'DrillablePattern', 'build_drill_set', 'pattern_key', 'parse_pattern_key',
    'JargonError', 'LoadFailure', 'EmptySelection',
    'AffixIndex', 'build_index',
    'WordSource',
    'PatternRecord', 'PatternPage', 'PatternBrowser',
    'aggregate_patterns', 'classify_rarity', 'filter_patterns', 'find_pattern', 'paginate',
    'RARITY_TIERS', 'RARITY_LABELS',
    'LearningSession'
]
