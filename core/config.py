"""Configuration constants for jargon application."""

# Affix indexing
MIN_AFFIX_LENGTH = 2  # Shortest word ending/beginning that gets indexed
MAX_AFFIX_LENGTH = 8  # Longest word ending/beginning that gets indexed

# Aggregation
MIN_PATTERN_OCCURRENCES = 2  # Patterns seen fewer times than this are dropped

# Rarity tiers (inclusive upper bounds on total occurrences)
ULTRA_RARE_MAX = 5
RARE_MAX = 10
UNCOMMON_MAX = 50
COMMON_MAX = 200

# Browsing
PAGE_SIZE = 100

# Drill selection
DRILL_MIN_COUNT = 2    # A side needs at least this many words to be drilled
DRILL_MAX_COUNT = 15   # ...and no more than this
DRILL_MIN_LENGTH = 3   # Patterns shorter than this are never drilled

# Repeat after me
REPEATS_BEFORE_HIDE = 3  # Visible repetitions before a word is tested from memory

# Pattern sides
SIDE_ENDS = 'ends'
SIDE_STARTS = 'starts'
SIDE_ALL = 'all'
SIDES = (SIDE_ENDS, SIDE_STARTS)

# Drill modes
MODE_FIND = 'find'
MODE_REPEAT = 'repeat'
MODES = (MODE_FIND, MODE_REPEAT)
