"""Word-ending and word-beginning index over a word list."""

from .config import MIN_AFFIX_LENGTH, MAX_AFFIX_LENGTH


class AffixIndex:
    """Maps every indexed ending and beginning to the words that show it.

    Keys are lowercase substrings of MIN_AFFIX_LENGTH..MAX_AFFIX_LENGTH
    characters. Buckets keep the original casing and the word list order.
    """

    def __init__(self, ends_by: dict[str, list[str]] = None,
                 starts_by: dict[str, list[str]] = None, word_count: int = 0):
        self.ends_by = ends_by if ends_by is not None else {}
        self.starts_by = starts_by if starts_by is not None else {}
        self.word_count = word_count

    def __len__(self) -> int:
        return self.word_count

    def words_ending_with(self, ending: str) -> list[str]:
        """Words whose lowercase form ends with `ending`."""
        return list(self.ends_by.get(ending.lower(), ()))

    def words_starting_with(self, beginning: str) -> list[str]:
        """Words whose lowercase form starts with `beginning`."""
        return list(self.starts_by.get(beginning.lower(), ()))


def build_index(words) -> AffixIndex:
    """Index all endings and beginnings of every word.

    Each word lands in one ends bucket and one starts bucket per length from
    MIN_AFFIX_LENGTH up to min(MAX_AFFIX_LENGTH, len(word)). Repeated words are
    indexed once per occurrence.
    """
    ends_by = {}
    starts_by = {}
    count = 0
    for word in words:
        count += 1
        lower = word.lower()
        for length in range(MIN_AFFIX_LENGTH, min(MAX_AFFIX_LENGTH, len(lower)) + 1):
            ends_by.setdefault(lower[-length:], []).append(word)
            starts_by.setdefault(lower[:length], []).append(word)
    return AffixIndex(ends_by, starts_by, count)
