"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod


class WordSource(ABC):
    """Abstract base class for word list and pattern vocabulary storage."""

    @abstractmethod
    def load_words(self) -> list[str]:
        """Load the word list. Returns words in dictionary order."""
        pass

    @abstractmethod
    def load_vocabulary(self) -> dict:
        """Load the pattern vocabulary.
        Returns {pattern: {'length': int, ...}} in vocabulary order."""
        pass
