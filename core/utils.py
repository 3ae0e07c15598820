"""Utility functions for jargon application."""


def fold(text: str | None) -> str:
    """Lowercase and trim user input. None becomes an empty string."""
    if text is None:
        return ''
    return text.strip().lower()


def has_suffix(text: str, suffix: str) -> bool:
    """Length-bounded suffix comparison."""
    n = len(suffix)
    if n > len(text):
        return False
    return text[len(text) - n:] == suffix


def has_prefix(text: str, prefix: str) -> bool:
    """Length-bounded prefix comparison."""
    n = len(prefix)
    if n > len(text):
        return False
    return text[:n] == prefix
