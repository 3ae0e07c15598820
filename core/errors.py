"""Exceptions raised by the jargon core."""


class JargonError(Exception):
    """Base class for jargon errors."""


class LoadFailure(JargonError):
    """The word list or pattern vocabulary could not be loaded.

    Fatal for the catalog: nothing built from a failed load is ever used.
    """


class EmptySelection(JargonError):
    """A session was started without any selected patterns."""

    def __init__(self, message: str = "No patterns selected"):
        super().__init__(message)
