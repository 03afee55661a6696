class BoggleError(Exception):
    """Base class for solver errors."""


class DictionaryNotLoadedError(BoggleError):
    """Raised when solving without a dictionary, or when one cannot be read."""

    def __init__(self, message: str = "Dictionary not successfully loaded"):
        super().__init__(message)


class InvalidBoardError(BoggleError, ValueError):
    pass


class InvalidWordError(BoggleError, ValueError):
    pass


class SolveCancelledError(BoggleError):
    pass


class IndexInUseError(BoggleError):
    """Raised when a dictionary index is already owned by another solver."""
