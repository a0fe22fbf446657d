"""
errors.py
~~~~~~~~~

Exception types raised by the network core, the weight codec, the dataset
loader and the session layer.
"""

from typing import Optional


class NetworkError(Exception):
    """Base class for every error raised by this package."""


class ShapeMismatchError(NetworkError, ValueError):
    """
    A vector's length does not match the width the network declares.

    Attributes:
        what: Which vector was rejected (e.g. ``'inputs'``, ``'targets'``)
        expected: The length the network expects
        actual: The length that was supplied
    """

    def __init__(self, what: str, expected: int, actual: int):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{what} must have length {expected}, got {actual}"
        )


class PersistenceFormatError(NetworkError, ValueError):
    """
    A weight file could not be parsed or does not fit the target network.

    Attributes:
        line_number: 1-based line number of the offending line, if any
        line: The offending line text, if any
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None
    ):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class DatasetFormatError(NetworkError, ValueError):
    """A dataset row has the wrong number of fields or a non-numeric field."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class UninitializedStateError(NetworkError, RuntimeError):
    """An operation was invoked before its prerequisites were set up."""
