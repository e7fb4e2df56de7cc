"""
Exceptions raised by the Black-Litterman model.
"""

from typing import Optional, Tuple, Union

Shape = Union[int, Tuple[int, ...]]


class BlackLittermanError(Exception):
    """Base exception for all Black-Litterman errors."""
    pass


class DimensionMismatchError(BlackLittermanError, ValueError):
    """Two inputs that must share a dimension disagree."""

    def __init__(self, message: str, first: Optional[str] = None,
                 second: Optional[str] = None,
                 expected: Optional[Shape] = None,
                 actual: Optional[Shape] = None):
        if expected is not None and actual is not None:
            message = f"{message} (expected {expected}, got {actual})"
        super().__init__(f"Dimension mismatch: {message}")
        self.first = first
        self.second = second
        self.expected = expected
        self.actual = actual


class MatrixInversionError(BlackLittermanError, ArithmeticError):
    """Matrix is singular or too ill-conditioned to invert."""

    def __init__(self, matrix_name: str, reason: str):
        super().__init__(f"Matrix inversion failed for {matrix_name}: {reason}")
        self.matrix_name = matrix_name
        self.reason = reason


class InvalidInputError(BlackLittermanError, ValueError):
    """Input value is non-numeric, non-finite or out of range."""
    pass
