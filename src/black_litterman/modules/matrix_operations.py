"""
Matrix operations module for Black-Litterman calculations.
Provides the dense linear-algebra building blocks (products, sums,
inversion, vector/column reshaping) used by the return calculators.
"""

import numpy as np
from scipy import linalg
import logging
from typing import Union

from .exceptions import DimensionMismatchError, MatrixInversionError

logger = logging.getLogger(__name__)

Operand = Union[float, np.ndarray]


class MatrixOperations:
    """Handles all matrix operations for Black-Litterman calculations"""

    def __init__(self, max_condition_number: float = 1e15):
        self.max_condition_number = max_condition_number

    def transpose(self, matrix: np.ndarray) -> np.ndarray:
        """Return the transpose of a rectangular matrix"""
        return np.transpose(np.asarray(matrix, dtype=float))

    def multiply(self, a: Operand, b: Operand) -> Operand:
        """
        Multiply scalar x matrix, matrix x matrix or matrix x column matrix.

        Inner dimensions are not checked here; callers validate shapes
        before calling.
        """
        if np.isscalar(a) or np.isscalar(b):
            return np.multiply(a, b)
        return np.matmul(np.asarray(a, dtype=float), np.asarray(b, dtype=float))

    def add(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Element-wise sum of two equally shaped matrices"""
        a, b = self._same_shape(a, b, 'add')
        return a + b

    def subtract(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Element-wise difference of two equally shaped matrices"""
        a, b = self._same_shape(a, b, 'subtract')
        return a - b

    def _same_shape(self, a, b, operation: str):
        a = np.asarray(a, dtype=float)
        b = np.asarray(b, dtype=float)
        # No broadcasting: a (K,) vector and a (K, 1) column must not combine
        if a.shape != b.shape:
            raise DimensionMismatchError(
                f"cannot {operation} operands of different shapes",
                first='left operand', second='right operand',
                expected=a.shape, actual=b.shape
            )
        return a, b

    def inverse(self, matrix: np.ndarray, name: str = 'matrix') -> np.ndarray:
        """
        Invert a square matrix.

        Args:
            matrix: Square matrix to invert
            name: Label used in error messages

        Returns:
            Inverse matrix

        Raises:
            MatrixInversionError: If the matrix is singular, ill-conditioned
                beyond max_condition_number, or the inverse is not finite
        """
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise DimensionMismatchError(
                f"{name} must be square to invert",
                first=name, second=name,
                expected='square matrix', actual=matrix.shape
            )

        try:
            inverted = linalg.inv(matrix)
        except (linalg.LinAlgError, ValueError) as e:
            logger.error(f"Matrix inversion failed. {name} might be singular: {matrix.tolist()}")
            raise MatrixInversionError(name, str(e)) from e

        condition_number = np.linalg.cond(matrix)
        if not np.isfinite(condition_number) or condition_number > self.max_condition_number:
            logger.error(f"Matrix inversion failed. {name} is ill-conditioned "
                         f"(condition number {condition_number:.3e})")
            raise MatrixInversionError(
                name,
                f"condition number {condition_number:.3e} exceeds {self.max_condition_number:.3e}"
            )

        if not np.all(np.isfinite(inverted)):
            logger.error(f"Matrix inversion failed. Inverse of {name} is not finite")
            raise MatrixInversionError(name, "inverse contains non-finite values")

        return inverted

    def to_column_matrix(self, vector: np.ndarray) -> np.ndarray:
        """Convert a length-n vector to an n x 1 matrix"""
        return np.asarray(vector, dtype=float).reshape(-1, 1)

    def to_vector(self, matrix: np.ndarray) -> np.ndarray:
        """Convert an n x 1 matrix to a length-n vector"""
        return np.asarray(matrix, dtype=float)[:, 0].copy()

    def is_symmetric(self, matrix: np.ndarray, tolerance: float = 1e-8) -> bool:
        """Check if matrix equals its transpose within tolerance"""
        matrix = np.asarray(matrix, dtype=float)
        return matrix.shape[0] == matrix.shape[1] and np.allclose(matrix, matrix.T, rtol=0.0, atol=tolerance)

    def is_positive_semidefinite(self, matrix: np.ndarray, tolerance: float = 1e-8) -> bool:
        """Check if a symmetric matrix has no eigenvalue below -tolerance"""
        try:
            eigenvalues = np.linalg.eigvalsh(np.asarray(matrix, dtype=float))
        except np.linalg.LinAlgError:
            return False
        return bool(np.all(eigenvalues >= -tolerance))
