"""
Input Validator Module

Coerces model inputs to float arrays and checks every dimension
precondition before any matrix algebra runs, so malformed input fails
with a message naming the disagreeing quantities.
"""

import logging
import numbers
from typing import Tuple

import numpy as np

from .exceptions import DimensionMismatchError, InvalidInputError
from .matrix_operations import MatrixOperations

logger = logging.getLogger(__name__)


class InputValidator:
    """Validates Black-Litterman inputs"""

    def __init__(self, matrix_ops: MatrixOperations, symmetry_tolerance: float = 1e-8):
        self.matrix_ops = matrix_ops
        self.symmetry_tolerance = symmetry_tolerance

    def _to_float_array(self, value, name: str, kind: str) -> np.ndarray:
        try:
            return np.array(value, dtype=float)
        except ValueError as e:
            # numpy refuses ragged nested sequences
            if 'inhomogeneous' in str(e) or 'sequence' in str(e):
                raise DimensionMismatchError(f"{name} must be a rectangular {kind}",
                                             first=name, second=name) from e
            raise InvalidInputError(f"{name} must contain only real numbers: {e}") from e
        except TypeError as e:
            raise InvalidInputError(f"{name} must contain only real numbers: {e}") from e

    def as_matrix(self, value, name: str) -> np.ndarray:
        """Coerce value to a finite 2-D float array"""
        matrix = self._to_float_array(value, name, 'matrix')

        if matrix.size == 0:
            return matrix if matrix.ndim == 2 else matrix.reshape(0, 0)

        if matrix.ndim != 2:
            raise DimensionMismatchError(f"{name} must be a 2-D matrix",
                                         first=name, second=name,
                                         expected=2, actual=matrix.ndim)

        self.check_finite(matrix, name)
        return matrix

    def as_vector(self, value, name: str) -> np.ndarray:
        """Coerce value to a finite 1-D float array; an n x 1 column is flattened"""
        vector = self._to_float_array(value, name, 'vector')

        if vector.ndim == 2 and vector.shape[1] == 1:
            vector = vector[:, 0]

        if vector.ndim != 1:
            raise DimensionMismatchError(f"{name} must be a 1-D vector",
                                         first=name, second=name,
                                         expected=1, actual=vector.ndim)

        self.check_finite(vector, name)
        return vector

    def check_finite(self, array: np.ndarray, name: str):
        if not np.all(np.isfinite(array)):
            raise InvalidInputError(f"{name} contains NaN or infinite values")

    def check_scalar(self, value, name: str, positive: bool = False) -> float:
        """Validate a real, finite scalar (optionally strictly positive)"""
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(f"{name} must be a real number, got {type(value).__name__}")

        value = float(value)
        if not np.isfinite(value):
            raise InvalidInputError(f"{name} must be finite, got {value}")
        if positive and value <= 0:
            raise InvalidInputError(f"{name} must be positive, got {value}")

        return value

    def check_square(self, matrix: np.ndarray, name: str):
        if matrix.shape[0] == 0:
            raise DimensionMismatchError(f"{name} is empty", first=name, second=name)
        if matrix.shape[0] != matrix.shape[1]:
            raise DimensionMismatchError(f"{name} is not square",
                                         first=f"{name} rows", second=f"{name} columns",
                                         expected=matrix.shape[0], actual=matrix.shape[1])

    def check_covariance(self, S: np.ndarray):
        """Warn (never raise) about a covariance matrix that looks wrong"""
        if not self.matrix_ops.is_symmetric(S, self.symmetry_tolerance):
            logger.warning("Covariance matrix S is not symmetric")
        elif not self.matrix_ops.is_positive_semidefinite(S, self.symmetry_tolerance):
            logger.warning("Covariance matrix S is not positive semi-definite")

    def validate_equilibrium_inputs(self, risk_aversion, S, w_mkt) -> Tuple[float, np.ndarray, np.ndarray]:
        """
        Validate inputs of the equilibrium return calculation.

        Returns:
            Tuple of (risk_aversion, S, w_mkt) as float / float arrays
        """
        risk_aversion = self.check_scalar(risk_aversion, 'riskAversion')
        S = self.as_matrix(S, 'S')
        w_mkt = self.as_vector(w_mkt, 'wMkt')

        self.check_square(S, 'S')
        if S.shape[1] != len(w_mkt):
            raise DimensionMismatchError("S and wMkt dimensions disagree",
                                         first='S', second='wMkt',
                                         expected=S.shape[1], actual=len(w_mkt))

        self.check_covariance(S)
        return risk_aversion, S, w_mkt

    def validate_posterior_inputs(self, tau, S, pi_eq, P, Q, Omega) -> Tuple[float, np.ndarray, np.ndarray,
                                                                              np.ndarray, np.ndarray, np.ndarray]:
        """
        Validate inputs of the posterior return calculation.

        Returns:
            Tuple of (tau, S, pi_eq, P, Q, Omega) as float / float arrays
        """
        tau = self.check_scalar(tau, 'tau', positive=True)
        S = self.as_matrix(S, 'S')
        pi_eq = self.as_vector(pi_eq, 'Pi_eq')
        Q = self.as_vector(Q, 'Q')
        P, Omega = self.validate_view_inputs(S, P, len(Q), Omega)

        n_assets = S.shape[0]
        if len(pi_eq) != n_assets:
            raise DimensionMismatchError("Pi_eq and S dimensions disagree",
                                         first='Pi_eq', second='S',
                                         expected=n_assets, actual=len(pi_eq))

        return tau, S, pi_eq, P, Q, Omega

    def validate_view_inputs(self, S, P, n_views: int, Omega) -> Tuple[np.ndarray, np.ndarray]:
        """
        Check S, P and Omega against each other for K = n_views views.

        Returns:
            Tuple of (P, Omega) as float arrays
        """
        self.check_square(S, 'S')
        n_assets = S.shape[0]

        P = self.as_matrix(P, 'P')
        Omega = self.as_matrix(Omega, 'Omega')

        if P.shape[0] != n_views:
            raise DimensionMismatchError("P rows and Q length disagree",
                                         first='P', second='Q',
                                         expected=n_views, actual=P.shape[0])
        if n_views > 0 and P.shape[1] != n_assets:
            raise DimensionMismatchError("P columns and S dimensions disagree",
                                         first='P', second='S',
                                         expected=n_assets, actual=P.shape[1])
        if Omega.shape[0] != n_views or (n_views > 0 and Omega.shape[1] != n_views):
            raise DimensionMismatchError("Omega and Q dimensions disagree",
                                         first='Omega', second='Q',
                                         expected=(n_views, n_views), actual=Omega.shape)

        return P, Omega
