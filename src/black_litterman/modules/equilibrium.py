"""
Equilibrium return module for Black-Litterman calculations.
Derives market-implied returns by reverse optimization.
"""

import numpy as np
import logging

from .data_types import Matrix, Vector
from .input_validator import InputValidator
from .matrix_operations import MatrixOperations

logger = logging.getLogger(__name__)


class EquilibriumReturnCalculator:
    """Computes implied equilibrium returns Pi = delta * S * w_mkt"""

    def __init__(self, matrix_ops: MatrixOperations, validator: InputValidator):
        self.matrix_ops = matrix_ops
        self.validator = validator

    def calculate(self, risk_aversion: float, S: Matrix, w_mkt: Vector) -> np.ndarray:
        """
        Calculate implied equilibrium returns using reverse optimization.

        Args:
            risk_aversion: Market risk aversion coefficient (delta)
            S: Market covariance matrix (N x N)
            w_mkt: Market capitalization weights (N)

        Returns:
            Equilibrium expected returns (N)

        Raises:
            DimensionMismatchError: If S is not square or disagrees with w_mkt
        """
        risk_aversion, S, w_mkt = self.validator.validate_equilibrium_inputs(risk_aversion, S, w_mkt)

        if abs(w_mkt.sum() - 1.0) > 1e-6:
            logger.debug(f"Market weights sum to {w_mkt.sum():.6f}, not 1")

        # Reverse optimization: Pi = delta * S * w
        w_mkt_col = self.matrix_ops.to_column_matrix(w_mkt)  # N x 1
        S_w_mkt = self.matrix_ops.multiply(S, w_mkt_col)  # N x 1
        equilibrium_col = self.matrix_ops.multiply(risk_aversion, S_w_mkt)  # N x 1

        return self.matrix_ops.to_vector(equilibrium_col)
