"""
Bayesian updating module for Black-Litterman calculations.
Blends the equilibrium prior with investor views:

    E[R] = Pi + (tau*S) P' [P (tau*S) P' + Omega]^-1 (Q - P Pi)
"""

import numpy as np
import logging

from .data_types import Matrix, Vector
from .input_validator import InputValidator
from .matrix_operations import MatrixOperations

logger = logging.getLogger(__name__)


class BayesianUpdater:
    """Handles Bayesian updating of prior beliefs with investor views"""

    def __init__(self, matrix_ops: MatrixOperations, validator: InputValidator):
        self.matrix_ops = matrix_ops
        self.validator = validator

    def calculate_posterior_returns(self,
                                    tau: float,
                                    S: Matrix,
                                    pi_eq: Vector,
                                    P: Matrix,
                                    Q: Vector,
                                    Omega: Matrix) -> np.ndarray:
        """
        Incorporate investor views into the equilibrium returns.

        Args:
            tau: Uncertainty in the prior (scales S)
            S: Market covariance matrix (N x N)
            pi_eq: Equilibrium returns (N)
            P: View-picking matrix (K x N)
            Q: View returns (K)
            Omega: View-uncertainty covariance (K x K)

        Returns:
            Posterior expected returns (N)

        Raises:
            DimensionMismatchError: If P, Q, Omega, pi_eq and S disagree
            MatrixInversionError: If P(tau*S)P' + Omega cannot be inverted
        """
        tau, S, pi_eq, P, Q, Omega = self.validator.validate_posterior_inputs(tau, S, pi_eq, P, Q, Omega)

        if len(Q) == 0:
            logger.debug("No views supplied, posterior equals equilibrium")
            return pi_eq.copy()

        ops = self.matrix_ops
        pi_eq_col = ops.to_column_matrix(pi_eq)  # N x 1
        Q_col = ops.to_column_matrix(Q)  # K x 1
        P_T = ops.transpose(P)  # N x K

        tau_S = ops.multiply(tau, S)  # N x N
        P_pi = ops.multiply(P, pi_eq_col)  # K x 1

        # Surprise between view targets and implied returns
        excess = ops.subtract(Q_col, P_pi)  # K x 1

        P_tau_S = ops.multiply(P, tau_S)  # K x N
        P_tau_S_PT = ops.multiply(P_tau_S, P_T)  # K x K
        confidence_blend = ops.add(P_tau_S_PT, Omega)  # K x K
        confidence_blend_inv = ops.inverse(confidence_blend, name='P(tau*S)P^T + Omega')

        tau_S_PT = ops.multiply(tau_S, P_T)  # N x K
        adjustment_weights = ops.multiply(tau_S_PT, confidence_blend_inv)  # N x K
        adjustment = ops.multiply(adjustment_weights, excess)  # N x 1

        posterior_col = ops.add(pi_eq_col, adjustment)  # N x 1
        logger.debug(f"Applied {len(Q)} views, max adjustment {np.abs(adjustment).max():.6f}")

        return ops.to_vector(posterior_col)

    def calculate_posterior_covariance(self,
                                       tau: float,
                                       S: Matrix,
                                       P: Matrix,
                                       Omega: Matrix) -> np.ndarray:
        """
        Posterior covariance of returns, S + M.

        M = [(tau*S)^-1 + P' Omega^-1 P]^-1 is evaluated as
        tau*S - tau*S P' [P tau*S P' + Omega]^-1 P tau*S, which needs
        neither S nor Omega to be invertible.

        Args:
            tau: Uncertainty in the prior (scales S)
            S: Market covariance matrix (N x N)
            P: View-picking matrix (K x N)
            Omega: View-uncertainty covariance (K x K)

        Returns:
            Posterior covariance matrix (N x N)
        """
        tau = self.validator.check_scalar(tau, 'tau', positive=True)
        S = self.validator.as_matrix(S, 'S')
        P_arr = self.validator.as_matrix(P, 'P')
        P, Omega = self.validator.validate_view_inputs(S, P_arr, P_arr.shape[0], Omega)

        ops = self.matrix_ops
        tau_S = ops.multiply(tau, S)  # N x N

        if P.shape[0] == 0:
            return ops.add(S, tau_S)

        P_T = ops.transpose(P)
        P_tau_S = ops.multiply(P, tau_S)  # K x N
        confidence_blend = ops.add(ops.multiply(P_tau_S, P_T), Omega)  # K x K
        confidence_blend_inv = ops.inverse(confidence_blend, name='P(tau*S)P^T + Omega')

        tau_S_PT = ops.multiply(tau_S, P_T)  # N x K
        reduction = ops.multiply(ops.multiply(tau_S_PT, confidence_blend_inv), P_tau_S)  # N x N
        M = ops.subtract(tau_S, reduction)
        M = 0.5 * (M + ops.transpose(M))

        return ops.add(S, M)
