"""
Black-Litterman Model - Main coordination module
Blends the market-implied equilibrium prior with investor views to
produce posterior expected returns.

File: black_litterman.py
Modified: 2025-07-19
"""

import logging
import numpy as np
from typing import Optional

from .modules.matrix_operations import MatrixOperations
from .modules.input_validator import InputValidator
from .modules.equilibrium import EquilibriumReturnCalculator
from .modules.bayesian_updater import BayesianUpdater
from .modules.data_types import BlackLittermanInputs, BlackLittermanOutputs, Matrix, Vector
from .modules.exceptions import InvalidInputError

from .utils.config import Config
from .utils.logger import setup_logger

PACKAGE_LOGGER = __name__.rpartition('.')[0]


class BlackLittermanModel:
    """
    Black-Litterman expected-return model.

    Runs two stages in sequence:
    - equilibrium: Pi = delta * S * w_mkt
    - bayesian_updater: E[R] = Pi + (tau*S)P'[P(tau*S)P' + Omega]^-1 (Q - P*Pi)

    Errors from either stage propagate unchanged; no fallback result is
    ever substituted.

    Attributes:
        config (Config): Numerical and logging settings
        posterior_covariance_mode (str): 'prior' (pass S through) or 'full'
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the Black-Litterman model.

        Args:
            config: Configuration; defaults are loaded from configs/config.yaml
                or built in when the file does not exist
        """
        self.config = config if config is not None else Config()
        if not self.config.validate():
            raise InvalidInputError("Invalid Black-Litterman configuration")

        # Package logger, so records from black_litterman.modules.* reach its handlers
        setup_logger(
            PACKAGE_LOGGER,
            level=self.config.get('logging.level').upper(),
            log_dir=self.config.get('logging.log_dir')
        )
        self.logger = logging.getLogger(__name__)
        self.posterior_covariance_mode = self.config.get('posterior_covariance.mode')

        # Initialize module managers
        self.matrix_ops = MatrixOperations(
            max_condition_number=float(self.config.get('numerics.max_condition_number'))
        )
        self.validator = InputValidator(
            self.matrix_ops,
            symmetry_tolerance=float(self.config.get('numerics.symmetry_tolerance'))
        )
        self.equilibrium = EquilibriumReturnCalculator(self.matrix_ops, self.validator)
        self.bayesian_updater = BayesianUpdater(self.matrix_ops, self.validator)

    def run(self, inputs: BlackLittermanInputs) -> BlackLittermanOutputs:
        """
        Run the Black-Litterman model.

        Args:
            inputs: Full input bundle

        Returns:
            BlackLittermanOutputs with equilibrium returns, posterior returns
            and the covariance matrix (the input S unless configured 'full')

        Raises:
            DimensionMismatchError: If input dimensions disagree
            MatrixInversionError: If P(tau*S)P' + Omega is singular
            InvalidInputError: If inputs are non-finite or tau <= 0
        """
        # Step 1: Implied equilibrium returns
        equilibrium_returns = self.equilibrium.calculate(
            inputs.risk_aversion,
            inputs.market_covariance,
            inputs.market_cap_weights
        )

        # Step 2: Blend in the views
        posterior_returns = self.bayesian_updater.calculate_posterior_returns(
            inputs.tau,
            inputs.market_covariance,
            equilibrium_returns,
            inputs.P,
            inputs.Q,
            inputs.Omega
        )

        if self.posterior_covariance_mode == 'full':
            posterior_covariance = self.bayesian_updater.calculate_posterior_covariance(
                inputs.tau, inputs.market_covariance, inputs.P, inputs.Omega
            )
        else:
            # Copy so the output never aliases the caller's matrix
            posterior_covariance = np.array(inputs.market_covariance, dtype=float)

        self.logger.info(
            f"Black-Litterman run complete: {len(equilibrium_returns)} assets, "
            f"{np.size(inputs.Q)} views, covariance mode '{self.posterior_covariance_mode}'"
        )

        return BlackLittermanOutputs(
            posterior_returns=posterior_returns,
            posterior_covariance=posterior_covariance,
            equilibrium_returns=equilibrium_returns
        )


def run_black_litterman(inputs: BlackLittermanInputs,
                        config: Optional[Config] = None) -> BlackLittermanOutputs:
    """Run the Black-Litterman model once with the given inputs"""
    return BlackLittermanModel(config).run(inputs)


def calculate_equilibrium_returns(risk_aversion: float, S: Matrix, w_mkt: Vector,
                                  config: Optional[Config] = None) -> np.ndarray:
    """Implied equilibrium returns Pi = delta * S * w_mkt"""
    return BlackLittermanModel(config).equilibrium.calculate(risk_aversion, S, w_mkt)


def calculate_posterior_returns(tau: float, S: Matrix, pi_eq: Vector, P: Matrix, Q: Vector,
                                Omega: Matrix, config: Optional[Config] = None) -> np.ndarray:
    """Posterior expected returns for the given equilibrium returns and views"""
    return BlackLittermanModel(config).bayesian_updater.calculate_posterior_returns(
        tau, S, pi_eq, P, Q, Omega
    )
