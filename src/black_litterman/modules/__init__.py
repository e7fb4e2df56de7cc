"""
Black-Litterman Modules

This package contains the modular components of the Black-Litterman model.

Modules:
- matrix_operations: Dense matrix algebra and inversion
- input_validator: Array coercion and dimension preconditions
- equilibrium: Implied equilibrium returns (reverse optimization)
- bayesian_updater: Bayesian view incorporation
- data_types: Input and output bundles
- exceptions: Error types
"""

from .matrix_operations import MatrixOperations
from .input_validator import InputValidator
from .equilibrium import EquilibriumReturnCalculator
from .bayesian_updater import BayesianUpdater
from .data_types import BlackLittermanInputs, BlackLittermanOutputs
from .exceptions import (
    BlackLittermanError,
    DimensionMismatchError,
    MatrixInversionError,
    InvalidInputError
)

__all__ = [
    'MatrixOperations',
    'InputValidator',
    'EquilibriumReturnCalculator',
    'BayesianUpdater',
    'BlackLittermanInputs',
    'BlackLittermanOutputs',
    'BlackLittermanError',
    'DimensionMismatchError',
    'MatrixInversionError',
    'InvalidInputError'
]
