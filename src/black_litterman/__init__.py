"""
Black-Litterman Package - Bayesian expected-return blending
Implements the Black-Litterman model combining market equilibrium returns
with investor views and their uncertainty.

File: __init__.py
Modified: 2025-07-19
"""

from .black_litterman import (
    BlackLittermanModel,
    run_black_litterman,
    calculate_equilibrium_returns,
    calculate_posterior_returns
)
from .modules import (
    BlackLittermanInputs,
    BlackLittermanOutputs,
    BlackLittermanError,
    DimensionMismatchError,
    MatrixInversionError,
    InvalidInputError
)
from .utils import Config

__all__ = [
    'BlackLittermanModel',
    'run_black_litterman',
    'calculate_equilibrium_returns',
    'calculate_posterior_returns',
    'BlackLittermanInputs',
    'BlackLittermanOutputs',
    'BlackLittermanError',
    'DimensionMismatchError',
    'MatrixInversionError',
    'InvalidInputError',
    'Config'
]

__version__ = '1.0.0'
__author__ = 'Portfolio Analytics Team'
