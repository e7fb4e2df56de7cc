"""
Data types for the Black-Litterman model
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

Vector = Union[Sequence[float], np.ndarray, pd.Series]
Matrix = Union[Sequence[Sequence[float]], np.ndarray, pd.DataFrame]


@dataclass
class BlackLittermanInputs:
    """Full input bundle for one Black-Litterman run"""
    tau: float  # Prior uncertainty scalar, > 0
    P: Matrix  # K x N view-picking matrix
    Q: Vector  # K view returns
    Omega: Matrix  # K x K view-uncertainty covariance
    market_covariance: Matrix  # N x N covariance (S)
    market_cap_weights: Vector  # N market weights (w_mkt)
    risk_aversion: float  # delta


@dataclass
class BlackLittermanOutputs:
    """Result of one Black-Litterman run"""
    posterior_returns: np.ndarray  # E[R], length N
    posterior_covariance: np.ndarray  # N x N
    equilibrium_returns: np.ndarray  # Pi, length N

    def to_dict(self) -> Dict[str, Any]:
        """Plain-list representation"""
        return {
            'posterior_returns': self.posterior_returns.tolist(),
            'posterior_covariance': self.posterior_covariance.tolist(),
            'equilibrium_returns': self.equilibrium_returns.tolist()
        }

    def as_pandas(self, asset_names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """
        Label the outputs by asset.

        Args:
            asset_names: Asset labels in model order (defaults to 0..N-1)

        Returns:
            Dict with 'posterior_returns' and 'equilibrium_returns' Series
            and a 'posterior_covariance' DataFrame
        """
        n_assets = len(self.posterior_returns)
        if asset_names is None:
            asset_names = list(range(n_assets))
        elif len(asset_names) != n_assets:
            raise ValueError(f"Expected {n_assets} asset names, got {len(asset_names)}")

        index = pd.Index(asset_names)
        return {
            'posterior_returns': pd.Series(self.posterior_returns, index=index, name='posterior_returns'),
            'posterior_covariance': pd.DataFrame(self.posterior_covariance, index=index, columns=index),
            'equilibrium_returns': pd.Series(self.equilibrium_returns, index=index, name='equilibrium_returns')
        }
