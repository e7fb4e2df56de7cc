import logging
import tempfile
import unittest
from pathlib import Path

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from black_litterman import (
    BlackLittermanInputs,
    BlackLittermanModel,
    Config,
    DimensionMismatchError,
    InvalidInputError,
    MatrixInversionError,
    calculate_equilibrium_returns,
    calculate_posterior_returns,
    run_black_litterman
)


def make_config(mode: str = 'prior') -> Config:
    config = Config(config_path='nonexistent/config.yaml')
    config.set('posterior_covariance.mode', mode)
    return config


def three_asset_inputs() -> BlackLittermanInputs:
    """Three assets, one relative view and one absolute view"""
    return BlackLittermanInputs(
        tau=0.05,
        P=[[1, -1, 0], [0, 0, 1]],
        Q=[0.01, 0.04],
        Omega=[[0.0001, 0], [0, 0.0005]],
        market_covariance=[
            [0.0225, 0.0068, 0.0033],
            [0.0068, 0.0289, 0.0078],
            [0.0033, 0.0078, 0.0441],
        ],
        market_cap_weights=[0.5, 0.3, 0.2],
        risk_aversion=3.0
    )


class TestBlackLittermanModel(unittest.TestCase):
    """Test the end-to-end Black-Litterman run"""

    def setUp(self):
        """Set up test environment"""
        self.model = BlackLittermanModel(make_config())
        self.inputs = three_asset_inputs()

    def test_three_asset_scenario(self):
        """Test equilibrium and posterior returns of the two-view example"""
        outputs = self.model.run(self.inputs)

        assert_allclose(outputs.equilibrium_returns, [0.04185, 0.04089, 0.03843], rtol=0, atol=1e-12)
        self.assertEqual(outputs.posterior_returns.shape, (3,))

        # Asset 3 is partially pulled towards its 4% view
        self.assertGreater(outputs.posterior_returns[2], outputs.equilibrium_returns[2])
        self.assertLess(outputs.posterior_returns[2], 0.04)

        # Relative view: asset 1 minus asset 2 moves towards +1%
        spread_prior = outputs.equilibrium_returns[0] - outputs.equilibrium_returns[1]
        spread_posterior = outputs.posterior_returns[0] - outputs.posterior_returns[1]
        self.assertGreater(spread_posterior, spread_prior)
        self.assertLess(spread_posterior, 0.01)

    def test_deterministic(self):
        """Test repeated runs are bit-identical"""
        first = self.model.run(self.inputs)
        second = BlackLittermanModel(make_config()).run(three_asset_inputs())

        assert_array_equal(first.equilibrium_returns, second.equilibrium_returns)
        assert_array_equal(first.posterior_returns, second.posterior_returns)

    def test_covariance_passed_through(self):
        """Test posterior covariance equals the input S without aliasing it"""
        S = np.array(self.inputs.market_covariance)
        self.inputs.market_covariance = S

        outputs = self.model.run(self.inputs)

        assert_array_equal(outputs.posterior_covariance, S)
        self.assertFalse(np.shares_memory(outputs.posterior_covariance, S))

    def test_full_posterior_covariance(self):
        """Test the opt-in posterior covariance derivation"""
        outputs = BlackLittermanModel(make_config('full')).run(self.inputs)

        S = np.array(self.inputs.market_covariance)
        P = np.array(self.inputs.P, dtype=float)
        Omega = np.array(self.inputs.Omega)
        precision = np.linalg.inv(0.05 * S) + P.T @ np.linalg.inv(Omega) @ P
        assert_allclose(outputs.posterior_covariance, S + np.linalg.inv(precision), rtol=1e-8)

        # Returns do not depend on the covariance mode
        default = self.model.run(three_asset_inputs())
        assert_array_equal(outputs.posterior_returns, default.posterior_returns)

    def test_inversion_failure_propagates(self):
        """Test a singular confidence blend reaches the caller unchanged"""
        inputs = BlackLittermanInputs(
            tau=0.05,
            P=[[0, 1]],
            Q=[0.05],
            Omega=[[0.0]],
            market_covariance=[[0.04, 0.0], [0.0, 0.0]],
            market_cap_weights=[0.5, 0.5],
            risk_aversion=2.0
        )

        with self.assertRaises(MatrixInversionError):
            self.model.run(inputs)

    def test_dimension_mismatch_propagates(self):
        """Test a malformed view bundle reaches the caller"""
        self.inputs.Q = [0.01]

        with self.assertRaises(DimensionMismatchError):
            self.model.run(self.inputs)

    def test_no_views(self):
        """Test an empty view set returns the equilibrium"""
        self.inputs.P = []
        self.inputs.Q = []
        self.inputs.Omega = []

        outputs = self.model.run(self.inputs)

        assert_array_equal(outputs.posterior_returns, outputs.equilibrium_returns)

    def test_outputs_as_pandas(self):
        """Test labeled outputs for presentation layers"""
        outputs = self.model.run(self.inputs)
        labeled = outputs.as_pandas(['BTC', 'ETH', 'SOL'])

        self.assertEqual(list(labeled['posterior_returns'].index), ['BTC', 'ETH', 'SOL'])
        self.assertEqual(labeled['posterior_covariance'].shape, (3, 3))
        self.assertAlmostEqual(labeled['equilibrium_returns']['SOL'], 0.03843, places=12)

        with self.assertRaises(ValueError):
            outputs.as_pandas(['BTC'])

    def test_outputs_to_dict(self):
        """Test plain-list representation"""
        data = self.model.run(self.inputs).to_dict()

        self.assertEqual(set(data), {'posterior_returns', 'posterior_covariance', 'equilibrium_returns'})
        self.assertEqual(len(data['posterior_covariance']), 3)
        self.assertIsInstance(data['posterior_returns'][0], float)

    def test_invalid_config(self):
        """Test that an invalid configuration is rejected"""
        with self.assertRaises(InvalidInputError):
            BlackLittermanModel(make_config('posterior'))


class TestModelLogging(unittest.TestCase):
    """Test module records reach the configured log files"""

    def setUp(self):
        """Set up test environment"""
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.config = make_config()
        self.config.set('logging.level', 'DEBUG')
        self.config.set('logging.log_dir', self.tmp_dir.name)
        self.model = BlackLittermanModel(self.config)

    def tearDown(self):
        package_logger = logging.getLogger('black_litterman')
        for handler in list(package_logger.handlers):
            handler.close()
            package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
        self.tmp_dir.cleanup()

    def read_log(self, filename: str) -> str:
        for handler in logging.getLogger('black_litterman').handlers:
            handler.flush()
        return (Path(self.tmp_dir.name) / filename).read_text()

    def test_inversion_failure_in_error_log(self):
        """Test the singular blend failure is written to errors.log"""
        inputs = BlackLittermanInputs(
            tau=0.05,
            P=[[0, 1]],
            Q=[0.05],
            Omega=[[0.0]],
            market_covariance=[[0.04, 0.0], [0.0, 0.0]],
            market_cap_weights=[0.5, 0.5],
            risk_aversion=2.0
        )

        with self.assertRaises(MatrixInversionError):
            self.model.run(inputs)

        errors = self.read_log('errors.log')
        self.assertIn('Matrix inversion failed', errors)
        self.assertIn('black_litterman.modules.matrix_operations', errors)

    def test_module_debug_records_follow_level(self):
        """Test per-stage DEBUG records land in the main log file"""
        self.model.run(three_asset_inputs())

        main_log = self.read_log('black_litterman.log')
        self.assertIn('black_litterman.modules.bayesian_updater', main_log)
        self.assertIn('Applied 2 views', main_log)
        self.assertIn('Black-Litterman run complete', main_log)
        self.assertEqual(self.read_log('errors.log'), '')


class TestModuleFunctions(unittest.TestCase):
    """Test module-level entry points"""

    def test_run_black_litterman(self):
        """Test the one-shot runner"""
        outputs = run_black_litterman(three_asset_inputs(), make_config())
        expected = BlackLittermanModel(make_config()).run(three_asset_inputs())

        assert_array_equal(outputs.posterior_returns, expected.posterior_returns)

    def test_stage_functions(self):
        """Test equilibrium and posterior stages called directly"""
        inputs = three_asset_inputs()
        pi = calculate_equilibrium_returns(
            inputs.risk_aversion, inputs.market_covariance, inputs.market_cap_weights, make_config()
        )
        posterior = calculate_posterior_returns(
            inputs.tau, inputs.market_covariance, pi, inputs.P, inputs.Q, inputs.Omega, make_config()
        )

        outputs = run_black_litterman(inputs, make_config())
        assert_array_equal(pi, outputs.equilibrium_returns)
        assert_array_equal(posterior, outputs.posterior_returns)


if __name__ == '__main__':
    unittest.main()
