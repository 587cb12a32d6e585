"""
Tests for residual weight configuration.

Run with:
    python3 -m pytest test/test_config.py -v
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spiral_reference_line.config import (
    DEFAULT_WEIGHTS, ResidualWeights, load_residual_config,
)


@pytest.fixture
def config_file(tmp_path):
    def _write(text):
        path = tmp_path / 'residuals.yaml'
        path.write_text(text)
        return str(path)
    return _write


class TestLoadResidualConfig:

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_residual_config(str(tmp_path / 'missing.yaml'))
        assert config['length_penalty']['weight'] == 10.0
        assert config['continuity'] == {
            'theta_weight': 1.0, 'kappa_weight': 10.0, 'dkappa_weight': 100.0,
        }
        assert config['segment']['epsilon'] == 1e-6

    def test_shipped_config_matches_defaults(self):
        weights = ResidualWeights.from_config(load_residual_config())
        assert weights == DEFAULT_WEIGHTS

    def test_partial_override(self, config_file):
        path = config_file("continuity:\n  dkappa_weight: 50\n")
        config = load_residual_config(path)
        assert config['continuity']['dkappa_weight'] == 50.0
        assert config['continuity']['kappa_weight'] == 10.0
        assert config['length_penalty']['weight'] == 10.0

    def test_invalid_values_fall_back(self, config_file):
        path = config_file(
            "length_penalty:\n  weight: -2\n"
            "continuity:\n  theta_weight: fast\n"
            "segment:\n  epsilon: .nan\n")
        config = load_residual_config(path)
        assert config['length_penalty']['weight'] == 10.0
        assert config['continuity']['theta_weight'] == 1.0
        assert config['segment']['epsilon'] == 1e-6

    def test_malformed_yaml_uses_defaults(self, config_file):
        path = config_file("length_penalty: [unclosed\n")
        config = load_residual_config(path)
        assert config['length_penalty']['weight'] == 10.0

    def test_non_mapping_uses_defaults(self, config_file):
        path = config_file("- 1\n- 2\n")
        config = load_residual_config(path)
        assert config['segment']['epsilon'] == 1e-6

    def test_defaults_not_mutated(self, config_file):
        load_residual_config(config_file("length_penalty:\n  weight: 3\n"))
        config = load_residual_config(config_file(""))
        assert config['length_penalty']['weight'] == 10.0


class TestResidualWeights:

    def test_defaults(self):
        weights = ResidualWeights()
        assert weights.length_weight == 10.0
        assert (weights.theta_weight, weights.kappa_weight, weights.dkappa_weight) == (
            1.0, 10.0, 100.0)
        assert weights.epsilon == 1e-6

    def test_from_config(self, config_file):
        path = config_file("length_penalty:\n  weight: 2.5\nsegment:\n  epsilon: 0.001\n")
        weights = ResidualWeights.from_config(load_residual_config(path))
        assert weights.length_weight == 2.5
        assert weights.epsilon == 0.001

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_WEIGHTS.length_weight = 1.0


class TestConfigSearch:

    def test_installed_config_is_found(self, tmp_path, monkeypatch):
        """Without a source-tree config, the install prefix copy is read."""
        from spiral_reference_line import config as config_module

        share = tmp_path / 'prefix' / 'share' / 'spiral_reference_line' / 'config'
        share.mkdir(parents=True)
        (share / 'residuals.yaml').write_text("length_penalty:\n  weight: 7\n")

        monkeypatch.setattr(config_module, '__file__',
                            str(tmp_path / 'site' / 'spiral_reference_line' / 'config.py'))
        monkeypatch.setattr(sys, 'prefix', str(tmp_path / 'prefix'))

        config = load_residual_config()
        assert config['length_penalty']['weight'] == 7.0

    def test_source_tree_config_preferred(self, tmp_path, monkeypatch):
        share = tmp_path / 'share' / 'spiral_reference_line' / 'config'
        share.mkdir(parents=True)
        (share / 'residuals.yaml').write_text("length_penalty:\n  weight: 7\n")
        monkeypatch.setattr(sys, 'prefix', str(tmp_path))

        config = load_residual_config()
        assert config['length_penalty']['weight'] == 10.0
