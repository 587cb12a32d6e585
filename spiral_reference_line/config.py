"""
Residual weight configuration.

Loads config/residuals.yaml and provides typed access to the residual
weights and the minimum segment length. Falls back to the built-in defaults
if the file is missing or a value is unusable.

Usage:
    from spiral_reference_line.config import load_residual_config, ResidualWeights
    config = load_residual_config()
    weights = ResidualWeights.from_config(config)
    print(weights.length_weight)  # 10.0
"""

import logging
import math
import os
import sys
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

# Defaults mirror config/residuals.yaml; used when the file is missing
_DEFAULTS = {
    'length_penalty': {
        'weight': 10.0,
    },
    'continuity': {
        'theta_weight': 1.0,
        'kappa_weight': 10.0,
        'dkappa_weight': 100.0,
    },
    'segment': {
        'epsilon': 1e-6,
    },
}


@dataclass(frozen=True)
class ResidualWeights:
    """Weights applied by the residual functions."""
    # Length penalty: bias toward shorter total path
    length_weight: float = 10.0

    # Continuity: higher derivatives matched more tightly
    theta_weight: float = 1.0
    kappa_weight: float = 10.0
    dkappa_weight: float = 100.0

    # Smallest accepted segment length
    epsilon: float = 1e-6

    @classmethod
    def from_config(cls, config: dict) -> 'ResidualWeights':
        """Build from a dict shaped like load_residual_config() output."""
        return cls(
            length_weight=config['length_penalty']['weight'],
            theta_weight=config['continuity']['theta_weight'],
            kappa_weight=config['continuity']['kappa_weight'],
            dkappa_weight=config['continuity']['dkappa_weight'],
            epsilon=config['segment']['epsilon'],
        )


DEFAULT_WEIGHTS = ResidualWeights()


def load_residual_config(config_path=None):
    """Load residual configuration from YAML.

    Args:
        config_path: Path to residuals.yaml. If None, searches:
            1. Source tree config/ (development)
            2. <prefix>/share/spiral_reference_line/config (installed)

    Returns:
        dict with validated residual configuration.
    """
    if config_path is None:
        config_path = _find_config_file('residuals.yaml')

    config = {section: dict(values) for section, values in _DEFAULTS.items()}

    if config_path is not None and os.path.isfile(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            logger.warning("Could not parse %s (%s), using defaults",
                           config_path, exc)
            file_config = {}
        if not isinstance(file_config, dict):
            logger.warning("Ignoring %s: top level is not a mapping", config_path)
            file_config = {}
        logger.debug("Loaded residual config from %s", config_path)
        # Merge file config over defaults (one level deep)
        for section in _DEFAULTS:
            if section in file_config and isinstance(file_config[section], dict):
                config[section].update(file_config[section])
    else:
        logger.debug("No residual config file found, using defaults")

    # Validate: every value must be a finite positive number
    for section, values in _DEFAULTS.items():
        for key, default in values.items():
            value = config[section].get(key)
            if not _is_positive_number(value):
                logger.debug("Invalid %s.%s=%r, using default %r",
                             section, key, value, default)
                config[section][key] = default
            else:
                config[section][key] = float(value)

    return config


def _is_positive_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _config_search_dirs():
    """Return directories to search for config files."""
    return [
        # 1. Source tree (development)
        os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'config')),
        # 2. Install prefix (setup.py data_files)
        os.path.join(sys.prefix, 'share', 'spiral_reference_line', 'config'),
    ]


def _find_config_file(filename):
    """Search for a config file in standard locations."""
    for search_dir in _config_search_dirs():
        candidate = os.path.join(search_dir, filename)
        if os.path.isfile(candidate):
            return candidate
    return None
