"""
Spiral reference line - cubic-heading segments and their fitting residuals.

Each segment between two waypoints (theta, kappa, dkappa, x, y) has a heading
that is a cubic polynomial of arc length, giving continuous curvature. The
residuals here are what a least-squares optimizer minimizes to make a chain
of segments meet with matching position, heading, curvature and curvature
rate while keeping total length short.

Key components:
- SpiralSegment: numeric segment model (heading/curvature/position at s)
- spiral_coefficients: the shared closed-form coefficient derivation
- position_error / length_penalty / continuity_error: generic residuals
- build_residual_function / build_residual_jacobian: CasADi-compiled residuals
- evaluate_residual_function: guarded numeric calls of compiled residuals
- ResidualWeights / load_residual_config: weights from config/residuals.yaml
"""

from .autodiff import (
    CompiledResidual, build_residual_function, build_residual_jacobian,
    evaluate_residual_function,
)
from .config import ResidualWeights, load_residual_config
from .errors import ComputationError, InvalidSegmentLength, SpiralError
from .quadrature import QUADRATURE, integrate
from .residuals import (
    RESIDUAL_BLOCKS, ResidualBlock, continuity_error, evaluate,
    length_penalty, position_error,
)
from .segment import SpiralSegment, spiral_coefficients

__all__ = [
    'SpiralSegment',
    'spiral_coefficients',
    'QUADRATURE',
    'integrate',
    'position_error',
    'length_penalty',
    'continuity_error',
    'evaluate',
    'ResidualBlock',
    'RESIDUAL_BLOCKS',
    'build_residual_function',
    'build_residual_jacobian',
    'evaluate_residual_function',
    'CompiledResidual',
    'ResidualWeights',
    'load_residual_config',
    'SpiralError',
    'InvalidSegmentLength',
    'ComputationError',
]
