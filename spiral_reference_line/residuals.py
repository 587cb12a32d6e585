"""
Residual functions for fitting a chain of spiral segments.

The external least-squares optimizer evaluates these per segment (position,
length) and per interior node (continuity). Every function is pure and
generic over the scalar type, so the same code runs on floats, CasADi
expressions or dual numbers for differentiation.

Residual blocks:
- position:   node0, node1, delta                 -> 2
- length:     delta                               -> 1
- continuity: node0, node1, node2, delta, delta1  -> 3
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from . import scalar
from .config import DEFAULT_WEIGHTS, ResidualWeights
from .errors import SpiralError
from .segment import (
    DKAPPA, KAPPA, THETA, X, Y,
    check_finite, curvature_at, curvature_rate_at, displacement, heading_at,
    spiral_coefficients,
)

logger = logging.getLogger(__name__)


def position_error(node0, node1, delta,
                   weights: Optional[ResidualWeights] = None):
    """
    Mismatch between declared and integrated endpoint displacement.

    Returns:
        [(x1 - x0) - dx, (y1 - y0) - dy]
    """
    weights = weights or DEFAULT_WEIGHTS
    coeffs = spiral_coefficients(node0[THETA], node0[KAPPA],
                                 node1[THETA], node1[KAPPA],
                                 delta, weights.epsilon)
    dx, dy = displacement(coeffs, delta)

    residual = [node1[X] - node0[X] - dx, node1[Y] - node0[Y] - dy]
    check_finite('position residual', *residual)
    return residual


def length_penalty(delta, weights: Optional[ResidualWeights] = None):
    """
    Linear penalty on segment length.

    No length guard: zero and negative values map straight through.
    """
    weights = weights or DEFAULT_WEIGHTS
    return [delta * weights.length_weight]


def continuity_error(node0, node1, node2, delta, delta1,
                     weights: Optional[ResidualWeights] = None):
    """
    Heading/curvature/curvature-rate mismatch at node1.

    Segment 0 (node0 -> node1) is evaluated at its own end, s = delta, and
    compared against node1's declared state. Segment 1 (node1 -> node2) is
    derived too, so an invalid delta1 is rejected here as well.

    Returns:
        [w_theta * (theta1 - theta0(delta)),
         w_kappa * (kappa1 - kappa0(delta)),
         w_dkappa * (dkappa1 - dkappa0(delta))]
    """
    weights = weights or DEFAULT_WEIGHTS
    coeffs = spiral_coefficients(node0[THETA], node0[KAPPA],
                                 node1[THETA], node1[KAPPA],
                                 delta, weights.epsilon)
    spiral_coefficients(node1[THETA], node1[KAPPA],
                        node2[THETA], node2[KAPPA],
                        delta1, weights.epsilon)

    end_theta = heading_at(coeffs, delta)
    end_kappa = curvature_at(coeffs, delta)
    end_dkappa = curvature_rate_at(coeffs, delta)

    residual = [
        weights.theta_weight * (node1[THETA] - end_theta),
        weights.kappa_weight * (node1[KAPPA] - end_kappa),
        weights.dkappa_weight * (node1[DKAPPA] - end_dkappa),
    ]
    check_finite('continuity residual', *residual)
    return residual


@dataclass(frozen=True)
class ResidualBlock:
    """A named residual function with fixed input arity and output size."""
    name: str
    function: Callable
    arity: int
    output_dim: int

    def __call__(self, *args, weights: Optional[ResidualWeights] = None):
        if len(args) != self.arity:
            raise TypeError(
                f"{self.name} residual takes {self.arity} inputs, got {len(args)}")
        residual = self.function(*args, weights=weights)
        if len(residual) != self.output_dim:
            raise SpiralError(
                f"{self.name} residual has {len(residual)} values, "
                f"expected {self.output_dim}")
        return residual


RESIDUAL_BLOCKS: Dict[str, ResidualBlock] = {
    'position': ResidualBlock('position', position_error, arity=3, output_dim=2),
    'length': ResidualBlock('length', length_penalty, arity=1, output_dim=1),
    'continuity': ResidualBlock('continuity', continuity_error, arity=5, output_dim=3),
}


def get_block(name: str) -> ResidualBlock:
    try:
        return RESIDUAL_BLOCKS[name]
    except KeyError:
        raise ValueError(
            f"Unknown residual block {name!r}, expected one of "
            f"{sorted(RESIDUAL_BLOCKS)}") from None


def evaluate(name: str, *args, weights: Optional[ResidualWeights] = None):
    """
    Evaluate a residual block by name.

    Numeric inputs give a 1-D float numpy array; symbolic or dual inputs
    give the raw list of scalars.
    """
    residual = get_block(name)(*args, weights=weights)
    if all(scalar.is_number(r) for r in residual):
        return np.array([scalar.numeric_value(r) for r in residual], dtype=np.float64)
    return residual
