"""
Cubic-heading spiral segment.

A segment joins two nodes (theta, kappa, dkappa, x, y) over arc length
delta. Heading is a cubic polynomial of arc length:

    theta(s)  = a + b*s + c*s^2 + d*s^3
    kappa(s)  = b + 2c*s + 3d*s^2
    dkappa(s) = 2c + 6d*s

with a, b fixed by the start node and c, d chosen so the curve reaches the
end node's heading and curvature at s = delta. Position follows from
integrating cos/sin of the heading with the fixed 7-node quadrature.

spiral_coefficients() is the only place the coefficients are derived; the
residuals reuse it so the model and the optimizer never drift apart.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from . import scalar
from .config import DEFAULT_WEIGHTS
from .errors import ComputationError, InvalidSegmentLength
from .quadrature import integrate

logger = logging.getLogger(__name__)

# Indices into a node (theta, kappa, dkappa, x, y)
THETA, KAPPA, DKAPPA, X, Y = range(5)


def check_segment_length(delta, epsilon: Optional[float] = None):
    """
    Raise InvalidSegmentLength if a numeric delta is at or below epsilon.

    Symbolic deltas pass through unchecked.
    """
    if epsilon is None:
        epsilon = DEFAULT_WEIGHTS.epsilon
    value = scalar.numeric_value(delta)
    if value is not None and not value > epsilon:
        logger.debug("Rejecting segment length %r (epsilon=%r)", value, epsilon)
        raise InvalidSegmentLength(value, epsilon)


def check_finite(quantity: str, *values):
    """Raise ComputationError if any numeric value is NaN or infinite."""
    for value in values:
        if not scalar.is_finite(value):
            logger.debug("Non-finite %s: %r", quantity, value)
            raise ComputationError(quantity, value)


def spiral_coefficients(theta0, kappa0, theta1, kappa1, delta,
                        epsilon: Optional[float] = None) -> Tuple:
    """
    Heading polynomial coefficients (a, b, c, d) for one segment.

    Generic over the scalar type: floats, numpy values, CasADi expressions
    and dual numbers all go through the same arithmetic.

    Raises:
        InvalidSegmentLength: numeric delta <= epsilon
        ComputationError: a numeric coefficient is non-finite
    """
    check_segment_length(delta, epsilon)

    delta2 = delta * delta
    delta3 = delta2 * delta

    a = theta0
    b = kappa0
    c = ((-2.0 * kappa0) / delta - kappa1 / delta
         - (3.0 * theta0) / delta2 + (3.0 * theta1) / delta2)
    d = (kappa0 / delta2 + kappa1 / delta2
         + (2.0 * theta0) / delta3 - (2.0 * theta1) / delta3)

    check_finite('spiral coefficient', a, b, c, d)
    return a, b, c, d


def heading_at(coeffs, s):
    """theta(s) = a + b*s + c*s^2 + d*s^3"""
    a, b, c, d = coeffs
    return a + b * s + c * s * s + d * s * s * s


def curvature_at(coeffs, s):
    """kappa(s) = b + 2c*s + 3d*s^2"""
    _, b, c, d = coeffs
    return b + 2.0 * c * s + 3.0 * d * s * s


def curvature_rate_at(coeffs, s):
    """dkappa(s) = 2c + 6d*s"""
    _, _, c, d = coeffs
    return 2.0 * c + 6.0 * d * s


def axis_displacement(coeffs, s, trig):
    """Integral of trig(theta(u)) over [0, s]; trig is scalar.cos for x, scalar.sin for y."""
    return integrate(lambda u: trig(heading_at(coeffs, u)), s)


def displacement(coeffs, s):
    """
    (dx, dy) travelled from s = 0 to s along the heading polynomial.

    Both integrals use the same quadrature table.
    """
    return (axis_displacement(coeffs, s, scalar.cos),
            axis_displacement(coeffs, s, scalar.sin))


class SpiralSegment:
    """
    Numeric spiral segment between two nodes.

    Stores the boundary states and the derived coefficients, and evaluates
    heading, curvature, curvature rate and position at any arc length s.
    Evaluation outside [0, delta] extrapolates the polynomial.
    """

    def __init__(self, theta0: float, kappa0: float, dkappa0: float,
                 x0: float, y0: float, theta1: float, kappa1: float,
                 dkappa1: float, x1: float, y1: float, delta: float,
                 epsilon: Optional[float] = None):
        self.theta0 = theta0
        self.kappa0 = kappa0
        self.dkappa0 = dkappa0
        self.x0 = x0
        self.y0 = y0
        self.theta1 = theta1
        self.kappa1 = kappa1
        self.dkappa1 = dkappa1
        self.x1 = x1
        self.y1 = y1
        self.delta = delta

        self.a, self.b, self.c, self.d = spiral_coefficients(
            theta0, kappa0, theta1, kappa1, delta, epsilon)

    @classmethod
    def from_nodes(cls, node0, node1, delta: float,
                   epsilon: Optional[float] = None) -> 'SpiralSegment':
        """Build from two (theta, kappa, dkappa, x, y) nodes."""
        return cls(node0[THETA], node0[KAPPA], node0[DKAPPA], node0[X], node0[Y],
                   node1[THETA], node1[KAPPA], node1[DKAPPA], node1[X], node1[Y],
                   delta, epsilon)

    @property
    def coefficients(self) -> Tuple[float, float, float, float]:
        return self.a, self.b, self.c, self.d

    @property
    def length(self) -> float:
        return self.delta

    def theta(self, s: float) -> float:
        """Heading at arc length s."""
        value = heading_at(self.coefficients, s)
        check_finite('heading', value)
        return value

    def kappa(self, s: float) -> float:
        """Curvature at arc length s."""
        value = curvature_at(self.coefficients, s)
        check_finite('curvature', value)
        return value

    def dkappa(self, s: float) -> float:
        """Curvature rate at arc length s."""
        value = curvature_rate_at(self.coefficients, s)
        check_finite('curvature rate', value)
        return value

    def x(self, s: float) -> float:
        """x position at arc length s."""
        value = self.x0 + axis_displacement(self.coefficients, s, scalar.cos)
        check_finite('x position', value)
        return float(value)

    def y(self, s: float) -> float:
        """y position at arc length s."""
        value = self.y0 + axis_displacement(self.coefficients, s, scalar.sin)
        check_finite('y position', value)
        return float(value)

    def position(self, s: float) -> Tuple[float, float]:
        """(x, y) at arc length s."""
        dx, dy = displacement(self.coefficients, s)
        x, y = self.x0 + dx, self.y0 + dy
        check_finite('position', x, y)
        return float(x), float(y)

    def end_state(self) -> Tuple[float, float, float, float, float]:
        """(theta, kappa, dkappa, x, y) the curve reaches at s = delta."""
        x, y = self.position(self.delta)
        return (self.theta(self.delta), self.kappa(self.delta),
                self.dkappa(self.delta), x, y)

    def sample(self, n_points: int = 20) -> np.ndarray:
        """
        Sample the segment uniformly over [0, delta].

        Returns:
            [n_points, 6] array of [s, x, y, theta, kappa, dkappa]
        """
        if n_points < 2:
            raise ValueError("Need at least 2 sample points")
        s_vals = np.linspace(0.0, self.delta, n_points)
        samples = np.zeros((n_points, 6))
        for i, s in enumerate(s_vals):
            x, y = self.position(s)
            samples[i] = [s, x, y, self.theta(s), self.kappa(s), self.dkappa(s)]
        return samples

    def __repr__(self):
        return (f"SpiralSegment(delta={self.delta!r}, "
                f"a={self.a!r}, b={self.b!r}, c={self.c!r}, d={self.d!r})")
