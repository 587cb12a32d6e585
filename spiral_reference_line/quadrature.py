"""
Fixed 7-node quadrature over a segment.

Gauss-Legendre nodes mapped onto the unit interval, with weights pre-scaled
so they sum to 1. Integrating over [0, L] is then

    L * sum_i w_i * g(f_i * L)

The segment model and the position residual both integrate with this table.
It must stay the single source of truth so the two never disagree.
"""

from typing import Callable, Tuple

NODES: Tuple[float, ...] = (
    0.025446043828620812,
    0.12923440720030277,
    0.29707742431130146,
    0.5,
    0.7029225756886985,
    0.8707655927996972,
    0.9745539561713792,
)

WEIGHTS: Tuple[float, ...] = (
    0.06474248308443546,
    0.13985269574463816,
    0.1909150252525593,
    0.20897959183673434,
    0.1909150252525593,
    0.13985269574463816,
    0.06474248308443546,
)

# (fraction of length, weight) pairs
QUADRATURE: Tuple[Tuple[float, float], ...] = tuple(zip(NODES, WEIGHTS))


def integrate(integrand: Callable, length):
    """
    Approximate the integral of ``integrand`` over [0, length].

    Args:
        integrand: Callable taking the absolute sample position u = f_i * length.
        length: Upper integration bound. Any scalar type the integrand accepts.

    Returns:
        length * sum_i w_i * integrand(f_i * length)
    """
    total = 0.0
    for fraction, weight in QUADRATURE:
        total = total + weight * integrand(fraction * length)
    return length * total
