"""
Scalar helpers shared by the segment model and the residuals.

Every formula in this package is written once and evaluated with whatever
scalar type the caller passes in: plain floats, numpy values, CasADi
SX/MX/DM expressions, or any dual-number type that implements arithmetic
plus ``sin()``/``cos()`` methods. Trigonometry is routed through ``sin`` and
``cos`` below so the formulas never pick a backend themselves.
"""

import math
from typing import Optional

import casadi as ca
import numpy as np

_SYMBOLIC = (ca.SX, ca.MX)


def is_symbolic(value) -> bool:
    """True for CasADi SX/MX expressions (no numeric value at build time)."""
    return isinstance(value, _SYMBOLIC)


def is_number(value) -> bool:
    """True for plain numeric scalars (float, int, numpy scalar, 1x1 DM)."""
    if isinstance(value, ca.DM):
        return value.numel() == 1
    if isinstance(value, np.ndarray):
        return value.size == 1 and np.issubdtype(value.dtype, np.number)
    return isinstance(value, (int, float, np.number))


def sin(value):
    if isinstance(value, (ca.SX, ca.MX, ca.DM)):
        return ca.sin(value)
    if isinstance(value, (int, float, np.number, np.ndarray)):
        return np.sin(value)
    # Duck-typed scalars (dual numbers, jets) carry their own trig.
    return value.sin()


def cos(value):
    if isinstance(value, (ca.SX, ca.MX, ca.DM)):
        return ca.cos(value)
    if isinstance(value, (int, float, np.number, np.ndarray)):
        return np.cos(value)
    return value.cos()


def numeric_value(value) -> Optional[float]:
    """
    Best-effort float for a scalar, or None when it has no numeric value.

    Numeric arrays with more than one element are not scalars and raise
    TypeError rather than being mistaken for symbolic values.

    Dual numbers expose their primal part as ``real`` or ``value``; symbolic
    CasADi expressions return None.
    """
    if is_symbolic(value):
        return None
    if isinstance(value, ca.DM):
        if value.numel() != 1:
            raise TypeError(f"Expected a scalar, got a {value.shape} DM")
        return float(value)
    if isinstance(value, np.ndarray):
        if value.size != 1:
            raise TypeError(f"Expected a scalar, got an array of shape {value.shape}")
        return float(value.reshape(-1)[0])
    if isinstance(value, (int, float, np.number)):
        return float(value)
    for attr in ('real', 'value'):
        primal = getattr(value, attr, None)
        if isinstance(primal, (int, float, np.number)):
            return float(primal)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_finite(value) -> bool:
    """
    False only when a numeric value is known and is NaN or infinite.

    Symbolic values are treated as finite since they cannot be checked yet.
    """
    number = numeric_value(value)
    if number is None:
        return True
    return math.isfinite(number)
