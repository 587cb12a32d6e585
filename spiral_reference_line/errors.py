"""
Error types raised by the spiral segment model and residuals.

Both failures are local and synchronous: the math is deterministic, so an
error always points at the inputs (a proposed segment length or node state),
never at a transient condition. The caller (usually the optimizer driving the
residuals) decides whether to reject, clamp, or abort.
"""


class SpiralError(ValueError):
    """Base class for invalid spiral inputs or results."""


class InvalidSegmentLength(SpiralError):
    """Segment length at or below epsilon (coefficients would divide by ~0)."""

    def __init__(self, delta: float, epsilon: float):
        self.delta = delta
        self.epsilon = epsilon
        super().__init__(
            f"Segment length {delta!r} must be greater than epsilon {epsilon!r}")


class ComputationError(SpiralError):
    """A coefficient, heading, position or residual came out non-finite."""

    def __init__(self, quantity: str, value=None):
        self.quantity = quantity
        self.value = value
        super().__init__(f"Non-finite {quantity}: {value!r}")
