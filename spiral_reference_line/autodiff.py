"""
CasADi residual functions with exact Jacobians.

Builds the residuals once over SX symbols and wraps them in ca.Function
objects, so an optimizer gets residual values and Jacobians from the same
formulas the numeric path uses. Symbolic segment lengths cannot be checked
against epsilon while the graph is built; the returned CompiledResidual
keeps the build weights, and evaluate_residual_function() checks
the numeric lengths before calling the compiled function.

Inputs per block (each node is a 5-vector [theta, kappa, dkappa, x, y]):
- position:   node0, node1, delta
- length:     delta
- continuity: node0, node1, node2, delta, delta1
"""

import logging
from dataclasses import dataclass
from typing import Optional

import casadi as ca
import numpy as np

from .config import DEFAULT_WEIGHTS, ResidualWeights
from .errors import ComputationError
from .residuals import get_block
from .segment import check_segment_length

logger = logging.getLogger(__name__)

NODE_SIZE = 5

# Symbol names per block, in call order
_INPUTS = {
    'position': ('node0', 'node1', 'delta'),
    'length': ('delta',),
    'continuity': ('node0', 'node1', 'node2', 'delta', 'delta1'),
}


@dataclass(frozen=True)
class CompiledResidual:
    """A compiled residual block plus the weights it was built with."""
    name: str
    function: ca.Function
    weights: ResidualWeights

    def __call__(self, *args):
        return evaluate_residual_function(self, *args)


def _symbols(name: str):
    syms = []
    for label in _INPUTS[name]:
        size = NODE_SIZE if label.startswith('node') else 1
        syms.append(ca.SX.sym(label, size))
    return syms


def build_residual_function(name: str,
                            weights: Optional[ResidualWeights] = None) -> CompiledResidual:
    """
    Compile a residual block into a CasADi Function.

    Returns:
        CompiledResidual wrapping ca.Function(name, inputs, [residual])
    """
    weights = weights or DEFAULT_WEIGHTS
    block = get_block(name)
    syms = _symbols(name)
    residual = ca.vertcat(*block(*syms, weights=weights))
    logger.debug("Built %s residual function (%d inputs, %d outputs)",
                 name, len(syms), residual.numel())
    function = ca.Function(f'{name}_residual', syms, [residual],
                           list(_INPUTS[name]), ['residual'])
    return CompiledResidual(name, function, weights)


def build_residual_jacobian(name: str,
                            weights: Optional[ResidualWeights] = None) -> CompiledResidual:
    """
    Compile a residual block together with its Jacobian.

    The Jacobian is taken with respect to all inputs stacked in call order,
    e.g. [node0; node1; delta] (11 columns) for the position block.

    Returns:
        CompiledResidual wrapping ca.Function(name, inputs, [residual, jacobian])
    """
    weights = weights or DEFAULT_WEIGHTS
    block = get_block(name)
    syms = _symbols(name)
    residual = ca.vertcat(*block(*syms, weights=weights))
    jac = ca.jacobian(residual, ca.vertcat(*syms))
    function = ca.Function(f'{name}_residual_jacobian', syms, [residual, jac],
                           list(_INPUTS[name]), ['residual', 'jacobian'])
    return CompiledResidual(name, function, weights)


def evaluate_residual_function(compiled: CompiledResidual, *args):
    """
    Call a compiled residual with numeric inputs.

    Segment lengths are validated against the epsilon the residual was
    built with, and outputs are checked for finiteness afterwards.

    Returns:
        Tuple of numpy arrays, one per function output.
    """
    name = compiled.name
    if name != 'length':
        for label, value in zip(_INPUTS[name], args):
            if label.startswith('delta'):
                check_segment_length(value, compiled.weights.epsilon)

    outputs = compiled.function(*[ca.DM(np.asarray(arg, dtype=np.float64).reshape(-1))
                                  for arg in args])
    if not isinstance(outputs, (tuple, list)):
        outputs = (outputs,)

    results = tuple(np.array(out.full()) for out in outputs)
    for result in results:
        if not np.all(np.isfinite(result)):
            logger.debug("Non-finite %s residual output: %r", name, result)
            raise ComputationError(f"{name} residual", result)
    return results
