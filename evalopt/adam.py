"""Adam: bias-corrected adaptive-moment gradient descent.

Let ``g_k`` be the gradient at iteration ``k``:

    m_k = beta_1 * m_{k-1} + (1 - beta_1) * g_k
    v_k = beta_2 * v_{k-1} + (1 - beta_2) * g_k**2

    m_hat = m_k / (1 - beta_1**k)
    v_hat = v_k / (1 - beta_2**k)

    x <- x - step_size(k) * m_hat / (sqrt(v_hat) + internal_epsilon)

Iteration stops as soon as ``||g_k|| < absolute_epsilon``.

Example
-------
>>> import numpy as np
>>> from evalopt import DifferentiableEvaluable, adam_optimize
>>> def bowl(x, need_value, need_gradient):
...     d = x - 1.0
...     return (float(d @ d) if need_value else None,
...             2.0 * d if need_gradient else None)
>>> x = np.zeros(3)
>>> adam_optimize(DifferentiableEvaluable(bowl), x, max_iterations=2000,
...               step_size=lambda k: 0.05)
True
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import numpy as np

from .core import (
    AdamConfig,
    check_convergence,
    configure_adam,
    resolve_config,
    resolve_internal_epsilon,
)
from .errors import DimensionMismatchError
from .functions import DifferentiableEvaluable, eval_value
from .logging import get_logger
from .norms import norm

logger = get_logger(__name__, level=logging.INFO)


def _check_iterate(x: Any) -> None:
    if not isinstance(x, np.ndarray):
        raise TypeError(
            "adam_optimize updates x in place and needs a numpy array, "
            f"got {type(x).__name__}"
        )
    if not np.issubdtype(x.dtype, np.floating):
        raise TypeError(f"x must have a floating dtype, got {x.dtype}")
    if x.size == 0:
        raise ValueError("x must not be empty")


def adam_optimize(
    objective: DifferentiableEvaluable,
    x: np.ndarray,
    config: Optional[AdamConfig] = None,
    **options: Any,
) -> bool:
    """
    Minimize ``objective`` with Adam, starting from and updating ``x``.

    Parameters
    ----------
    objective:
        Scalar objective over vectors; ``objective.derivative(x)`` must
        return the gradient with the same shape as ``x``.
    x:
        Floating numpy array holding the starting point. It is overwritten
        with each iterate and on return holds the converged point or the
        last iterate.
    config:
        Complete configuration. Mutually exclusive with ``options``.
    **options:
        Named :class:`~evalopt.core.AdamConfig` fields layered over the
        defaults.

    Returns
    -------
    bool
        True if the gradient norm fell below ``absolute_epsilon`` within
        the iteration budget.

    Raises
    ------
    InvalidConfigurationError
        If an option is unknown or out of range.
    DimensionMismatchError
        If the gradient shape differs from the shape of ``x``.
    """
    cfg = resolve_config(config, options, configure_adam)
    _check_iterate(x)

    beta_1 = cfg.beta_1
    beta_2 = cfg.beta_2
    internal_epsilon = cfg.internal_epsilon
    if internal_epsilon is None:
        internal_epsilon = resolve_internal_epsilon(x.dtype)

    m_k = np.zeros_like(x)
    v_k = np.zeros_like(x)

    has_converged = False
    for k in range(1, cfg.max_iterations):
        grad = np.asarray(objective.derivative(x))
        if grad.shape != x.shape:
            raise DimensionMismatchError(x.shape, grad.shape)

        grad_norm = norm(grad)
        has_converged = check_convergence(grad_norm, cfg.absolute_epsilon)

        if has_converged or (cfg.verbose and k % 10 == 1):
            logger.info("%5d %15.10g %15.10g", k, eval_value(objective, x), grad_norm)
        if has_converged:
            break

        m_k = beta_1 * m_k + (1 - beta_1) * grad
        v_k = beta_2 * v_k + (1 - beta_2) * grad * grad
        hat_m_k = m_k / (1 - beta_1**k)
        hat_v_k = v_k / (1 - beta_2**k)
        x -= cfg.step_size(k) * hat_m_k / (np.sqrt(hat_v_k) + internal_epsilon)

    return has_converged


__all__ = ["adam_optimize"]
