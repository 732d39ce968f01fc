"""Newton and Steffensen root finders for scalar equations ``f(x) = 0``.

Both routines update a size-1 floating numpy array in place and return
whether the last step was smaller than ``epsilon``. Every iteration is
logged at INFO level as ``iteration, new x, f(previous x)``.

Steps are applied before the stopping test is acted upon, so on success
``x`` already includes the final (small) correction.

A step that cannot be formed, because the derivative (Newton) or the secant
denominator (Steffensen) is zero or because the step is not finite, raises
:class:`~evalopt.errors.DegenerateStepError`; ``x`` then keeps the last
finite estimate. An exact root (``f(x) == 0``) gives a zero step and counts
as converged.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

import numpy as np

from .core import RootConfig, check_convergence, configure_root, resolve_config
from .errors import DegenerateStepError
from .functions import DifferentiableEvaluable, Evaluable
from .logging import get_logger

logger = get_logger(__name__, level=logging.INFO)


def _check_scalar_iterate(x: Any) -> None:
    if not isinstance(x, np.ndarray):
        raise TypeError(
            "Root finders update x in place and need a numpy array such as "
            f"np.array(1.0), got {type(x).__name__}"
        )
    if x.size != 1:
        raise ValueError(f"x must hold a single value, got shape {x.shape}")
    if not np.issubdtype(x.dtype, np.floating):
        raise TypeError(f"x must have a floating dtype, got {x.dtype}")


def _max_digits10(dtype: np.dtype) -> int:
    # Digits needed to round-trip a value of this dtype.
    return math.ceil(1 + (np.finfo(dtype).nmant + 1) * math.log10(2))


def _show_iteration(iteration: int, x: np.ndarray, f: Any) -> None:
    digits = _max_digits10(x.dtype)
    logger.info(
        "%4d x = %*.*g f = %*.*g",
        iteration,
        digits + 5,
        digits,
        x.flat[0],
        digits + 5,
        digits,
        f,
    )


def _apply_step(
    x: np.ndarray, current: Any, delta: Any, f: Any, iteration: int, epsilon: float
) -> bool:
    if not np.isfinite(delta):
        raise DegenerateStepError("Non-finite step", iteration, current, f)
    has_converged = check_convergence(abs(delta), epsilon)
    x[...] = current + delta
    _show_iteration(iteration, x, f)
    return has_converged


def newton(
    objective: DifferentiableEvaluable,
    x: np.ndarray,
    config: Optional[RootConfig] = None,
    **options: Any,
) -> bool:
    """
    Newton's method ``x <- x - f(x) / f'(x)``.

    Each iteration makes exactly one fused value/derivative call.

    Parameters
    ----------
    objective:
        Scalar function with scalar derivative.
    x:
        Size-1 floating numpy array with the initial guess, updated in place.
    config:
        Complete configuration. Mutually exclusive with ``options``.
    **options:
        ``epsilon`` and/or ``max_iterations`` over the defaults
        (1e-10 and 20).

    Returns
    -------
    bool
        True if ``|delta| < epsilon`` was reached within the budget.

    Raises
    ------
    DegenerateStepError
        If ``f'(x) == 0`` or the step is not finite.
    """
    cfg = resolve_config(config, options, configure_root)
    _check_scalar_iterate(x)

    has_converged = False
    for iteration in range(1, cfg.max_iterations + 1):
        current = x.flat[0]
        f, df = objective.value_and_derivative(current)
        if f == 0:
            delta = 0.0
        elif df == 0:
            raise DegenerateStepError("Zero derivative", iteration, current, f)
        else:
            delta = -f / df
        has_converged = _apply_step(x, current, delta, f, iteration, cfg.epsilon)
        if has_converged:
            break
    return has_converged


def steffensen(
    objective: Evaluable,
    x: np.ndarray,
    config: Optional[RootConfig] = None,
    **options: Any,
) -> bool:
    """
    Steffensen's derivative-free method.

    The derivative is replaced by the forward secant
    ``(f(x + f(x)) - f(x)) / f(x)``, giving

        x <- x - f(x)**2 / (f(x + f(x)) - f(x))

    Each iteration makes exactly two value calls and no derivative call. A
    :class:`DifferentiableEvaluable` is accepted and used through its
    value-only view.

    Raises
    ------
    DegenerateStepError
        If ``f(x + f(x)) == f(x)`` or the step is not finite.
    """
    cfg = resolve_config(config, options, configure_root)
    _check_scalar_iterate(x)
    if isinstance(objective, DifferentiableEvaluable):
        objective = objective.as_evaluable()

    has_converged = False
    for iteration in range(1, cfg.max_iterations + 1):
        current = x.flat[0]
        f = objective.value(current)
        if f == 0:
            # Exact root; x + f(x) would coincide with x.
            has_converged = _apply_step(x, current, 0.0, f, iteration, cfg.epsilon)
            break
        g = objective.value(current + f)
        denominator = g - f
        if denominator == 0:
            raise DegenerateStepError("Zero secant denominator", iteration, current, f)
        delta = -f * f / denominator
        has_converged = _apply_step(x, current, delta, f, iteration, cfg.epsilon)
        if has_converged:
            break
    return has_converged


__all__ = ["newton", "steffensen"]
