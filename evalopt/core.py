"""Configuration records and shared helpers for the evalopt algorithms.

Each algorithm receives a single frozen configuration object. Fields are
validated when the object is built, so an out-of-range value fails before
any iteration runs. :func:`configure_adam` and :func:`configure_root` build
a configuration from keyword options layered over the defaults.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Optional, TypeVar

import numpy as np

from .errors import InvalidConfigurationError

StepSizeSchedule = Callable[[int], float]
"""
A StepSizeSchedule maps the 1-based iteration index k to a step size.
"""

ROOT_EPSILON = 1e-10
ROOT_MAX_ITERATIONS = 20
ADAM_ABSOLUTE_EPSILON = 1e-6
ADAM_MAX_ITERATIONS = 100

_ConfigT = TypeVar("_ConfigT")


def check_convergence(metric: float, tol: float) -> bool:
    """Return True if the convergence metric is strictly below tolerance."""
    return bool(metric < tol)


def _require_real(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfigurationError(f"{name} must be a real number, got {value!r}")


def _require_positive(name: str, value: float) -> None:
    _require_real(name, value)
    if not value > 0:
        raise InvalidConfigurationError(f"{name} must be > 0, got {value!r}")


def _require_open_unit_interval(name: str, value: float) -> None:
    _require_real(name, value)
    if not 0.0 < value < 1.0:
        raise InvalidConfigurationError(f"{name} must be in (0, 1), got {value!r}")


def _require_iterations(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be >= 1, got {value!r}")


def constant_schedule(alpha: float) -> StepSizeSchedule:
    """Return a schedule that always yields ``alpha``."""
    _require_positive("alpha", alpha)

    def schedule(_: int) -> float:
        return alpha

    return schedule


def inverse_sqrt_schedule(alpha0: float) -> StepSizeSchedule:
    """Return the decaying schedule ``alpha_k = alpha0 / sqrt(k)``."""
    _require_positive("alpha0", alpha0)

    def schedule(k: int) -> float:
        return alpha0 / math.sqrt(k)

    return schedule


def resolve_internal_epsilon(dtype: Any) -> float:
    """Default Adam stabilizer: square root of the dtype's machine epsilon."""
    return float(np.sqrt(np.finfo(dtype).eps))


@dataclass(frozen=True)
class AdamConfig:
    """
    Configuration for :func:`evalopt.adam.adam_optimize`.

    Args:
        max_iterations: Iteration budget. Iterations run for
            k = 1, ..., max_iterations - 1.
        step_size: Schedule mapping the 1-based iteration index to a step
            size. Defaults to a constant 0.01.
        beta_1: Decay rate of the first-moment estimate, in (0, 1).
        beta_2: Decay rate of the second-moment estimate, in (0, 1).
        absolute_epsilon: Stop once the gradient norm drops below this.
        verbose: Log a diagnostic line every 10 iterations.
        internal_epsilon: Added to ``sqrt(v_hat)`` in the update denominator,
            in (0, 1). None selects ``sqrt(eps)`` of the iterate's dtype.
    """

    max_iterations: int = ADAM_MAX_ITERATIONS
    step_size: StepSizeSchedule = field(default_factory=lambda: constant_schedule(0.01))
    beta_1: float = 0.9
    beta_2: float = 0.999
    absolute_epsilon: float = ADAM_ABSOLUTE_EPSILON
    verbose: bool = False
    internal_epsilon: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate configuration fields."""
        _require_iterations("max_iterations", self.max_iterations)
        if not callable(self.step_size):
            raise InvalidConfigurationError("step_size must be callable")
        _require_open_unit_interval("beta_1", self.beta_1)
        _require_open_unit_interval("beta_2", self.beta_2)
        _require_positive("absolute_epsilon", self.absolute_epsilon)
        if self.internal_epsilon is not None:
            _require_open_unit_interval("internal_epsilon", self.internal_epsilon)


@dataclass(frozen=True)
class RootConfig:
    """
    Configuration shared by :func:`evalopt.roots.newton` and
    :func:`evalopt.roots.steffensen`.

    Args:
        epsilon: Stop once the magnitude of the update step drops below this.
        max_iterations: Iteration budget.
    """

    epsilon: float = ROOT_EPSILON
    max_iterations: int = ROOT_MAX_ITERATIONS

    def __post_init__(self) -> None:
        """Validate configuration fields."""
        _require_positive("epsilon", self.epsilon)
        _require_iterations("max_iterations", self.max_iterations)


def _configure(base: _ConfigT, options: dict[str, Any]) -> _ConfigT:
    known = {f.name for f in fields(base)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise InvalidConfigurationError(
            f"Unknown option(s) {unknown} for {type(base).__name__}. "
            f"Supported names: {sorted(known)}"
        )
    return replace(base, **options)


def configure_adam(**options: Any) -> AdamConfig:
    """Build an :class:`AdamConfig` from named options over the defaults.

    Example:
        >>> cfg = configure_adam(beta_1=0.6, verbose=True)
        >>> cfg.beta_1, cfg.beta_2
        (0.6, 0.999)
    """
    return _configure(AdamConfig(), options)


def configure_root(**options: Any) -> RootConfig:
    """Build a :class:`RootConfig` from named options over the defaults."""
    return _configure(RootConfig(), options)


def resolve_config(
    config: Optional[_ConfigT], options: dict[str, Any], build: Callable[..., _ConfigT]
) -> _ConfigT:
    """Return ``config`` or a configuration built from ``options``, not both."""
    if config is not None and options:
        raise InvalidConfigurationError(
            "Pass either a configuration object or keyword options, not both."
        )
    if config is not None:
        return config
    return build(**options)


__all__ = [
    "ADAM_ABSOLUTE_EPSILON",
    "ADAM_MAX_ITERATIONS",
    "AdamConfig",
    "ROOT_EPSILON",
    "ROOT_MAX_ITERATIONS",
    "RootConfig",
    "StepSizeSchedule",
    "check_convergence",
    "configure_adam",
    "configure_root",
    "constant_schedule",
    "inverse_sqrt_schedule",
    "resolve_config",
    "resolve_internal_epsilon",
]
