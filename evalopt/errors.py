"""
Exceptions raised by evalopt.

Two families are distinguished. Contract violations are programming errors
(reading a counter that was never initialized, an out-of-range configuration
value, a gradient whose shape does not match the iterate); they are raised
as early as possible and are not meant to be recovered from. Numeric
degeneracies are raised by the root finders when an update step cannot be
formed (zero derivative, zero secant denominator, non-finite step).

Non-convergence is never an exception: every algorithm reports it through
its boolean return value.
"""

from __future__ import annotations


class ContractViolationError(RuntimeError):
    """Base class for misuse of the evalopt API."""


class CounterNotInitializedError(ContractViolationError):
    """
    Raised when a call counter is read before ``initialize_counters()``.

    Attributes
    ----------
    counter : str
        Which counter was read ("value" or "derivative").
    """

    def __init__(self, counter: str) -> None:
        super().__init__(
            f"{counter} call counter read before initialize_counters() was called."
        )
        self.counter = counter


class InvalidConfigurationError(ContractViolationError, ValueError):
    """Raised when a configuration field is unknown or outside its domain."""


class DimensionMismatchError(ContractViolationError, ValueError):
    """
    Raised when a computation returns an array whose shape does not match
    the iterate it was evaluated at.
    """

    def __init__(self, expected: tuple, got: tuple) -> None:
        super().__init__(f"Dimension mismatch: expected shape {expected}, got {got}.")
        self.expected = expected
        self.got = got


class ComputationError(ContractViolationError):
    """Raised when a wrapped computation does not produce a requested output."""


class DegenerateStepError(ArithmeticError):
    """
    Raised by a root finder when the update step is undefined.

    Attributes
    ----------
    iteration : int
        1-based iteration at which the degeneracy was detected.
    x : float
        Root estimate at which the step was attempted. The caller's iterate
        still holds this value.
    value : float
        Function value at ``x``.
    """

    def __init__(self, reason: str, iteration: int, x: float, value: float) -> None:
        super().__init__(
            f"{reason} at iteration {iteration} (x = {x!r}, f = {value!r})."
        )
        self.iteration = iteration
        self.x = x
        self.value = value


__all__ = [
    "ComputationError",
    "ContractViolationError",
    "CounterNotInitializedError",
    "DegenerateStepError",
    "DimensionMismatchError",
    "InvalidConfigurationError",
]
