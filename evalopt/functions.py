"""
Evaluable functions with optional derivatives and call accounting.

An :class:`Evaluable` wraps a value computation ``x -> y``. A
:class:`DifferentiableEvaluable` additionally provides ``derivative(x)`` and
a fused ``value_and_derivative(x)``, letting objectives that share work
between the two compute them in one pass.

Callers may supply the computation in several shapes; each shape is adapted
to the same :class:`ValueComputation` / :class:`DifferentiableComputation`
interface at construction time:

* a plain function ``fun(x) -> y`` (:class:`Evaluable`),
* a writer ``fun(x, out)`` filling a preallocated output
  (:meth:`Evaluable.from_writer`),
* a fused function ``fun(x, need_value, need_derivative) -> (y, dy)`` where a
  False flag means the corresponding output may be skipped and returned as
  None (:class:`DifferentiableEvaluable`),
* a pair of functions ``value_fun(x)``, ``derivative_fun(x)``
  (:meth:`DifferentiableEvaluable.from_pair`).

Extra positional or keyword arguments given at construction are bound
after ``x`` (and after the output slots) on every call.

Call counters are opt-in. After :meth:`initialize_counters`, each value
evaluation increments the value counter and each derivative evaluation
increments the derivative counter; a fused call increments both once.
Views created with :meth:`DifferentiableEvaluable.as_evaluable` share the
underlying computation and the value counter.

Example
-------
>>> def square_root(x, need_value, need_derivative, c):
...     return (x * x - c if need_value else None,
...             2 * x if need_derivative else None)
>>> f = DifferentiableEvaluable(square_root, 2.0)
>>> f.initialize_counters()
>>> f.value_and_derivative(3.0)
(7.0, 6.0)
>>> f.value_call_count(), f.derivative_call_count()
(1, 1)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Callable, Generic, Optional, TypeVar

import numpy as np

from .errors import ComputationError, CounterNotInitializedError

Domain = TypeVar("Domain")
Codomain = TypeVar("Codomain")
Derivative = TypeVar("Derivative")

FusedFunction = Callable[..., tuple[Optional[Any], Optional[Any]]]
"""
A FusedFunction is called as ``fun(x, need_value, need_derivative, *extra)`` and
returns ``(value, derivative)``; an output whose flag is False may be None.
"""

_PREBUILT_WITH_ARGUMENTS = "Extra arguments cannot be bound to a prebuilt computation."


class CallCounter:
    """Mutable invocation count shared by every view of one computation."""

    __slots__ = ("count",)

    def __init__(self) -> None:
        self.count = 0

    def increment(self) -> None:
        self.count += 1

    def __repr__(self) -> str:
        return f"CallCounter(count={self.count})"


class ValueComputation(ABC, Generic[Domain, Codomain]):
    """Uniform interface over a caller-supplied value computation."""

    @abstractmethod
    def value(self, x: Domain) -> Codomain:
        ...


class DifferentiableComputation(
    ValueComputation[Domain, Codomain], Generic[Domain, Codomain, Derivative]
):
    """Uniform interface over a caller-supplied value/derivative computation."""

    @abstractmethod
    def derivative(self, x: Domain) -> Derivative:
        ...

    @abstractmethod
    def value_and_derivative(self, x: Domain) -> tuple[Codomain, Derivative]:
        ...


def _bind(fun: Callable, args: tuple, kwargs: dict) -> Callable:
    if not callable(fun):
        raise TypeError(f"Expected a callable, got {type(fun).__name__}")
    if args or kwargs:
        return partial(_call_with_trailing, fun, args, kwargs)
    return fun


def _call_with_trailing(
    fun: Callable, args: tuple, kwargs: dict, *leading: Any
) -> Any:
    # partial() would place bound positionals before x; extra arguments
    # belong after x and any output slots.
    return fun(*leading, *args, **kwargs)


class _ValueFunction(ValueComputation):
    def __init__(self, fun: Callable) -> None:
        self._fun = fun

    def value(self, x):
        return self._fun(x)


class _WriterFunction(ValueComputation):
    def __init__(self, fun: Callable, out_like: Optional[Any]) -> None:
        self._fun = fun
        self._out_like = None if out_like is None else np.asarray(out_like)

    def value(self, x):
        if self._out_like is None:
            out = np.empty(())
            self._fun(x, out)
            return out[()]
        out = np.empty_like(self._out_like)
        self._fun(x, out)
        return out


class _FusedFunction(DifferentiableComputation):
    def __init__(self, fun: Callable) -> None:
        self._fun = fun

    def _call(self, x, need_value: bool, need_derivative: bool):
        result = self._fun(x, need_value, need_derivative)
        try:
            y, dy = result
        except (TypeError, ValueError):
            raise ComputationError(
                "A fused computation must return a (value, derivative) pair, "
                f"got {type(result).__name__}"
            ) from None
        if need_value and y is None:
            raise ComputationError(
                "Fused computation returned no value although one was requested."
            )
        if need_derivative and dy is None:
            raise ComputationError(
                "Fused computation returned no derivative although one was requested."
            )
        return y, dy

    def value(self, x):
        return self._call(x, True, False)[0]

    def derivative(self, x):
        return self._call(x, False, True)[1]

    def value_and_derivative(self, x):
        return self._call(x, True, True)


class _PairFunctions(DifferentiableComputation):
    def __init__(self, value_fun: Callable, derivative_fun: Callable) -> None:
        self._value_fun = value_fun
        self._derivative_fun = derivative_fun

    def value(self, x):
        return self._value_fun(x)

    def derivative(self, x):
        return self._derivative_fun(x)

    def value_and_derivative(self, x):
        return self._value_fun(x), self._derivative_fun(x)


class Evaluable(Generic[Domain, Codomain]):
    """
    Value-only callable ``x -> y`` with an optional shared call counter.

    Parameters
    ----------
    fun:
        Either ``fun(x, *args, **kwargs) -> y`` or an existing
        :class:`ValueComputation` (in which case no extra arguments may be
        given).
    *args, **kwargs:
        Extra arguments bound after ``x`` on every call.
    """

    def __init__(
        self, fun: Callable[..., Codomain] | ValueComputation, *args: Any, **kwargs: Any
    ) -> None:
        if isinstance(fun, ValueComputation):
            if args or kwargs:
                raise TypeError(_PREBUILT_WITH_ARGUMENTS)
            self._impl: ValueComputation = fun
        else:
            self._impl = _ValueFunction(_bind(fun, args, kwargs))
        self._value_counter: Optional[CallCounter] = None

    @classmethod
    def from_writer(
        cls,
        fun: Callable[..., None],
        out_like: Optional[Any] = None,
        *args: Any,
        **kwargs: Any,
    ) -> "Evaluable":
        """
        Wrap ``fun(x, out, *args, **kwargs)`` that writes its result into ``out``.

        ``out_like`` fixes the shape and dtype of the output array allocated
        for each call; None means a scalar codomain, returned unwrapped.
        """
        return cls(_WriterFunction(_bind(fun, args, kwargs), out_like))

    @classmethod
    def _view(
        cls, impl: ValueComputation, value_counter: Optional[CallCounter]
    ) -> "Evaluable":
        view = cls(impl)
        view._value_counter = value_counter
        return view

    @property
    def computation(self) -> ValueComputation:
        """The shared computation backing this handle."""
        return self._impl

    def value(self, x: Domain) -> Codomain:
        """Evaluate the wrapped computation at ``x``."""
        if self._value_counter is not None:
            self._value_counter.increment()
        return self._impl.value(x)

    __call__ = value

    def initialize_counters(self) -> None:
        """Install a fresh value counter starting at zero."""
        self._value_counter = CallCounter()

    def value_call_count(self) -> int:
        """Number of value evaluations since :meth:`initialize_counters`."""
        if self._value_counter is None:
            raise CounterNotInitializedError("value")
        return self._value_counter.count


class DifferentiableEvaluable(
    Evaluable[Domain, Codomain], Generic[Domain, Codomain, Derivative]
):
    """
    Evaluable that also provides its derivative.

    For a scalar function of one variable the derivative is a scalar; for a
    scalar objective over a vector domain it is the gradient, with the same
    shape as ``x``.

    Parameters
    ----------
    fun:
        Either a fused ``fun(x, need_value, need_derivative, *args, **kwargs)``
        returning ``(y, dy)`` or an existing :class:`DifferentiableComputation`.
        Outputs whose flag is False may be returned as None.
    *args, **kwargs:
        Extra arguments bound after the two flags on every call.
    """

    def __init__(
        self,
        fun: FusedFunction | DifferentiableComputation,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        if isinstance(fun, DifferentiableComputation):
            if args or kwargs:
                raise TypeError(_PREBUILT_WITH_ARGUMENTS)
            impl: DifferentiableComputation = fun
        elif isinstance(fun, ValueComputation):
            raise TypeError(
                "A value-only computation cannot back a DifferentiableEvaluable."
            )
        else:
            impl = _FusedFunction(_bind(fun, args, kwargs))
        super().__init__(impl)
        self._derivative_counter: Optional[CallCounter] = None

    @classmethod
    def from_pair(
        cls,
        value_fun: Callable[..., Codomain],
        derivative_fun: Callable[..., Derivative],
        *args: Any,
        **kwargs: Any,
    ) -> "DifferentiableEvaluable":
        """
        Wrap separate ``value_fun(x, ...)`` and ``derivative_fun(x, ...)``.

        Both receive the same bound extra arguments. The fused call simply
        invokes one after the other.
        """
        return cls(
            _PairFunctions(
                _bind(value_fun, args, kwargs), _bind(derivative_fun, args, kwargs)
            )
        )

    def derivative(self, x: Domain) -> Derivative:
        """Evaluate only the derivative at ``x``."""
        if self._derivative_counter is not None:
            self._derivative_counter.increment()
        return self._impl.derivative(x)

    def value_and_derivative(self, x: Domain) -> tuple[Codomain, Derivative]:
        """Evaluate value and derivative at ``x`` in a single pass."""
        if self._value_counter is not None:
            self._value_counter.increment()
        if self._derivative_counter is not None:
            self._derivative_counter.increment()
        return self._impl.value_and_derivative(x)

    def initialize_counters(self) -> None:
        """Install fresh value and derivative counters starting at zero."""
        super().initialize_counters()
        self._derivative_counter = CallCounter()

    def derivative_call_count(self) -> int:
        """Number of derivative evaluations since :meth:`initialize_counters`."""
        if self._derivative_counter is None:
            raise CounterNotInitializedError("derivative")
        return self._derivative_counter.count

    def as_evaluable(self) -> Evaluable[Domain, Codomain]:
        """
        Return a value-only view of this function.

        The view shares the computation and the current value counter, so
        value evaluations made through it are visible here. Counters
        installed later by :meth:`initialize_counters` are not seen by views
        created earlier.
        """
        return Evaluable._view(self._impl, self._value_counter)


def eval_value(fun: Evaluable[Domain, Codomain], x: Domain) -> Codomain:
    """Evaluate ``fun`` at ``x``; equivalent to ``fun.value(x)``."""
    return fun.value(x)


__all__ = [
    "CallCounter",
    "DifferentiableComputation",
    "DifferentiableEvaluable",
    "Evaluable",
    "FusedFunction",
    "ValueComputation",
    "eval_value",
]
