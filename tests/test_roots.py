import math

import numpy as np
import pytest

from evalopt import (
    DegenerateStepError,
    DifferentiableEvaluable,
    Evaluable,
    InvalidConfigurationError,
    RootConfig,
    newton,
    steffensen,
)

SQRT_2 = 1.4142135624


def square_root(x, need_value, need_derivative, c):
    return (x * x - c if need_value else None, 2 * x if need_derivative else None)


@pytest.fixture
def sqrt_two():
    f = DifferentiableEvaluable(square_root, 2.0)
    f.initialize_counters()
    return f


def test_newton_finds_square_root_of_two(sqrt_two, capture_diagnostics):
    logs = capture_diagnostics("evalopt.roots")
    x = np.array(2.0)

    assert newton(sqrt_two, x)

    assert round(float(x), 9) == round(SQRT_2, 9)
    assert abs(float(x) - math.sqrt(2.0)) < 1e-10
    iterations = len(logs.records)
    assert iterations < 10
    # One fused call per iteration.
    assert sqrt_two.value_call_count() == iterations
    assert sqrt_two.derivative_call_count() == iterations


def test_steffensen_finds_square_root_without_derivatives(
    sqrt_two, capture_diagnostics
):
    logs = capture_diagnostics("evalopt.roots")
    x = np.array(2.0)

    assert steffensen(sqrt_two, x)

    assert round(float(x), 9) == round(SQRT_2, 9)
    iterations = len(logs.records)
    assert iterations < 20
    assert sqrt_two.derivative_call_count() == 0
    assert sqrt_two.value_call_count() == 2 * iterations


def test_steffensen_accepts_value_only_function():
    f = Evaluable(lambda x: x**3 - 8.0)
    x = np.array(2.1)
    assert steffensen(f, x)
    assert float(x) == pytest.approx(2.0, abs=1e-10)


def test_iteration_diagnostics_report_new_x_and_previous_value(
    sqrt_two, capture_diagnostics
):
    logs = capture_diagnostics("evalopt.roots")
    x = np.array(2.0)
    newton(sqrt_two, x, max_iterations=1)

    parts = logs.records[0].getMessage().split()
    assert parts[0] == "1"
    assert parts[1:3] == ["x", "="]
    assert float(parts[3]) == 1.5
    assert parts[4:6] == ["f", "="]
    assert float(parts[6]) == 2.0


def test_budget_exhaustion_returns_false_and_keeps_last_iterate(sqrt_two):
    x = np.array(2.0)
    assert newton(sqrt_two, x, RootConfig(max_iterations=2)) is False
    assert float(x) == pytest.approx(17.0 / 12.0)
    assert sqrt_two.derivative_call_count() == 2


def test_size_one_vector_iterate_is_updated(sqrt_two):
    x = np.array([2.0])
    assert newton(sqrt_two, x)
    assert x.shape == (1,)
    assert x[0] == pytest.approx(math.sqrt(2.0))


def test_exact_root_converges_immediately():
    f = DifferentiableEvaluable.from_pair(lambda x: x - 1.0, lambda x: 0.0)
    f.initialize_counters()
    x = np.array(1.0)
    assert newton(f, x)
    assert float(x) == 1.0
    assert f.value_call_count() == 1

    f.initialize_counters()
    assert steffensen(f, x)
    assert float(x) == 1.0
    assert f.value_call_count() == 1


def test_newton_zero_derivative_raises_and_keeps_iterate(sqrt_two):
    x = np.array(0.0)
    with pytest.raises(DegenerateStepError) as excinfo:
        newton(sqrt_two, x)
    err = excinfo.value
    assert err.iteration == 1
    assert err.x == 0.0
    assert err.value == -2.0
    assert float(x) == 0.0


def test_steffensen_flat_secant_raises():
    f = Evaluable(lambda x: 1.0)
    x = np.array(5.0)
    with pytest.raises(DegenerateStepError, match="secant"):
        steffensen(f, x)
    assert float(x) == 5.0


def test_non_finite_step_raises():
    f = DifferentiableEvaluable.from_pair(lambda x: float("nan"), lambda x: 1.0)
    with pytest.raises(DegenerateStepError, match="Non-finite"):
        newton(f, np.array(1.0))


@pytest.mark.parametrize(
    "x, error",
    [
        (2.0, TypeError),
        (np.array(2), TypeError),
        (np.array([1.0, 2.0]), ValueError),
    ],
)
def test_invalid_iterates_are_rejected(sqrt_two, x, error):
    with pytest.raises(error):
        newton(sqrt_two, x)
    with pytest.raises(error):
        steffensen(sqrt_two, x)


def test_invalid_options_are_rejected(sqrt_two):
    with pytest.raises(InvalidConfigurationError):
        newton(sqrt_two, np.array(2.0), epsilon=0.0)
    with pytest.raises(InvalidConfigurationError):
        steffensen(sqrt_two, np.array(2.0), RootConfig(), max_iterations=3)
