"""
Example: Adam on the Rosenbrock function

Minimizes f(x) = (1 - x0)^2 + c (x1 - x0^2)^2 with c = 10, starting from
(2, 2), using aggressive moment decay rates and a step size decaying as
1/sqrt(k). Iteration diagnostics are printed to stderr every 10 iterations.
"""

import logging

import numpy as np

from evalopt import (
    DifferentiableEvaluable,
    adam_optimize,
    configure_logging,
    inverse_sqrt_schedule,
)


def rosenbrock(x, need_value, need_gradient, c):
    """Rosenbrock value and gradient; only the requested outputs are computed."""
    assert x.shape == (2,)

    value = None
    gradient = None
    if need_value:
        value = (1 - x[0]) ** 2 + c * (x[1] - x[0] ** 2) ** 2
    if need_gradient:
        gradient = np.array(
            [
                2 * (-1 + x[0] + 2 * c * x[0] ** 3 - 2 * c * x[0] * x[1]),
                2 * c * (x[1] - x[0] ** 2),
            ]
        )
    return value, gradient


def main():
    configure_logging(level=logging.INFO)

    f_rosenbrock = DifferentiableEvaluable(rosenbrock, 10.0)
    x = np.full(2, 2.0)

    f_rosenbrock.initialize_counters()

    has_converged = adam_optimize(
        f_rosenbrock,
        x,
        beta_1=0.6,
        beta_2=0.6,
        step_size=inverse_sqrt_schedule(1.0),
        absolute_epsilon=0.01,
        verbose=True,
    )

    print(f"has converged: {has_converged}")
    print(f"x:                {x}")
    print(f"value counter:      {f_rosenbrock.value_call_count()}")
    print(f"derivative counter: {f_rosenbrock.derivative_call_count()}")


if __name__ == "__main__":
    main()
