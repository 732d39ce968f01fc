"""
Example: Newton and Steffensen root finding

Solves x^2 - 2 = 0 from x = 2 with Newton's method (one fused
value/derivative call per iteration) and with Steffensen's method (two
value calls per iteration, no derivative). Each iteration is printed to
stderr; call counters show the work each method performed.
"""

import logging

import numpy as np

from evalopt import DifferentiableEvaluable, configure_logging, newton, steffensen


def square_root(x, need_value, need_derivative, c):
    """f(x) = x^2 - c and f'(x) = 2x."""
    value = x * x - c if need_value else None
    derivative = 2 * x if need_derivative else None
    return value, derivative


def report(name, has_converged, x, f):
    print(name)
    print(f"has converged: {has_converged}")
    print(f"root:               {float(x):.17g}")
    print(f"value counter:      {f.value_call_count()}")
    print(f"derivative counter: {f.derivative_call_count()}")
    print()


def main():
    configure_logging(level=logging.INFO)

    f = DifferentiableEvaluable(square_root, 2.0)
    x_init = 2.0

    f.initialize_counters()
    x = np.array(x_init)
    has_converged = newton(f, x)
    report("Newton", has_converged, x, f)

    f.initialize_counters()
    x = np.array(x_init)
    has_converged = steffensen(f.as_evaluable(), x)
    report("Steffensen", has_converged, x, f)


if __name__ == "__main__":
    main()
