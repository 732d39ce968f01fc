"""evalopt - evaluable functions with call accounting, Adam, and scalar root finders.

Example
-------
>>> import numpy as np
>>> from evalopt import DifferentiableEvaluable, newton, steffensen
>>> def square_root(x, need_value, need_derivative, c):
...     return (x * x - c if need_value else None,
...             2 * x if need_derivative else None)
>>> f = DifferentiableEvaluable(square_root, 2.0)
>>> x = np.array(2.0)
>>> newton(f, x)
True
>>> round(float(x), 10)
1.4142135624
"""

__version__ = "0.1.0"

from .adam import adam_optimize
from .core import (
    ADAM_ABSOLUTE_EPSILON,
    ADAM_MAX_ITERATIONS,
    ROOT_EPSILON,
    ROOT_MAX_ITERATIONS,
    AdamConfig,
    RootConfig,
    StepSizeSchedule,
    check_convergence,
    configure_adam,
    configure_root,
    constant_schedule,
    inverse_sqrt_schedule,
    resolve_internal_epsilon,
)
from .errors import (
    ComputationError,
    ContractViolationError,
    CounterNotInitializedError,
    DegenerateStepError,
    DimensionMismatchError,
    InvalidConfigurationError,
)
from .functions import (
    CallCounter,
    DifferentiableComputation,
    DifferentiableEvaluable,
    Evaluable,
    ValueComputation,
    eval_value,
)
from .logging import configure_logging, get_logger, set_log_level
from .norms import norm, squared_norm
from .roots import newton, steffensen

__all__ = [
    "ADAM_ABSOLUTE_EPSILON",
    "ADAM_MAX_ITERATIONS",
    "AdamConfig",
    "CallCounter",
    "ComputationError",
    "ContractViolationError",
    "CounterNotInitializedError",
    "DegenerateStepError",
    "DifferentiableComputation",
    "DifferentiableEvaluable",
    "DimensionMismatchError",
    "Evaluable",
    "InvalidConfigurationError",
    "ROOT_EPSILON",
    "ROOT_MAX_ITERATIONS",
    "RootConfig",
    "StepSizeSchedule",
    "ValueComputation",
    "adam_optimize",
    "check_convergence",
    "configure_adam",
    "configure_logging",
    "configure_root",
    "constant_schedule",
    "eval_value",
    "get_logger",
    "inverse_sqrt_schedule",
    "newton",
    "norm",
    "resolve_internal_epsilon",
    "set_log_level",
    "squared_norm",
    "steffensen",
]
