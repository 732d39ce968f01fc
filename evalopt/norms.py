"""Euclidean norms used as convergence metrics."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def squared_norm(v: ArrayLike) -> float:
    """Return ``sum |v_i|**2``.

    Works for real and complex inputs; the result is always real.
    """
    v = np.asarray(v)
    return np.sum(np.abs(v) ** 2)


def norm(v: ArrayLike) -> float:
    """Return the Euclidean norm ``sqrt(squared_norm(v))``."""
    return np.sqrt(squared_norm(v))


__all__ = ["norm", "squared_norm"]
