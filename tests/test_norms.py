import numpy as np
import pytest

from evalopt import norm, squared_norm


def test_squared_norm_and_norm_of_real_vector():
    v = np.array([3.0, -4.0])
    assert squared_norm(v) == 25.0
    assert norm(v) == 5.0


def test_norm_of_complex_vector_is_real():
    v = np.array([3j, 4.0 + 0j])
    assert norm(v) == pytest.approx(5.0)
    assert np.isrealobj(norm(v))


def test_norm_accepts_sequences_and_float32():
    assert norm([1, 2, 2]) == 3.0
    v = np.array([1.0, 2.0, 2.0], dtype=np.float32)
    assert norm(v) == pytest.approx(3.0)
    assert norm(v).dtype == np.float32


def test_norm_of_empty_vector_is_zero():
    assert norm(np.array([])) == 0.0
