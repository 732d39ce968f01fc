"""Pytest configuration and shared fixtures for evalopt tests.

This module provides:
- Deterministic RNG fixtures for numpy
- A fixture routing evalopt diagnostics into pytest's ``caplog``
"""

import logging
import os
from typing import Callable, Generator

import numpy as np
import pytest

from evalopt.logging import get_logger


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set the global numpy seed for reproducibility."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))


@pytest.fixture
def capture_diagnostics(
    caplog: pytest.LogCaptureFixture,
) -> Generator[Callable[[str], pytest.LogCaptureFixture], None, None]:
    """Attach ``caplog`` to an evalopt logger at INFO level.

    evalopt loggers do not propagate to the root logger, so ``caplog`` has
    to be attached explicitly. Usage::

        logs = capture_diagnostics("evalopt.adam")
        ...
        assert len(logs.records) == 3
    """
    attached: list[logging.Logger] = []

    def attach(name: str) -> pytest.LogCaptureFixture:
        logger = get_logger(name)
        attached.append(logger)
        logger.addHandler(caplog.handler)
        # Sets both the logger and the shared capture handler; caplog
        # restores the two levels at teardown.
        caplog.set_level(logging.INFO, logger=logger.name)
        return caplog

    yield attach

    for logger in attached:
        logger.removeHandler(caplog.handler)
