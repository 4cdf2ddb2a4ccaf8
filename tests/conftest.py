# pylint: disable=missing-module-docstring,missing-function-docstring,redefined-outer-name
import numpy as np
import pandas as pd
import pytest

from tsdecomp.core.logger import Logger
from tsdecomp.datasets import load_airpassengers

PERIOD = 12


@pytest.fixture(autouse=True)
def _detach_cli_logging():
    """CLI invocations attach a stderr handler; drop it after each test."""
    yield
    Logger.reset()


@pytest.fixture
def seasonal_pattern():
    """Twelve multiplicative factors with mean exactly 1."""
    k = np.arange(PERIOD)
    return 1.0 + 0.2 * np.sin(2 * np.pi * k / PERIOD)


@pytest.fixture
def flat_seasonal_series(seasonal_pattern):
    """Five years of a constant level of 100 times the seasonal pattern."""
    return 100.0 * np.tile(seasonal_pattern, 5)


@pytest.fixture
def linear_seasonal_series(seasonal_pattern):
    """Six years of a slowly rising trend times the seasonal pattern."""
    n = 6 * PERIOD
    trend = 100.0 + 0.5 * np.arange(n)
    return trend, np.tile(seasonal_pattern, 6), trend * np.tile(seasonal_pattern, 6)


@pytest.fixture
def sawtooth_series():
    """12 repeats of 1..12 scaled by the linear trend 10 + 0.5*i."""
    n = 12 * PERIOD
    i = np.arange(n)
    return np.tile(np.arange(1, 13, dtype=float), 12) * (10 + 0.5 * i)


@pytest.fixture
def noisy_series():
    rng = np.random.default_rng(0)
    n = 4 * PERIOD
    i = np.arange(n)
    season = np.tile(1.0 + 0.3 * np.cos(2 * np.pi * np.arange(PERIOD) / PERIOD), 4)
    return (50.0 + 2.0 * i) * season * rng.uniform(0.9, 1.1, n)


@pytest.fixture
def monthly_frame():
    """Three years of monthly data starting in March, rows out of order."""
    dates = pd.date_range("2020-03-01", periods=36, freq="MS")
    values = np.linspace(10.0, 45.0, 36) * np.tile([1.1, 0.9, 1.0], 12)
    df = pd.DataFrame({"month": dates, "sales": values})
    return df.sample(frac=1.0, random_state=1).reset_index(drop=True)


@pytest.fixture
def airpassengers():
    return load_airpassengers()
