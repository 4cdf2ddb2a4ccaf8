import numpy as np
import pytest

from tsdecomp.analytics.comparison import compare_with_statsmodels
from tsdecomp.analytics.decomposition import EmptyGroupError


def test_airpassengers_matches_statsmodels(airpassengers):
    comparison = compare_with_statsmodels(airpassengers)

    assert set(comparison.differences) == {"trend", "seasonal", "residual"}
    assert comparison.matches(1e-8)
    assert comparison.manual.normalized


def test_plain_sequence_needs_period(noisy_series):
    with pytest.raises(ValueError):
        compare_with_statsmodels(noisy_series)


def test_plain_sequence_matches(noisy_series):
    comparison = compare_with_statsmodels(noisy_series, 12)
    assert comparison.matches(1e-8)
    df = comparison.to_dataframe()
    assert list(df.columns) == ["component", "max_abs_diff"]
    assert len(df) == 3


def test_negative_tolerance_never_matches(noisy_series):
    assert not compare_with_statsmodels(noisy_series, 12).matches(-1.0)


def test_short_series_fails_before_statsmodels():
    with pytest.raises(EmptyGroupError):
        compare_with_statsmodels(np.linspace(10.0, 20.0, 20), 12)
