import pandas as pd
import pytest

from tsdecomp.datasets import load_airpassengers, load_dataset


def test_airpassengers_shape():
    ts = load_airpassengers()
    assert len(ts) == 144
    assert ts.period == 12
    assert ts.offset == 0
    assert ts.name == "passengers"
    assert ts.values.iloc[0] == 112
    assert ts.values.iloc[-1] == 432
    assert ts.dates()[-1] == pd.Timestamp("1960-12-01")


def test_load_dataset_by_name_is_case_insensitive():
    assert len(load_dataset("AirPassengers")) == 144


def test_load_unknown_dataset():
    with pytest.raises(KeyError):
        load_dataset("sunspots")
