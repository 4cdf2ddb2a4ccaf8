"""Bundled example datasets."""

from pathlib import Path

import pandas as pd

from tsdecomp.analytics.timeseries import TimeSeries
from tsdecomp.core.logger import Logger

log = Logger.get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


def load_airpassengers() -> TimeSeries:
    """Monthly international airline passengers (thousands), Jan 1949 – Dec 1960.

    Classic Box & Jenkins series: 144 observations, period 12, growing
    seasonal swings that suit a multiplicative model.
    """
    path = DATA_DIR / "airpassengers.csv"
    log.debug("Loading airpassengers from %s", path)
    df = pd.read_csv(path, parse_dates=["date"])
    return TimeSeries.from_dataframe(df, value_col="passengers", date_col="date", period=12)


DATASET_REGISTRY = {
    "airpassengers": load_airpassengers,
}


def load_dataset(name: str) -> TimeSeries:
    """Load a bundled dataset by name."""
    try:
        loader = DATASET_REGISTRY[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown dataset '{name}'; available: {', '.join(DATASET_REGISTRY)}"
        ) from None
    return loader()


__all__ = ["DATASET_REGISTRY", "load_airpassengers", "load_dataset"]
