"""
tsdecomp CLI entrypoint — decompose a series from CSV or a bundled dataset,
cross-check against statsmodels, and summarise the components.
"""

import dataclasses
import os
import re
import sys

import pandas as pd
import click  # type: ignore
from click import echo

from tsdecomp.analytics.comparison import compare_with_statsmodels
from tsdecomp.analytics.decomposition import DecompositionError
from tsdecomp.analytics.stats import summarize
from tsdecomp.analytics.timeseries import TimeSeries, decomp_to_long, freq_label
from tsdecomp.core.config import ConfigManager, ConfigValidationError
from tsdecomp.core.logger import Logger
from tsdecomp.datasets import DATASET_REGISTRY, load_dataset

logger = Logger.get_logger(__name__)


def _safe_name(identifier: str) -> str:
    """Filesystem-safe version of ``identifier``."""
    sanitized = re.sub(r"[^A-Za-z0-9_]", "_", os.path.basename(identifier))
    return sanitized or "series"


def _series_options(func):
    """Input options shared by every command that reads a series."""
    options = [
        click.argument("input_csv", required=False, type=click.Path(exists=True)),
        click.option(
            "--dataset",
            "-d",
            type=click.Choice(list(DATASET_REGISTRY.keys())),
            default=None,
            help="Bundled dataset to use instead of INPUT_CSV",
        ),
        click.option(
            "--value-col", "-c", default=None, help="Value column in INPUT_CSV"
        ),
        click.option("--date-col", default=None, help="Date column in INPUT_CSV"),
        click.option(
            "--period",
            "-p",
            type=click.IntRange(min=1),
            default=None,
            help="Seasonal period (e.g. 12 for monthly)",
        ),
        click.option(
            "--offset",
            type=int,
            default=None,
            help="Cycle position of the first observation",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_series(cfg, input_csv, dataset, value_col, date_col, period, offset):
    """Resolve the command inputs (falling back to config) into a TimeSeries."""
    if input_csv and dataset:
        raise click.UsageError("Give either INPUT_CSV or --dataset, not both")
    period = period or cfg.period

    if input_csv:
        logger.info("Loading %s", input_csv)
        df = pd.read_csv(input_csv)
        try:
            return TimeSeries.from_dataframe(
                df,
                value_col=value_col or cfg.get("value_col"),
                date_col=date_col or cfg.get("date_col"),
                period=period,
                offset=offset,
            )
        except KeyError as e:
            raise click.BadParameter(str(e), param_hint="--value-col/--date-col")

    name = dataset or cfg.get("dataset")
    logger.info("Loading bundled dataset %s", name)
    try:
        ts = load_dataset(name)
    except KeyError as e:
        raise click.BadParameter(str(e), param_hint="--dataset")
    if period != ts.period or offset is not None:
        new_offset = ts.offset if offset is None else offset
        ts = dataclasses.replace(ts, period=period, offset=new_offset)
    return ts


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="YAML, TOML or JSON file overriding the defaults",
)
@click.pass_context
def cli(ctx, config_path):
    """tsdecomp: classical multiplicative time-series decomposition."""
    Logger.setup()
    try:
        ctx.obj = ConfigManager(config_path)
    except ConfigValidationError as e:
        raise click.BadParameter(str(e), param_hint="--config")


@cli.command()
@_series_options
@click.option(
    "--normalize/--no-normalize",
    default=None,
    help="Rescale seasonal factors to mean 1 (default from config: on)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(),
    default="decomposition",
    help="Directory to save outputs",
)
@click.option(
    "--long/--no-long",
    "write_long",
    default=True,
    help="Also write the components in long format (timeseries_long.csv)",
)
@click.pass_obj
def decompose(
    cfg,
    input_csv,
    dataset,
    value_col,
    date_col,
    period,
    offset,
    normalize,
    output_dir,
    write_long,
):
    """
    Decompose a series into trend, seasonal and residual components.
    """
    ts = _load_series(cfg, input_csv, dataset, value_col, date_col, period, offset)
    if normalize is None:
        normalize = cfg.normalize_seasonal
    logger.info(
        "Decomposing %s (%d observations, period %d)", ts.name, len(ts), ts.period
    )
    try:
        result = ts.decompose(normalize=normalize)
    except DecompositionError as e:
        echo(f"❌  Decomposition failed: {e}", err=True)
        sys.exit(1)

    os.makedirs(output_dir, exist_ok=True)
    name = _safe_name(ts.name)
    components_path = os.path.join(output_dir, f"{name}_components.csv")
    result.to_csv(components_path)
    logger.info("Components saved to %s", components_path)

    if write_long:
        long_path = os.path.join(output_dir, "timeseries_long.csv")
        long_df = decomp_to_long(
            result, series_id=name, var=ts.name, freq=freq_label(ts.freq)
        )
        long_df.to_csv(long_path, index=False)
        logger.info("TimeseriesLong saved to %s", long_path)

    echo(f"✅  Components saved to {components_path}")
    echo(f"Reconstruction error: {result.reconstruction_error():.3e}")


@cli.command()
@_series_options
@click.option(
    "--tol",
    type=float,
    default=1e-8,
    show_default=True,
    help="Largest acceptable absolute difference per component",
)
@click.pass_obj
def compare(cfg, input_csv, dataset, value_col, date_col, period, offset, tol):
    """Compare the manual decomposition with statsmodels' seasonal_decompose."""
    ts = _load_series(cfg, input_csv, dataset, value_col, date_col, period, offset)
    try:
        comparison = compare_with_statsmodels(ts)
    except (DecompositionError, ValueError) as e:
        echo(f"❌  Comparison failed: {e}", err=True)
        sys.exit(1)

    for component, diff in comparison.differences.items():
        echo(f"{component:<10} max |Δ| = {diff:.3e}")
    if not comparison.matches(tol):
        echo(f"❌  Decompositions differ by more than {tol:g}", err=True)
        sys.exit(1)
    echo(f"✅  Manual decomposition matches statsmodels within {tol:g}")


@cli.command()
@_series_options
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="stats_summary.csv",
    help="Output path for the summary CSV",
)
@click.pass_obj
def summary(cfg, input_csv, dataset, value_col, date_col, period, offset, output):
    """Compute summary statistics of the decomposition."""
    ts = _load_series(cfg, input_csv, dataset, value_col, date_col, period, offset)
    try:
        result = ts.decompose(normalize=cfg.normalize_seasonal)
    except DecompositionError as e:
        echo(f"❌  Decomposition failed: {e}", err=True)
        sys.exit(1)

    stats = summarize(result, series_id=_safe_name(ts.name))
    logger.info("Writing summary stats to %s", output)
    stats.to_csv(output)
    echo(f"✅  Stats summary saved to {output}")


@cli.command(name="export-dataset")
@click.argument("name", type=click.Choice(list(DATASET_REGISTRY.keys())))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Output CSV path (defaults to NAME.csv)",
)
def export_dataset(name, output):
    """Write a bundled dataset to CSV."""
    ts = load_dataset(name)
    out_path = output or f"{name}.csv"
    ts.to_csv(out_path)
    echo(f"✅  {name} saved to {out_path}")


if __name__ == "__main__":
    cli()
