import json

import pandas as pd
from click.testing import CliRunner

from tsdecomp.core.cli import cli


def _write_csv(path, df):
    df.to_csv(path, index=False)


def test_decompose_bundled_dataset(tmp_path):
    out_dir = tmp_path / "out"
    runner = CliRunner()
    result = runner.invoke(
        cli, ["decompose", "--dataset", "airpassengers", "--output-dir", str(out_dir)]
    )
    assert result.exit_code == 0, result.output
    assert "Components saved" in result.output

    components = pd.read_csv(out_dir / "passengers_components.csv", parse_dates=["date"])
    assert list(components.columns) == [
        "date",
        "observed",
        "trend",
        "seasonal",
        "residual",
        "reconstructed",
    ]
    assert len(components) == 144
    assert components["trend"].isna().sum() == 12

    ts_long = pd.read_csv(out_dir / "timeseries_long.csv")
    assert set(ts_long.columns) == {"date", "var", "stat", "value", "series_id", "freq"}
    assert set(ts_long["stat"]) == {"raw", "trend", "seasonal", "anomaly"}
    assert ts_long["freq"].unique().tolist() == ["monthly"]


def test_decompose_csv_input(tmp_path, monthly_frame):
    csv_path = tmp_path / "sales.csv"
    _write_csv(csv_path, monthly_frame)
    out_dir = tmp_path / "out"

    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "decompose",
            str(csv_path),
            "--value-col",
            "sales",
            "--date-col",
            "month",
            "--no-long",
            "-o",
            str(out_dir),
        ],
    )
    assert result.exit_code == 0, result.output
    assert (out_dir / "sales_components.csv").exists()
    assert not (out_dir / "timeseries_long.csv").exists()


def test_decompose_reads_columns_from_config(tmp_path, monthly_frame):
    csv_path = tmp_path / "sales.csv"
    _write_csv(csv_path, monthly_frame)
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps({"value_col": "sales", "date_col": "month"}))

    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["--config", str(cfg_path), "decompose", str(csv_path), "-o", str(tmp_path / "o")],
    )
    assert result.exit_code == 0, result.output
    assert (tmp_path / "o" / "sales_components.csv").exists()


def test_invalid_config_is_rejected(tmp_path):
    cfg_path = tmp_path / "cfg.json"
    cfg_path.write_text(json.dumps({"period": 0}))

    result = CliRunner().invoke(cli, ["--config", str(cfg_path), "decompose"])
    assert result.exit_code == 2


def test_decompose_short_series_fails(tmp_path):
    csv_path = tmp_path / "short.csv"
    _write_csv(
        csv_path,
        pd.DataFrame(
            {
                "date": pd.date_range("2024-01-01", periods=12, freq="MS"),
                "value": [10.0] * 12,
            }
        ),
    )
    result = CliRunner().invoke(
        cli, ["decompose", str(csv_path), "-o", str(tmp_path / "out")]
    )
    assert result.exit_code == 1
    assert "Decomposition failed" in result.output


def test_input_and_dataset_are_exclusive(tmp_path, monthly_frame):
    csv_path = tmp_path / "sales.csv"
    _write_csv(csv_path, monthly_frame)
    result = CliRunner().invoke(
        cli, ["decompose", str(csv_path), "--dataset", "airpassengers"]
    )
    assert result.exit_code == 2


def test_missing_value_column(tmp_path, monthly_frame):
    csv_path = tmp_path / "sales.csv"
    _write_csv(csv_path, monthly_frame)
    result = CliRunner().invoke(
        cli, ["decompose", str(csv_path), "--value-col", "revenue", "--date-col", "month"]
    )
    assert result.exit_code == 2


def test_compare_matches_statsmodels():
    result = CliRunner().invoke(cli, ["compare", "--dataset", "airpassengers"])
    assert result.exit_code == 0, result.output
    assert "matches statsmodels" in result.output
    assert "trend" in result.output


def test_compare_reports_mismatch():
    result = CliRunner().invoke(
        cli, ["compare", "--dataset", "airpassengers", "--tol=-1"]
    )
    assert result.exit_code == 1
    assert "differ" in result.output


def test_summary_writes_csv(tmp_path):
    out = tmp_path / "summary.csv"
    result = CliRunner().invoke(
        cli, ["summary", "--dataset", "airpassengers", "--output", str(out)]
    )
    assert result.exit_code == 0, result.output
    summary = pd.read_csv(out)
    assert len(summary) == 1
    assert summary["Peak Month"].iloc[0] == "Jul"


def test_export_dataset(tmp_path):
    out = tmp_path / "ap.csv"
    result = CliRunner().invoke(cli, ["export-dataset", "airpassengers", "-o", str(out)])
    assert result.exit_code == 0, result.output
    df = pd.read_csv(out)
    assert list(df.columns) == ["date", "passengers"]
    assert len(df) == 144
