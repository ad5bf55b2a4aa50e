from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from healthuse.cli.main import app


def test_cli_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "healthuse" in result.stdout


def test_cli_analyze_prints_tables(tmp_path: Path, sample_observations: pd.DataFrame) -> None:
    runner = CliRunner()
    data_path = tmp_path / "survey.csv"
    sample_observations.to_csv(data_path, index=False)

    result = runner.invoke(app, ["analyze", "--data", str(data_path), "--no-plots"])
    assert result.exit_code == 0, result.stdout

    assert "Analysis complete" in result.stdout
    assert "Dr. visits by condition" in result.stdout
    assert "Kidney Disease" in result.stdout
    assert "Pairwise comparisons" in result.stdout
    assert "depression:chronic" in result.stdout

    # Nothing besides the input is written
    assert [p.name for p in tmp_path.iterdir()] == ["survey.csv"]


def test_cli_analyze_missing_column(tmp_path: Path, sample_observations: pd.DataFrame) -> None:
    runner = CliRunner()
    data_path = tmp_path / "survey.csv"
    sample_observations.drop(columns=["asthma"]).to_csv(data_path, index=False)

    result = runner.invoke(app, ["analyze", "--data", str(data_path), "--no-plots"])
    assert result.exit_code == 1
    assert "Analysis failed" in result.output
    assert "asthma" in result.output


@pytest.mark.parametrize("conf_level", ["0", "1.5"])
def test_cli_analyze_rejects_conf_level(tmp_path: Path, sample_observations: pd.DataFrame, conf_level: str) -> None:
    runner = CliRunner()
    data_path = tmp_path / "survey.csv"
    sample_observations.to_csv(data_path, index=False)

    result = runner.invoke(app, ["analyze", "--data", str(data_path), "--conf-level", conf_level])
    assert result.exit_code == 1
    assert "conf_level" in result.output
