"""Main CLI entrypoint using Typer."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import typer

from healthuse import __version__

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="healthuse",
    help="Depression, chronic illness and doctor visit analysis.",
    add_completion=False,
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"healthuse {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """healthuse: doctor visit analysis for depression and chronic illness."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _echo_table(title: str, df: pd.DataFrame) -> None:
    typer.secho(f"\n{title}", bold=True)
    if df.empty:
        typer.echo("  (no rows)")
    else:
        typer.echo(df.to_string(index=False))


@app.command()
def analyze(
    data: Path = typer.Option(
        ...,
        "--data",
        help="Path to observation table (.csv, .parquet) or directory (parquet dataset).",
    ),
    heavy_threshold: float = typer.Option(
        4, "--heavy-threshold", help="Visits above this value count as heavy utilization"
    ),
    conf_level: float = typer.Option(0.95, "--conf-level", help="Confidence level for intervals"),
    plots: bool = typer.Option(True, "--plots/--no-plots", help="Build chart handles (in memory only)"),
):
    """
    Run the full analysis and print the summary tables and tests.

    Nothing is written to disk.

    Examples:
        healthuse analyze --data brfss_rq4.parquet

        healthuse analyze --data brfss_rq4.csv --heavy-threshold 10 --conf-level 0.99
    """
    from healthuse.data import load_table
    from healthuse.stats import AnalysisConfig, analyze as run_analysis

    try:
        config = AnalysisConfig(
            heavy_use_threshold=heavy_threshold,
            conf_level=conf_level,
            make_plots=plots,
        )
        df = load_table(data)
        bundle = run_analysis(df, config)
    except Exception as e:
        typer.secho(f"\n✗ Analysis failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    frames = bundle["dataFrames"]
    typer.secho("\n✓ Analysis complete!", fg=typer.colors.GREEN)
    for name, frame in frames.items():
        typer.echo(f"  {name}: {len(frame)} rows")

    stats = bundle["stats"]
    _echo_table("Dr. visits by depression", stats["depression"])
    _echo_table("Dr. visits by chronic illness", stats["chronic"])
    _echo_table("Dr. visits by depression / chronic illness", stats["interaction"])
    _echo_table("Dr. visits by condition (ranked by mean)", stats["allChronic"])

    tests = bundle["tests"]
    typer.secho("\nTests", bold=True)
    for key in ("depressionTest", "depressionEffect", "chronicTest", "chronicEffect", "interactionTest"):
        result = tests[key]
        typer.echo(
            f"  {key}: {result.method}, statistic={result.statistic:.4g}, p={result.p_value:.4g}"
        )
    _echo_table("Pairwise comparisons", tests["pairwise"])

    model = tests["interactionModel"]
    _echo_table(f"ANOVA: {model.formula}", model.anova.reset_index(names="term"))
    _echo_table("Coefficients", model.coefficients.reset_index(names="term"))

    if plots:
        typer.echo(f"\n  Charts built: {len(bundle['plots'])}")


if __name__ == "__main__":
    app()
