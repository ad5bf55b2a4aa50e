"""Chart construction (histograms, violins, box plots, bar charts).

Charts are returned as in-memory matplotlib figures; nothing is written to disk.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
import numpy as np
import pandas as pd
import seaborn as sns

from healthuse.data.schema import VISITS
from healthuse.stats.config import AnalysisConfig

logger = logging.getLogger(__name__)

# Suppress seaborn/pandas FutureWarnings
warnings.filterwarnings("ignore", category=FutureWarning, module="seaborn")
warnings.filterwarnings("ignore", category=FutureWarning, module="pandas")

CHART_KINDS = ("histogram", "violin", "box", "bar")


@dataclass(frozen=True)
class Aes:
    """Aesthetic mapping: which columns drive the x axis, y axis and fill."""

    x: str
    y: Optional[str] = None
    fill: Optional[str] = None


def build_chart(
    data: pd.DataFrame,
    kind: str,
    aes: Aes,
    order: Optional[Sequence[str]] = None,
    means: Optional[pd.DataFrame] = None,
    title: Optional[str] = None,
    xlabel: Optional[str] = None,
    ylabel: Optional[str] = None,
    palette: str = "Greens_r",
    binwidth: float = 5.0,
    dpi: int = 100,
) -> Figure:
    """Build one chart from a table and an aesthetic mapping.

    Args:
        data: Filtered table or summary table
        kind: One of ``CHART_KINDS``
        aes: Column mapping; histograms use ``x`` as the value axis, the
            other kinds use ``x`` as the category axis and ``y`` as the value
        order: Level order for the fill/category column
        means: Optional group means (``fill`` and ``x`` columns) drawn as
            dashed vertical lines on histograms
        title: Chart title
        xlabel: X axis label (default: column name)
        ylabel: Y axis label (default: column name or "Density")
        palette: Seaborn palette name
        binwidth: Histogram bin width
        dpi: Figure DPI

    Returns:
        matplotlib Figure
    """
    if kind not in CHART_KINDS:
        raise ValueError(f"kind must be one of {CHART_KINDS}, got {kind!r}")
    if kind != "histogram" and aes.y is None:
        raise ValueError(f"{kind} charts need a y column")

    fig = Figure(figsize=(6, 4.5), dpi=dpi)
    FigureCanvasAgg(fig)
    ax = fig.subplots()

    plot_data = data.copy()
    value_col = aes.x if kind == "histogram" else aes.y
    if not plot_data.empty:
        plot_data[value_col] = plot_data[value_col].astype(float)
    for col in {aes.x, aes.fill} - {None, value_col}:
        plot_data[col] = plot_data[col].astype(str)

    hue_order = list(order) if order is not None else None

    if plot_data.empty:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
    elif kind == "histogram":
        _histogram(ax, plot_data, aes, hue_order, means, palette, binwidth)
    elif kind == "violin":
        sns.violinplot(
            data=plot_data, x=aes.x, y=aes.y, hue=aes.fill or aes.x, order=hue_order,
            hue_order=hue_order, inner="quart", palette=palette, legend=False, ax=ax,
        )
        _mean_points(ax, plot_data, aes, hue_order)
    elif kind == "box":
        sns.boxplot(
            data=plot_data, x=aes.x, y=aes.y, hue=aes.fill or aes.x, order=hue_order,
            hue_order=hue_order, palette=palette, legend=False, ax=ax,
        )
        _mean_points(ax, plot_data, aes, hue_order)
    else:
        sns.barplot(
            data=plot_data, x=aes.x, y=aes.y, hue=aes.fill or aes.x, order=hue_order,
            hue_order=hue_order, palette=palette, legend=False, errorbar=None, ax=ax,
        )
        _bar_labels(ax, plot_data, aes, hue_order)

    if title:
        ax.set_title(title)
    ax.set_xlabel(xlabel if xlabel is not None else aes.x)
    if kind == "histogram":
        ax.set_ylabel(ylabel if ylabel is not None else "Density")
    else:
        ax.set_ylabel(ylabel if ylabel is not None else aes.y)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()

    return fig


def _histogram(ax, data, aes, hue_order, means, palette, binwidth):
    values = data[aes.x].to_numpy(dtype=float)
    lo = np.floor(values.min() / binwidth) * binwidth
    bins = np.arange(lo, values.max() + binwidth, binwidth)
    if len(bins) < 2:
        bins = np.array([lo, lo + binwidth])

    sns.histplot(
        data=data, x=aes.x, hue=aes.fill, hue_order=hue_order, bins=bins,
        stat="density", common_norm=False, element="bars", alpha=0.6,
        palette=palette, ax=ax,
    )

    if means is None or means.empty:
        return
    colors = dict(zip(hue_order or [], sns.color_palette(palette, n_colors=len(hue_order or []))))
    for _, row in means.iterrows():
        level = str(row[aes.fill]) if aes.fill else None
        ax.axvline(row[aes.x], linestyle="--", linewidth=1, color=colors.get(level, "black"))


def _mean_points(ax, data, aes, order):
    means = data.groupby(aes.x, observed=True)[aes.y].mean()
    levels = order if order is not None else list(means.index)
    xs = [i for i, level in enumerate(levels) if level in means.index]
    ys = [means[level] for level in levels if level in means.index]
    ax.scatter(xs, ys, color="black", s=12, zorder=3)


def _bar_labels(ax, data, aes, order):
    levels = order if order is not None else list(data[aes.x])
    heights = data.set_index(aes.x)[aes.y]
    for i, level in enumerate(levels):
        if level in heights.index and np.isfinite(heights[level]):
            value = heights[level]
            label = f"{value:.2f}" if not float(value).is_integer() else f"{int(value)}"
            ax.text(i, value / 2, label, ha="center", va="center", fontsize=9)


def build_analysis_plots(
    tables: Dict[str, pd.DataFrame],
    heavy_tables: Dict[str, pd.DataFrame],
    means: Dict[str, pd.DataFrame],
    heavy_means: Dict[str, pd.DataFrame],
    frequencies: Dict[str, pd.DataFrame],
    condition_stats: pd.DataFrame,
    axes: Dict[str, str],
    levels: Dict[str, List[str]],
    config: AnalysisConfig,
) -> Dict[str, Figure]:
    """Build the full set of charts for the analysis.

    Args:
        tables: Axis name (depression/chronic/interaction) -> filtered table
        heavy_tables: Same, restricted to heavy utilizers
        means: Axis name -> group means table
        heavy_means: Same, for heavy utilizers
        frequencies: Axis name -> frequency/proportion table
        condition_stats: Ranked per-condition summary
        axes: Axis name -> grouping column
        levels: Axis name -> level order
        config: AnalysisConfig

    Returns:
        Dictionary of chart name -> Figure, e.g. ``depressionHist1``
    """
    outcome = VISITS
    plots: Dict[str, Figure] = {}

    for name, group_col in axes.items():
        order = levels[name]
        display = name.capitalize()
        plots[f"{name}FreqBar"] = build_chart(
            frequencies[name], "bar", Aes(x=group_col, y="Count"), order=order,
            title=f"{display}: Respondents", ylabel="Count", dpi=config.fig_dpi,
        )
        plots[f"{name}PropBar"] = build_chart(
            frequencies[name], "bar", Aes(x=group_col, y="Proportion"), order=order,
            title=f"{display}: Share of Respondents", ylabel="Proportion", dpi=config.fig_dpi,
        )
        for suffix, table, table_means, title in (
            ("Hist1", tables[name], means[name], "Dr. Visits during Previous 12 Months"),
            ("Hist2", heavy_tables[name], heavy_means[name],
             f"Dr. Visits during Previous 12 Months (more than {config.heavy_use_threshold:g})"),
        ):
            plots[f"{name}{suffix}"] = build_chart(
                table, "histogram", Aes(x=outcome, fill=group_col), order=order,
                means=table_means, title=title, xlabel="Dr. Visits", palette="Accent",
                binwidth=config.hist_binwidth, dpi=config.fig_dpi,
            )
        plots[f"{name}Violin"] = build_chart(
            tables[name], "violin", Aes(x=group_col, y=outcome), order=order,
            title="Dr. Visits", ylabel="Dr. Visits", dpi=config.fig_dpi,
        )
        plots[f"{name}Box"] = build_chart(
            tables[name], "box", Aes(x=group_col, y=outcome), order=order,
            title="Dr. Visits", ylabel="Dr. Visits", dpi=config.fig_dpi,
        )

    ranked = condition_stats.dropna(subset=["Mean"])
    plots["allChronic"] = build_chart(
        ranked, "bar", Aes(x="Condition", y="Mean"),
        order=list(ranked["Condition"]), title="Mean Dr. Visits by Condition",
        ylabel="Dr. Visits", palette="PRGn", dpi=config.fig_dpi,
    )
    plots["allChronic"].axes[0].tick_params(axis="x", labelrotation=45)

    logger.info(f"Built {len(plots)} charts")
    return plots
