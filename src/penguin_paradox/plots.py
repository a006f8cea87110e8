from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from penguin_paradox.config import MEASUREMENT_LABELS, FigureText
from penguin_paradox.logging_utils import get_logger
from penguin_paradox.renderers import NEUTRAL_COLOR, PanelRenderer
from penguin_paradox.trends import ParadoxSummary, TrendLine

logger = get_logger(__name__)


def _line_points(values: pd.Series, n_points: int = 50) -> np.ndarray:
    return np.linspace(float(values.min()), float(values.max()), n_points)


def _label_axes(ax: Axes, x: str, y: str, title: str) -> None:
    ax.set_xlabel(MEASUREMENT_LABELS.get(x, x))
    ax.set_ylabel(MEASUREMENT_LABELS.get(y, y))
    ax.set_title(title)


@dataclass(frozen=True, slots=True)
class PooledTrendPanel:
    """Scatter of every row with one line fitted to the pooled data."""

    frame: pd.DataFrame
    x: str
    y: str
    trend: TrendLine
    title: str = "Ignoring species"

    def draw(self, ax: Axes, renderer: PanelRenderer) -> None:
        renderer.scatter(ax, self.frame, self.x, self.y)
        xs = _line_points(self.frame[self.x])
        renderer.line(
            ax,
            xs,
            self.trend.predict(xs),
            color="#c0392b",
            label=f"Overall fit (slope {self.trend.slope:+.2f})",
        )
        _label_axes(ax, self.x, self.y, self.title)
        ax.legend(loc="lower left", fontsize=8)
        renderer.finish(ax)


@dataclass(frozen=True, slots=True)
class GroupedTrendPanel:
    """Scatter coloured by group with the pooled line and one line per group."""

    frame: pd.DataFrame
    x: str
    y: str
    group: str
    summary: ParadoxSummary
    title: str = "Accounting for species"

    def draw(self, ax: Axes, renderer: PanelRenderer) -> None:
        palette = renderer.palette(sorted(self.frame[self.group].astype(str).unique()))
        renderer.scatter(ax, self.frame, self.x, self.y, hue=self.group, palette=palette)

        xs = _line_points(self.frame[self.x])
        renderer.line(
            ax,
            xs,
            self.summary.pooled.predict(xs),
            color=NEUTRAL_COLOR,
            label=f"Overall fit (slope {self.summary.pooled.slope:+.2f})",
            linestyle="--",
        )
        for name, trend in self.summary.groups.items():
            part = self.frame.loc[self.frame[self.group] == name, self.x]
            group_xs = _line_points(part)
            renderer.line(
                ax,
                group_xs,
                trend.predict(group_xs),
                color=palette[name],
                label=f"{name} fit (slope {trend.slope:+.2f})",
            )
        _label_axes(ax, self.x, self.y, self.title)
        ax.legend(loc="lower left", fontsize=8, ncol=2)
        renderer.finish(ax)


TrendPanel = PooledTrendPanel | GroupedTrendPanel


def build_panel_figure(panel: TrendPanel, renderer: PanelRenderer) -> Figure:
    with renderer.style_context():
        fig, ax = plt.subplots(figsize=(7, 5.5))
        panel.draw(ax, renderer)
    fig.tight_layout()
    return fig


def build_comparison_figure(
    left: TrendPanel,
    right: TrendPanel,
    renderer: PanelRenderer,
    text: FigureText,
) -> Figure:
    """
    Place two panels left-to-right under a shared annotation band.

    The title is the figure suptitle; subtitle and caption are figure texts
    tagged with the gids "subtitle" and "caption".
    """
    with renderer.style_context():
        fig, axes = plt.subplots(1, 2, figsize=(14, 6.2), sharey=True)
        left.draw(axes[0], renderer)
        right.draw(axes[1], renderer)

    fig.suptitle(text.title, fontsize=16, fontweight="bold", y=0.985)
    fig.text(0.5, 0.925, text.subtitle, ha="center", va="center", fontsize=11, gid="subtitle")
    fig.text(0.99, 0.012, text.caption, ha="right", va="bottom", fontsize=8, style="italic", gid="caption")
    fig.tight_layout(rect=(0.0, 0.04, 1.0, 0.9))
    return fig


def save_figure(fig: Figure, path: Path, dpi: int = 120) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    logger.info(f"[PLOT] Saved {path.name} to {path}")
    return str(path)
