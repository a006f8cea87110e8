from __future__ import annotations

from contextlib import nullcontext
from typing import Any, ContextManager, Sequence

import matplotlib
import numpy as np
import pandas as pd
from matplotlib.axes import Axes

from penguin_paradox.logging_utils import get_logger

logger = get_logger(__name__)

RENDERER_CHOICES = ("auto", "seaborn", "matplotlib")
NEUTRAL_COLOR = "#4d4d4d"


class PanelRenderer:
    """Drawing primitives shared by the standalone plots and the comparison figure."""

    name = "base"

    def style_context(self) -> ContextManager[Any]:
        return nullcontext()

    def palette(self, groups: Sequence[str]) -> dict[str, Any]:
        raise NotImplementedError

    def scatter(
        self,
        ax: Axes,
        frame: pd.DataFrame,
        x: str,
        y: str,
        hue: str | None = None,
        palette: dict[str, Any] | None = None,
    ) -> None:
        raise NotImplementedError

    def line(
        self,
        ax: Axes,
        xs: np.ndarray,
        ys: np.ndarray,
        *,
        color: Any,
        label: str,
        linestyle: str = "-",
    ) -> None:
        raise NotImplementedError

    def finish(self, ax: Axes) -> None:
        ax.grid(True, alpha=0.3)


class MatplotlibRenderer(PanelRenderer):
    name = "matplotlib"

    def palette(self, groups: Sequence[str]) -> dict[str, Any]:
        cmap = matplotlib.colormaps["tab10"]
        return {group: cmap(index % cmap.N) for index, group in enumerate(groups)}

    def scatter(
        self,
        ax: Axes,
        frame: pd.DataFrame,
        x: str,
        y: str,
        hue: str | None = None,
        palette: dict[str, Any] | None = None,
    ) -> None:
        if hue is None:
            ax.scatter(frame[x], frame[y], s=18, alpha=0.7, color=NEUTRAL_COLOR, edgecolors="none")
            return
        colors = palette or self.palette(sorted(frame[hue].unique()))
        for name, part in frame.groupby(hue, sort=True):
            ax.scatter(
                part[x],
                part[y],
                s=18,
                alpha=0.7,
                color=colors[str(name)],
                edgecolors="none",
                label=str(name),
            )

    def line(
        self,
        ax: Axes,
        xs: np.ndarray,
        ys: np.ndarray,
        *,
        color: Any,
        label: str,
        linestyle: str = "-",
    ) -> None:
        ax.plot(xs, ys, color=color, linewidth=2.0, linestyle=linestyle, label=label)


class SeabornRenderer(PanelRenderer):
    name = "seaborn"

    def __init__(self, sns: Any) -> None:
        self.sns = sns

    def style_context(self) -> ContextManager[Any]:
        return self.sns.axes_style("whitegrid")

    def palette(self, groups: Sequence[str]) -> dict[str, Any]:
        colors = self.sns.color_palette("colorblind", n_colors=len(groups))
        return dict(zip(groups, colors))

    def scatter(
        self,
        ax: Axes,
        frame: pd.DataFrame,
        x: str,
        y: str,
        hue: str | None = None,
        palette: dict[str, Any] | None = None,
    ) -> None:
        if hue is None:
            self.sns.scatterplot(data=frame, x=x, y=y, ax=ax, s=22, alpha=0.7, color=NEUTRAL_COLOR, linewidth=0)
            return
        self.sns.scatterplot(
            data=frame,
            x=x,
            y=y,
            hue=hue,
            hue_order=sorted(frame[hue].unique()),
            palette=palette,
            ax=ax,
            s=22,
            alpha=0.7,
            linewidth=0,
        )

    def line(
        self,
        ax: Axes,
        xs: np.ndarray,
        ys: np.ndarray,
        *,
        color: Any,
        label: str,
        linestyle: str = "-",
    ) -> None:
        self.sns.lineplot(x=xs, y=ys, ax=ax, color=color, linewidth=2.0, linestyle=linestyle, label=label)

    def finish(self, ax: Axes) -> None:
        self.sns.despine(ax=ax)


def select_renderer(prefer: str | None = "auto") -> PanelRenderer:
    choice = (prefer or "auto").lower()
    if choice not in RENDERER_CHOICES:
        raise ValueError(f"Unknown renderer '{prefer}'. Expected one of {list(RENDERER_CHOICES)}.")
    if choice == "matplotlib":
        return MatplotlibRenderer()

    try:
        import seaborn as sns
    except Exception as exc:
        if choice == "seaborn":
            raise RuntimeError("seaborn is required for the seaborn renderer.") from exc
        logger.warning("[PLOT] seaborn is not available, composing figures with plain matplotlib")
        return MatplotlibRenderer()
    return SeabornRenderer(sns)
