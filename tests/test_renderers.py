import builtins
import io
import logging

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from penguin_paradox.config import FigureText
from penguin_paradox.data import PenguinDatasetLoader
from penguin_paradox.plots import GroupedTrendPanel, PooledTrendPanel, build_comparison_figure, build_panel_figure
from penguin_paradox.renderers import MatplotlibRenderer, SeabornRenderer, select_renderer
from penguin_paradox.trends import summarize_paradox


def build_panels() -> tuple[PooledTrendPanel, GroupedTrendPanel]:
    frame = PenguinDatasetLoader(random_state=7).load(force_synthetic=True).frame
    summary = summarize_paradox(frame, "bill_length_mm", "bill_depth_mm", "species")
    pooled = PooledTrendPanel(frame=frame, x="bill_length_mm", y="bill_depth_mm", trend=summary.pooled)
    grouped = GroupedTrendPanel(
        frame=frame,
        x="bill_length_mm",
        y="bill_depth_mm",
        group="species",
        summary=summary,
    )
    return pooled, grouped


def block_seaborn(monkeypatch) -> None:
    original_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "seaborn" or name.startswith("seaborn."):
            raise ImportError(name)
        return original_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)


def assert_two_panel_layout(fig, text: FigureText) -> None:
    assert len(fig.axes) == 2
    left, right = fig.axes
    assert left.get_position().x0 < right.get_position().x0
    assert left.get_title() == "Ignoring species"
    assert right.get_title() == "Accounting for species"
    assert fig._suptitle is not None
    assert fig._suptitle.get_text() == text.title
    annotations = {item.get_gid(): item.get_text() for item in fig.texts}
    assert annotations["subtitle"] == text.subtitle
    assert annotations["caption"] == text.caption


def test_select_renderer_falls_back_to_matplotlib_without_seaborn(monkeypatch) -> None:
    block_seaborn(monkeypatch)
    renderer = select_renderer("auto")
    assert isinstance(renderer, MatplotlibRenderer)


def test_select_renderer_raises_when_seaborn_is_demanded_but_missing(monkeypatch) -> None:
    block_seaborn(monkeypatch)
    with pytest.raises(RuntimeError):
        select_renderer("seaborn")


def test_select_renderer_rejects_unknown_choice() -> None:
    with pytest.raises(ValueError):
        select_renderer("plotly")


def test_select_renderer_prefers_seaborn_when_installed() -> None:
    pytest.importorskip("seaborn")
    assert isinstance(select_renderer(None), SeabornRenderer)


def test_matplotlib_comparison_has_two_panels_and_shared_text() -> None:
    pooled, grouped = build_panels()
    text = FigureText(title="T", subtitle="S", caption="C")
    fig = build_comparison_figure(pooled, grouped, MatplotlibRenderer(), text)
    try:
        assert_two_panel_layout(fig, text)
        # pooled fit plus one line per species
        assert len(fig.axes[1].get_lines()) >= 4
    finally:
        plt.close(fig)


def test_seaborn_comparison_has_two_panels_and_shared_text() -> None:
    pytest.importorskip("seaborn")
    pooled, grouped = build_panels()
    text = FigureText()
    fig = build_comparison_figure(pooled, grouped, select_renderer("seaborn"), text)
    try:
        assert_two_panel_layout(fig, text)
    finally:
        plt.close(fig)


def test_standalone_panel_has_single_axes() -> None:
    pooled, _ = build_panels()
    fig = build_panel_figure(pooled, MatplotlibRenderer())
    try:
        assert len(fig.axes) == 1
        assert fig.axes[0].get_xlabel() == "Bill length (mm)"
        assert fig.axes[0].get_ylabel() == "Bill depth (mm)"
    finally:
        plt.close(fig)


def test_fallback_to_matplotlib_logs_a_warning(monkeypatch) -> None:
    block_seaborn(monkeypatch)
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    renderer_logger = logging.getLogger("penguin_paradox.renderers")
    previous_level = renderer_logger.level
    renderer_logger.addHandler(handler)
    renderer_logger.setLevel(logging.INFO)
    try:
        select_renderer("auto")
    finally:
        renderer_logger.removeHandler(handler)
        renderer_logger.setLevel(previous_level)

    assert "[PLOT] seaborn is not available" in stream.getvalue()


def test_grouped_panel_draws_points_for_groups_without_a_fit() -> None:
    frame = PenguinDatasetLoader(random_state=7).load(force_synthetic=True).frame
    lone = frame.iloc[[0]].assign(species="Emperor")
    frame = pd.concat([frame, lone], ignore_index=True)
    summary = summarize_paradox(frame, "bill_length_mm", "bill_depth_mm", "species")
    grouped = GroupedTrendPanel(
        frame=frame,
        x="bill_length_mm",
        y="bill_depth_mm",
        group="species",
        summary=summary,
    )

    fig = build_panel_figure(grouped, MatplotlibRenderer())
    try:
        assert "Emperor" not in summary.groups
        # pooled fit plus one line per fitted species
        assert len(fig.axes[0].get_lines()) == 4
    finally:
        plt.close(fig)
