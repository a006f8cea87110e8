from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
import hashlib
import json
from pathlib import Path
from typing import Any

import pandas as pd

from penguin_paradox.config import ARTIFACT_NAMES, PENGUIN_GROUP, PENGUIN_X, PENGUIN_Y, FigureText
from penguin_paradox.data import PenguinDatasetLoader
from penguin_paradox.logging_utils import get_logger
from penguin_paradox.narrative import render_narrative
from penguin_paradox.plots import (
    GroupedTrendPanel,
    PooledTrendPanel,
    build_comparison_figure,
    build_panel_figure,
    save_figure,
)
from penguin_paradox.renderers import PanelRenderer, select_renderer
from penguin_paradox.trends import summarize_paradox

logger = get_logger(__name__)

PROJECT_NAME = "penguin_paradox"


def _dataset_fingerprint(frame: pd.DataFrame, columns: list[str]) -> str:
    selected = frame.loc[:, columns]
    row_hash = pd.util.hash_pandas_object(selected, index=False).to_numpy()
    digest = hashlib.sha256()
    digest.update(",".join(columns).encode("utf-8"))
    digest.update(str(selected.shape[0]).encode("utf-8"))
    digest.update(row_hash.tobytes())
    return digest.hexdigest()


def generate_paradox_report(
    *,
    output_dir: Path,
    report_version: str,
    csv_path: Path | None = None,
    force_synthetic: bool = False,
    use_synthetic_if_missing: bool = False,
    renderer: str | PanelRenderer = "auto",
    text: FigureText | None = None,
) -> dict[str, Any]:
    figure_text = text or FigureText()
    active = renderer if isinstance(renderer, PanelRenderer) else select_renderer(renderer)

    dataset = PenguinDatasetLoader(random_state=42).load(
        csv_path=csv_path,
        use_synthetic_if_missing=use_synthetic_if_missing,
        force_synthetic=force_synthetic,
    )
    frame = dataset.frame
    summary = summarize_paradox(frame, PENGUIN_X, PENGUIN_Y, PENGUIN_GROUP)

    pooled_panel = PooledTrendPanel(frame=frame, x=PENGUIN_X, y=PENGUIN_Y, trend=summary.pooled)
    grouped_panel = GroupedTrendPanel(
        frame=frame,
        x=PENGUIN_X,
        y=PENGUIN_Y,
        group=PENGUIN_GROUP,
        summary=summary,
    )

    output_dir.mkdir(parents=True, exist_ok=True)
    paths: dict[str, str] = {
        "pooled_plot": save_figure(build_panel_figure(pooled_panel, active), output_dir / ARTIFACT_NAMES["pooled_plot"]),
        "grouped_plot": save_figure(build_panel_figure(grouped_panel, active), output_dir / ARTIFACT_NAMES["grouped_plot"]),
        "comparison_plot": save_figure(
            build_comparison_figure(pooled_panel, grouped_panel, active, figure_text),
            output_dir / ARTIFACT_NAMES["comparison_plot"],
        ),
    }

    payload: dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "project_name": PROJECT_NAME,
        "report_version": report_version,
        "dataset_source": dataset.source,
        "raw_row_count": dataset.raw_row_count,
        "row_count": int(frame.shape[0]),
        "dropped_row_count": dataset.dropped_row_count,
        "group_counts": dataset.group_counts(),
        "renderer": active.name,
        "dataset_fingerprint": {
            "algorithm": "sha256",
            "value": _dataset_fingerprint(frame, [PENGUIN_GROUP, PENGUIN_X, PENGUIN_Y]),
        },
        **summary.to_dict(),
        "figure_text": asdict(figure_text),
    }

    narrative_path = output_dir / ARTIFACT_NAMES["narrative"]
    narrative_path.write_text(render_narrative(payload), encoding="utf-8")
    report_path = output_dir / ARTIFACT_NAMES["report"]
    report_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    paths["narrative"] = str(narrative_path)
    paths["report"] = str(report_path)

    logger.info(f"[REPORT] Wrote narrative and report to {output_dir}")
    return {
        "report": payload,
        "artifacts": paths,
    }
