from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from penguin_paradox.logging_utils import get_logger
from penguin_paradox.schema import PenguinSchema

logger = get_logger(__name__)


PENGUIN_GROUP = "species"
PENGUIN_X = "bill_length_mm"
PENGUIN_Y = "bill_depth_mm"

PENGUIN_COLUMNS = [
    "species",
    "island",
    "bill_length_mm",
    "bill_depth_mm",
    "flipper_length_mm",
    "body_mass_g",
    "sex",
    "year",
]

MEASUREMENT_LABELS = {
    PENGUIN_X: "Bill length (mm)",
    PENGUIN_Y: "Bill depth (mm)",
}

ARTIFACT_NAMES = {
    "pooled_plot": "pooled_trend.png",
    "grouped_plot": "grouped_trend.png",
    "comparison_plot": "comparison.png",
    "narrative": "SIMPSONS_PARADOX.md",
    "report": "paradox_report.json",
}


@dataclass(frozen=True, slots=True)
class PenguinPaths:
    project_root: Path
    reports_dir: Path

    @classmethod
    def default(cls, project_root: Path | None = None) -> "PenguinPaths":
        # Relative to the caller's working directory, never the install location.
        project_root = (project_root or Path.cwd()).resolve()
        return cls(
            project_root=project_root,
            reports_dir=project_root / "reports" / "simpsons_paradox",
        )


@dataclass(frozen=True, slots=True)
class FigureText:
    title: str = "Simpson's Paradox in the Palmer penguins"
    subtitle: str = "Bill depth against bill length, pooled (left) and by species (right)"
    caption: str = "Data: palmerpenguins (Gorman, Williams & Fraser, 2014). Lines are ordinary least-squares fits."


@dataclass(frozen=True, slots=True)
class ReportConfig:
    figure_text: FigureText = field(default_factory=FigureText)
    output_dir: Path | None = None
    renderer: str = "auto"


def penguin_schema() -> PenguinSchema:
    return PenguinSchema.create(
        measurements=[PENGUIN_X, PENGUIN_Y],
        group=PENGUIN_GROUP,
    )


def load_report_config(config_path: Path | str) -> ReportConfig:
    """
    Load an optional YAML file overriding figure text, output directory or renderer.

    Expected layout::

        figure_text:
          title: ...
          subtitle: ...
          caption: ...
        output_dir: reports/custom
        renderer: matplotlib
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    logger.info(f"Loading report config from {config_file}")
    with config_file.open("r", encoding="utf-8") as f:
        cfg: dict[str, Any] = yaml.safe_load(f) or {}

    unknown = sorted(set(cfg) - {"figure_text", "output_dir", "renderer"})
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")

    text_cfg = dict(cfg.get("figure_text") or {})
    allowed_text = {item.name for item in fields(FigureText)}
    unknown_text = sorted(set(text_cfg) - allowed_text)
    if unknown_text:
        raise ValueError(f"Unknown figure_text keys: {unknown_text}")

    output_dir = cfg.get("output_dir")
    if output_dir is not None:
        output_dir = (config_file.parent / output_dir).resolve()

    return ReportConfig(
        figure_text=replace(FigureText(), **{key: str(value) for key, value in text_cfg.items()}),
        output_dir=output_dir,
        renderer=str(cfg.get("renderer", "auto")),
    )
