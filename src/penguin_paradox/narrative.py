from __future__ import annotations

from typing import Any

from penguin_paradox.config import ARTIFACT_NAMES, MEASUREMENT_LABELS, PENGUIN_X, PENGUIN_Y


def _describe_slope(slope: float) -> str:
    if slope > 0:
        return "rises"
    if slope < 0:
        return "falls"
    return "stays flat"


def _data_section(payload: dict[str, Any]) -> list[str]:
    lines = [
        "## The data",
        "",
        "The Palmer penguins table records one row per bird measured near Palmer Station, Antarctica.",
        f"We keep the species label and two measurements: {MEASUREMENT_LABELS[PENGUIN_X].lower()} "
        f"and {MEASUREMENT_LABELS[PENGUIN_Y].lower()}.",
        "",
        f"- Source: `{payload['dataset_source']}`",
        f"- Rows loaded: {payload['raw_row_count']}",
        f"- Rows with both bill measurements: {payload['row_count']} "
        f"({payload['dropped_row_count']} dropped)",
    ]
    for name, count in payload["group_counts"].items():
        lines.append(f"- {name}: {count} penguins")
    return lines


def render_narrative(payload: dict[str, Any]) -> str:
    """Markdown walk-through of the pooled fit, the per-species fits and the comparison figure."""
    pooled = payload["pooled_trend"]
    groups: dict[str, dict[str, Any]] = payload["group_trends"]
    reversed_ = bool(payload["reversal_detected"])
    text = payload["figure_text"]

    lines = [
        f"# {text['title']}",
        "",
        f"- Report version: {payload['report_version']}",
        f"- Generated at (UTC): {payload['generated_at']}",
        f"- Renderer: {payload['renderer']}",
        "",
        "Simpson's Paradox happens when a trend that holds inside every subgroup of the data reverses, "
        "or disappears, once the subgroups are pooled together. "
        "The grouping variable that hides the subgroup trend is a confounding variable.",
        "",
    ]
    lines.extend(_data_section(payload))

    lines.extend(
        [
            "",
            "## Step 1: one line for every penguin",
            "",
            f"![Pooled trend]({ARTIFACT_NAMES['pooled_plot']})",
            "",
            f"Fitting a single least-squares line to all {pooled['n_obs']} penguins, bill depth "
            f"{_describe_slope(pooled['slope'])} with bill length "
            f"(slope {pooled['slope']:+.3f} mm per mm, R² {pooled['r2']:.3f}). "
            "Read on its own, this suggests that longer bills come with "
            f"{'deeper' if pooled['slope'] > 0 else 'shallower'} bills.",
            "",
            "## Step 2: one line per species",
            "",
            f"![Grouped trend]({ARTIFACT_NAMES['grouped_plot']})",
            "",
            "Colouring the points by species shows three separate clouds. "
            "Fitting a line inside each species gives:",
            "",
        ]
    )
    for name, trend in groups.items():
        lines.append(
            f"- {name}: slope {trend['slope']:+.3f} (n={trend['n_obs']}, R² {trend['r2']:.3f}), "
            f"bill depth {_describe_slope(trend['slope'])} with bill length"
        )

    lines.append("")
    if reversed_:
        lines.append(
            "Every species-level line points the opposite way from the pooled line. "
            "The pooled trend is an artefact of where the species sit relative to each other, "
            "not of how bill depth changes with bill length within a species."
        )
    else:
        lines.append(
            "Here the species-level lines do not all reverse the pooled line, "
            "so this table does not show a full reversal."
        )

    lines.extend(
        [
            "",
            "## Side by side",
            "",
            f"![Comparison]({ARTIFACT_NAMES['comparison_plot']})",
            "",
            f"_{text['subtitle']}_",
            "",
            "## Takeaway",
            "",
            "Species is the confounding variable here. Before trusting a trend in pooled data, "
            "check whether a grouping variable changes the picture.",
            "",
            f"_{text['caption']}_",
        ]
    )
    return "\n".join(lines) + "\n"
