from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression
from sklearn.metrics import r2_score

from penguin_paradox.logging_utils import get_logger
from penguin_paradox.schema import ensure_required_columns

logger = get_logger(__name__)

POOLED_LABEL = "All penguins"
FLAT_TOLERANCE = 1e-12


@dataclass(frozen=True, slots=True)
class TrendLine:
    label: str
    slope: float
    intercept: float
    n_obs: int
    r2: float

    @property
    def direction(self) -> str:
        if abs(self.slope) < FLAT_TOLERANCE:
            return "flat"
        return "positive" if self.slope > 0 else "negative"

    def predict(self, xs: np.ndarray) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(xs, dtype=float)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "slope": self.slope,
            "intercept": self.intercept,
            "n_obs": self.n_obs,
            "r2": self.r2,
            "direction": self.direction,
        }


@dataclass(frozen=True, slots=True)
class ParadoxSummary:
    pooled: TrendLine
    groups: dict[str, TrendLine]
    reversed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "pooled_trend": self.pooled.to_dict(),
            "group_trends": {name: trend.to_dict() for name, trend in self.groups.items()},
            "reversal_detected": self.reversed,
        }


def fit_trend(frame: pd.DataFrame, x: str, y: str, label: str = POOLED_LABEL) -> TrendLine:
    ensure_required_columns(frame, [x, y])
    subset = frame.loc[:, [x, y]].apply(pd.to_numeric, errors="coerce").dropna()
    if subset.shape[0] < 2:
        raise ValueError(f"At least two complete rows are needed to fit '{label}', got {subset.shape[0]}.")
    xs = subset[x].to_numpy(dtype=float)
    ys = subset[y].to_numpy(dtype=float)
    if np.ptp(xs) == 0.0:
        raise ValueError(f"Cannot fit '{label}': {x} is constant.")

    model = LinearRegression()
    model.fit(xs.reshape(-1, 1), ys)
    r2 = float(r2_score(ys, model.predict(xs.reshape(-1, 1))))
    return TrendLine(
        label=label,
        slope=float(model.coef_[0]),
        intercept=float(model.intercept_),
        n_obs=int(subset.shape[0]),
        r2=r2,
    )


def fit_group_trends(frame: pd.DataFrame, x: str, y: str, group: str) -> dict[str, TrendLine]:
    ensure_required_columns(frame, [group])
    trends: dict[str, TrendLine] = {}
    for name, part in frame.groupby(group, sort=True):
        try:
            trends[str(name)] = fit_trend(part, x, y, label=str(name))
        except ValueError as exc:
            logger.warning(f"[TREND] Skipping group '{name}': {exc}")
    return trends


def is_reversal(pooled: TrendLine, groups: dict[str, TrendLine]) -> bool:
    if not groups or pooled.direction == "flat":
        return False
    return all(np.sign(trend.slope) == -np.sign(pooled.slope) for trend in groups.values())


def summarize_paradox(frame: pd.DataFrame, x: str, y: str, group: str) -> ParadoxSummary:
    pooled = fit_trend(frame, x, y)
    groups = fit_group_trends(frame, x, y, group)
    reversed_ = is_reversal(pooled, groups)
    logger.info(
        f"[TREND] pooled slope={pooled.slope:.4f}; "
        + ", ".join(f"{name}={trend.slope:.4f}" for name, trend in groups.items())
        + f"; reversal={reversed_}"
    )
    return ParadoxSummary(pooled=pooled, groups=groups, reversed=reversed_)
