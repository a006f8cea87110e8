from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd


def ensure_required_columns(frame: pd.DataFrame, columns: Iterable[str]) -> None:
    required = list(columns)
    missing = [column for column in required if column not in frame.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


@dataclass(frozen=True, slots=True)
class PenguinSchema:
    measurements: tuple[str, ...]
    group: str

    @classmethod
    def create(
        cls,
        measurements: list[str] | tuple[str, ...],
        group: str,
    ) -> "PenguinSchema":
        return cls(measurements=tuple(measurements), group=group)

    @property
    def required_columns(self) -> tuple[str, ...]:
        return (self.group,) + self.measurements

    def ensure_valid(self) -> None:
        if len(self.measurements) != 2:
            raise ValueError("Penguin schema needs exactly two measurement columns (x, y).")
        if len(set(self.measurements)) != 2:
            raise ValueError(f"Duplicated measurements are not allowed: {list(self.measurements)}")
        if self.group in self.measurements:
            raise ValueError("Grouping column must not be one of the measurements.")

    def validate_frame(self, frame: pd.DataFrame) -> None:
        ensure_required_columns(frame, self.required_columns)
