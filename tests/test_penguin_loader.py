from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from penguin_paradox.data import PenguinDatasetLoader


def test_loader_returns_synthetic_when_forced() -> None:
    dataset = PenguinDatasetLoader(random_state=42).load(force_synthetic=True)

    assert dataset.source == "synthetic"
    assert not dataset.frame.empty
    assert {"species", "bill_length_mm", "bill_depth_mm"}.issubset(dataset.frame.columns)
    assert dataset.raw_row_count == 344
    assert dataset.dropped_row_count == 2
    assert dataset.group_counts() == {"Adelie": 151, "Chinstrap": 68, "Gentoo": 123}


def test_loader_drops_rows_with_missing_measurements(tmp_path: Path) -> None:
    csv_path = tmp_path / "penguins.csv"
    pd.DataFrame(
        {
            "species": ["Adelie", "Adelie", "Gentoo", None],
            "bill_length_mm": [39.1, np.nan, 46.1, 40.0],
            "bill_depth_mm": [18.7, 17.4, 13.2, 18.0],
            "island": ["Torgersen", "Torgersen", "Biscoe", "Dream"],
        }
    ).to_csv(csv_path, index=False)

    dataset = PenguinDatasetLoader().load(csv_path=csv_path)

    assert dataset.source == "csv"
    assert dataset.raw_row_count == 4
    assert dataset.dropped_row_count == 2
    assert list(dataset.frame["species"]) == ["Adelie", "Gentoo"]
    assert dataset.frame["bill_length_mm"].dtype == float


def test_loader_rejects_frame_without_required_columns(tmp_path: Path) -> None:
    csv_path = tmp_path / "penguins.csv"
    pd.DataFrame({"species": ["Adelie"], "bill_length_mm": [39.1]}).to_csv(csv_path, index=False)

    with pytest.raises(ValueError, match="Missing required columns"):
        PenguinDatasetLoader().load(csv_path=csv_path)


def test_loader_rejects_non_positive_measurements(tmp_path: Path) -> None:
    csv_path = tmp_path / "penguins.csv"
    pd.DataFrame(
        {"species": ["Adelie", "Gentoo"], "bill_length_mm": [39.1, -1.0], "bill_depth_mm": [18.7, 13.2]}
    ).to_csv(csv_path, index=False)

    with pytest.raises(ValueError, match="Validation gate failed"):
        PenguinDatasetLoader().load(csv_path=csv_path)


def test_loader_raises_when_csv_missing_and_synthetic_disabled(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        PenguinDatasetLoader().load(csv_path=tmp_path / "missing.csv")


def test_loader_falls_back_to_synthetic_when_csv_missing(tmp_path: Path) -> None:
    dataset = PenguinDatasetLoader().load(csv_path=tmp_path / "missing.csv", use_synthetic_if_missing=True)
    assert dataset.source == "synthetic"


def test_loader_raises_when_package_fails_and_fallback_disabled(monkeypatch) -> None:
    def failing_load(*args, **kwargs):
        raise RuntimeError("load failed")

    monkeypatch.setattr("penguin_paradox.data.load_penguins", failing_load)

    with pytest.raises(RuntimeError):
        PenguinDatasetLoader(random_state=42).load()


def test_loader_uses_synthetic_when_package_fails_and_fallback_enabled(monkeypatch) -> None:
    def failing_load(*args, **kwargs):
        raise RuntimeError("load failed")

    monkeypatch.setattr("penguin_paradox.data.load_penguins", failing_load)

    dataset = PenguinDatasetLoader(random_state=42).load(use_synthetic_if_missing=True)
    assert dataset.source == "synthetic"
