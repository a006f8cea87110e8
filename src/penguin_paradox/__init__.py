from penguin_paradox.data import PenguinDataset, PenguinDatasetLoader
from penguin_paradox.report import generate_paradox_report
from penguin_paradox.trends import ParadoxSummary, TrendLine, fit_group_trends, fit_trend, summarize_paradox

__all__ = [
    "ParadoxSummary",
    "PenguinDataset",
    "PenguinDatasetLoader",
    "TrendLine",
    "fit_group_trends",
    "fit_trend",
    "generate_paradox_report",
    "summarize_paradox",
]
