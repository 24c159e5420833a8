"""Bar (OHLCV) data model and DataFrame conversion."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

import pandas as pd

BAR_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class Bar:
    """Single price bar.

    Attributes:
        timestamp: Bar open time in epoch milliseconds.
        open: Opening price.
        high: High price.
        low: Low price.
        close: Closing price.
        volume: Traded volume.
    """

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_dict(cls, d: dict) -> "Bar":
        return cls(
            timestamp=int(d["timestamp"]),
            open=float(d["open"]),
            high=float(d["high"]),
            low=float(d["low"]),
            close=float(d["close"]),
            volume=float(d["volume"]),
        )


def bars_to_frame(bars: Iterable[Bar]) -> pd.DataFrame:
    """Build a bar DataFrame (one row per bar, input order kept)."""
    rows = [asdict(b) for b in bars]
    df = pd.DataFrame(rows, columns=BAR_COLUMNS)
    df["timestamp"] = df["timestamp"].astype("int64")
    for col in BAR_COLUMNS[1:]:
        df[col] = df[col].astype(float)
    return df


def frame_to_bars(df: pd.DataFrame) -> list[Bar]:
    """Inverse of :func:`bars_to_frame`."""
    validate_bar_frame(df)
    return [Bar.from_dict(row) for row in df[BAR_COLUMNS].to_dict("records")]


def validate_bar_frame(df: pd.DataFrame) -> None:
    """Check columns and timestamp ordering.

    Raises:
        ValueError: If required columns are missing or timestamps decrease.
    """
    missing = set(BAR_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    if not df["timestamp"].is_monotonic_increasing:
        raise ValueError("Bars must be in non-decreasing timestamp order")
