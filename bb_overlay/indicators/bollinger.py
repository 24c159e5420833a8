"""Bollinger Bands indicator.

The computation runs in four stateless stages over the full bar history:
source extraction, trailing-window statistics, band assembly and offset.
NaN marks values that are undefined (warm-up rows, rows shifted in by the
offset, and the spread of single-bar windows).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from bb_overlay.data.bar import Bar, bars_to_frame
from bb_overlay.indicators.band_options import DEFAULT_BAND_OPTIONS, BandOptions

logger = logging.getLogger(__name__)

BAND_COLUMNS = ["basis", "upper", "lower"]

BarsLike = Union[pd.DataFrame, Sequence[Bar]]


@dataclass(frozen=True)
class BandPoint:
    """One output row; None where the band is undefined."""

    basis: Optional[float]
    upper: Optional[float]
    lower: Optional[float]

    @property
    def is_defined(self) -> bool:
        return None not in (self.basis, self.upper, self.lower)


def extract_source(bars: pd.DataFrame, source: str) -> pd.Series:
    """Project the *source* field out of the bar frame.

    Raises:
        ValueError: If the frame has no *source* column.
    """
    if source not in bars.columns:
        raise ValueError(f"Missing source column '{source}'")
    return bars[source].astype(float)


def rolling_statistics(prices: pd.Series, length: int) -> tuple[pd.Series, pd.Series]:
    """Trailing-window mean and sample standard deviation.

    Rows with fewer than *length* observations are NaN. The deviation uses
    the ``length - 1`` divisor, so it is NaN everywhere when ``length == 1``.

    Each window is reduced on its own (two-pass mean then squared
    deviations), so results do not drift with the price level the way a
    running add/remove accumulator does.
    """
    values = prices.to_numpy(dtype=float)
    mean = np.full(len(values), np.nan)
    std = np.full(len(values), np.nan)

    if len(values) >= length:
        windows = sliding_window_view(values, length)
        mean[length - 1:] = windows.mean(axis=1)
        if length > 1:
            std[length - 1:] = windows.std(axis=1, ddof=1)

    return pd.Series(mean, index=prices.index), pd.Series(std, index=prices.index)


def assemble_bands(mean: pd.Series, std: pd.Series, multiplier: float) -> pd.DataFrame:
    """Combine mean and spread into basis/upper/lower columns."""
    spread = multiplier * std
    return pd.DataFrame(
        {
            "basis": mean,
            "upper": mean + spread,
            "lower": mean - spread,
        },
        index=mean.index,
    )


def apply_offset(bands: pd.DataFrame, offset: int) -> pd.DataFrame:
    """Shift whole rows by *offset* positions, padding with NaN.

    Positive offsets move values later (the first *offset* rows become NaN),
    negative offsets move them earlier. ``|offset| >= len(bands)`` yields
    an all-NaN frame of the same length.
    """
    if offset == 0:
        return bands
    return bands.shift(offset)


def compute_bollinger_bands(
    bars: BarsLike,
    options: Optional[BandOptions] = None,
) -> pd.DataFrame:
    """Compute Bollinger Bands for every bar.

    Args:
        bars: Bar DataFrame (``open/high/low/close`` columns) or a sequence
            of :class:`Bar`, in non-decreasing timestamp order. Not sorted here.
        options: Band parameters. Defaults to :data:`DEFAULT_BAND_OPTIONS`.

    Returns:
        DataFrame with float columns ``basis, upper, lower``, one row per
        input bar and indexed like *bars*.

    Raises:
        ValueError: If the selected source column is missing.
    """
    options = options or DEFAULT_BAND_OPTIONS
    df = bars if isinstance(bars, pd.DataFrame) else bars_to_frame(bars)

    prices = extract_source(df, options.source)
    mean, std = rolling_statistics(prices, options.length)
    bands = assemble_bands(mean, std, options.std_dev_multiplier)
    bands = apply_offset(bands, options.offset)

    logger.debug(
        "Computed bands for %d bars (length=%d, source=%s, mult=%s, offset=%d)",
        len(bands), options.length, options.source,
        options.std_dev_multiplier, options.offset,
    )
    return bands


def to_band_points(bands: pd.DataFrame) -> list[BandPoint]:
    """Convert a band frame to :class:`BandPoint` rows with None for NaN."""

    def _value(x: float) -> Optional[float]:
        return None if math.isnan(x) else float(x)

    return [
        BandPoint(basis=_value(b), upper=_value(u), lower=_value(lo))
        for b, u, lo in bands[BAND_COLUMNS].itertuples(index=False, name=None)
    ]

