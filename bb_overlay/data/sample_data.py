"""Synthetic daily OHLCV bars for demos and for when no data file is available."""

from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np
import pandas as pd

from bb_overlay.data.bar import BAR_COLUMNS

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

_BASE_PRICE = 100.0
_VOLATILITY = 0.02
_TREND = 0.0005
_INTRABAR_RANGE = 0.01
_CLOSE_RANGE = 0.015


def generate_sample_bars(
    count: int = 250,
    seed: Optional[int] = None,
    start: Optional[int] = None,
) -> pd.DataFrame:
    """Generate a random-walk series of daily bars.

    Each bar opens near the previous close (drift ``_TREND`` plus a uniform
    shock of width ``_VOLATILITY``), closes within +/-0.75% of its open and
    has high/low wicks up to 1% away. Prices are rounded to cents and
    high/low are widened to contain open and close.

    Args:
        count: Number of bars.
        seed: Seed for ``np.random.default_rng``; None for a fresh series.
        start: Timestamp (epoch ms) of the first bar. Defaults to *count*
            days before now.

    Returns:
        DataFrame with columns ``timestamp, open, high, low, close, volume``.
    """
    rng = np.random.default_rng(seed)
    if start is None:
        start = int(time.time() * 1000) - count * DAY_MS

    rows = []
    base_price = _BASE_PRICE
    for i in range(count):
        random_change = (rng.random() - 0.5) * _VOLATILITY
        opn = base_price * (1 + _TREND + random_change)

        high = opn * (1 + rng.random() * _INTRABAR_RANGE)
        low = opn * (1 - rng.random() * _INTRABAR_RANGE)
        close = opn * (1 + (rng.random() - 0.5) * _CLOSE_RANGE)

        volume = int(rng.integers(100_000, 1_100_000))

        rows.append(
            {
                "timestamp": start + i * DAY_MS,
                "open": round(opn, 2),
                "high": round(max(opn, high, close), 2),
                "low": round(min(opn, low, close), 2),
                "close": round(close, 2),
                "volume": float(volume),
            }
        )
        base_price = close

    logger.debug("Generated %d sample bars (seed=%s)", count, seed)
    return pd.DataFrame(rows, columns=BAR_COLUMNS)
