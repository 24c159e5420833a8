"""Tests for the Bar model, sample data generator and DataStore."""

import json

import numpy as np
import pandas as pd
import pytest

from bb_overlay.data.bar import BAR_COLUMNS, Bar, bars_to_frame, frame_to_bars
from bb_overlay.data.data_store import DataStore
from bb_overlay.data.sample_data import DAY_MS, generate_sample_bars


@pytest.fixture
def tmp_store(tmp_path):
    """DataStore backed by a temporary directory."""
    return DataStore(data_dir=tmp_path)


def _sample_bars() -> list[Bar]:
    return [
        Bar(timestamp=1_700_000_000_000, open=100.0, high=101.5, low=99.2, close=101.0, volume=1234.0),
        Bar(timestamp=1_700_086_400_000, open=101.0, high=102.0, low=100.1, close=100.4, volume=5678.0),
    ]


# ----------------------------------------------------------------------
# Bar
# ----------------------------------------------------------------------


def test_bars_to_frame_keeps_order_and_columns():
    """One row per bar, fixed column order."""
    df = bars_to_frame(_sample_bars())
    assert list(df.columns) == BAR_COLUMNS
    assert df["close"].tolist() == [101.0, 100.4]
    assert df["timestamp"].dtype == "int64"


def test_frame_to_bars_inverse():
    """frame_to_bars rebuilds the Bar objects."""
    bars = _sample_bars()
    assert frame_to_bars(bars_to_frame(bars)) == bars


def test_frame_to_bars_rejects_unordered():
    """Decreasing timestamps are refused."""
    df = bars_to_frame(list(reversed(_sample_bars())))
    with pytest.raises(ValueError, match="non-decreasing"):
        frame_to_bars(df)


# ----------------------------------------------------------------------
# Sample data
# ----------------------------------------------------------------------


def test_sample_bars_shape():
    """Requested count, daily spacing, bar columns."""
    df = generate_sample_bars(250, seed=1, start=0)
    assert len(df) == 250
    assert list(df.columns) == BAR_COLUMNS
    assert (df["timestamp"].diff().dropna() == DAY_MS).all()
    assert df["timestamp"].iloc[0] == 0


def test_sample_bars_ohlc_consistent():
    """High bounds open/close from above, low from below; volume in range."""
    df = generate_sample_bars(500, seed=7)
    assert (df["high"] >= df[["open", "close"]].max(axis=1)).all()
    assert (df["low"] <= df[["open", "close"]].min(axis=1)).all()
    assert df["volume"].between(100_000, 1_100_000).all()
    assert (df["close"] > 0).all()


def test_sample_bars_rounded_to_cents():
    """Prices carry two decimals."""
    df = generate_sample_bars(50, seed=3)
    for col in ("open", "high", "low", "close"):
        np.testing.assert_allclose(df[col], df[col].round(2))


def test_sample_bars_seed_reproducible():
    """Same seed, same series."""
    a = generate_sample_bars(100, seed=11, start=0)
    b = generate_sample_bars(100, seed=11, start=0)
    pd.testing.assert_frame_equal(a, b)


# ----------------------------------------------------------------------
# DataStore
# ----------------------------------------------------------------------


def test_save_and_load_roundtrip(tmp_store):
    """Save bars and load them back — contents must match."""
    original = bars_to_frame(_sample_bars())
    tmp_store.save("SPY", original)

    loaded = tmp_store.load("SPY")
    pd.testing.assert_frame_equal(loaded, original)


def test_exists(tmp_store):
    """exists() flips to True after saving."""
    assert tmp_store.exists("SPY") is False
    tmp_store.save("SPY", bars_to_frame(_sample_bars()))
    assert tmp_store.exists("SPY") is True


def test_load_raises_when_missing(tmp_store):
    """load() raises FileNotFoundError for missing data."""
    with pytest.raises(FileNotFoundError):
        tmp_store.load("MISSING")


def test_load_json(tmp_store, tmp_path):
    """An ohlcv.json array loads into a bar frame."""
    payload = [
        {"timestamp": b.timestamp, "open": b.open, "high": b.high,
         "low": b.low, "close": b.close, "volume": b.volume}
        for b in _sample_bars()
    ]
    (tmp_path / "ohlcv.json").write_text(json.dumps(payload), encoding="utf-8")

    df = tmp_store.load_json("ohlcv.json")
    assert frame_to_bars(df) == _sample_bars()


def test_load_json_rejects_non_list(tmp_store, tmp_path):
    """A JSON object instead of an array is a ValueError."""
    (tmp_path / "bad.json").write_text('{"bars": []}', encoding="utf-8")
    with pytest.raises(ValueError, match="JSON array"):
        tmp_store.load_json("bad.json")


def test_load_json_rejects_missing_field(tmp_store, tmp_path):
    """A bar without close is a ValueError."""
    (tmp_path / "bad.json").write_text('[{"timestamp": 1, "open": 1}]', encoding="utf-8")
    with pytest.raises(ValueError, match="Malformed bar"):
        tmp_store.load_json("bad.json")


def test_load_file_dispatches_on_suffix(tmp_store):
    """load_file reads parquet and refuses unknown types."""
    tmp_store.save("QQQ", bars_to_frame(_sample_bars()))
    df = tmp_store.load_file("QQQ.parquet")
    assert len(df) == 2

    with pytest.raises(ValueError, match="Unsupported bar file type"):
        tmp_store.load_file("bars.csv")
