"""Local file store for OHLCV bar data (parquet per symbol, or a JSON bar array)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pandas as pd

from bb_overlay.config import Config
from bb_overlay.data.bar import BAR_COLUMNS, Bar, bars_to_frame, validate_bar_frame

logger = logging.getLogger(__name__)


class DataStore:
    """Read/write bar files under a data directory."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = data_dir or Config().DATA_DIR
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, symbol: str, suffix: str = "") -> Path:
        return self.data_dir / f"{symbol}{suffix}.parquet"

    def save(self, symbol: str, df: pd.DataFrame) -> Path:
        """Save bars as parquet. Returns the file path."""
        validate_bar_frame(df)
        path = self._path(symbol)
        df[BAR_COLUMNS].to_parquet(path, engine="pyarrow", index=False)
        return path

    def load(self, symbol: str, suffix: str = "") -> pd.DataFrame:
        """Load parquet bars. Raises FileNotFoundError if missing."""
        return self._read_parquet(self._path(symbol, suffix=suffix))

    def exists(self, symbol: str) -> bool:
        """Check whether a parquet file exists for this symbol."""
        return self._path(symbol).exists()

    def load_json(self, path: Path | str) -> pd.DataFrame:
        """Load an ``ohlcv.json`` style array of bar objects.

        Relative paths resolve against the data directory.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the content is not a list of bars or is unordered.
        """
        path = Path(path)
        if not path.is_absolute():
            path = self.data_dir / path
        if not path.exists():
            raise FileNotFoundError(f"No data file at {path}")

        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array of bars in {path}")

        try:
            bars = [Bar.from_dict(item) for item in payload]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed bar in {path}: {exc}") from exc

        df = bars_to_frame(bars)
        validate_bar_frame(df)
        logger.info("Loaded %d bars from %s", len(df), path)
        return df

    def load_file(self, path: Path | str) -> pd.DataFrame:
        """Load bars from a ``.json`` or ``.parquet`` file by extension."""
        path = Path(path)
        if path.suffix == ".json":
            return self.load_json(path)
        if path.suffix == ".parquet":
            if not path.is_absolute():
                path = self.data_dir / path
            return self._read_parquet(path)
        raise ValueError(f"Unsupported bar file type '{path.suffix}'. Use .json or .parquet")

    @staticmethod
    def _read_parquet(path: Path) -> pd.DataFrame:
        if not path.exists():
            raise FileNotFoundError(f"No data file at {path}")
        df = pd.read_parquet(path, engine="pyarrow")
        validate_bar_frame(df)
        return df
