"""Configuration for the Bollinger Band chart overlay."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
import os

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    DATA_DIR: Path = field(
        default_factory=lambda: Path(
            os.getenv("BB_DATA_DIR") or Path(__file__).resolve().parent.parent / "data"
        )
    )
    DATA_FILE: Optional[str] = field(default_factory=lambda: os.getenv("BB_DATA_FILE"))
    OUTPUT_PATH: Optional[str] = field(default_factory=lambda: os.getenv("BB_OUTPUT_PATH"))

    SAMPLE_SIZE: int = field(default_factory=lambda: int(os.getenv("BB_SAMPLE_SIZE", "250")))
    SAMPLE_SEED: Optional[int] = field(default_factory=lambda: _optional_int("BB_SAMPLE_SEED"))

    # Raw band options, normalized by normalize_options() before use
    BB_LENGTH: Optional[str] = field(default_factory=lambda: os.getenv("BB_LENGTH"))
    BB_SOURCE: Optional[str] = field(default_factory=lambda: os.getenv("BB_SOURCE"))
    BB_STD_DEV: Optional[str] = field(default_factory=lambda: os.getenv("BB_STD_DEV"))
    BB_OFFSET: Optional[str] = field(default_factory=lambda: os.getenv("BB_OFFSET"))

    @property
    def output_file(self) -> Path:
        """Return where the rendered chart page is written."""
        if self.OUTPUT_PATH:
            return Path(self.OUTPUT_PATH)
        return self.DATA_DIR / "chart.html"

    def band_options_raw(self) -> dict[str, object]:
        """Return band options from the environment as unnormalized values."""
        raw: dict[str, object] = {}
        if self.BB_LENGTH:
            raw["length"] = float(self.BB_LENGTH)
        if self.BB_SOURCE:
            raw["source"] = self.BB_SOURCE.strip().lower()
        if self.BB_STD_DEV:
            raw["std_dev_multiplier"] = float(self.BB_STD_DEV)
        if self.BB_OFFSET:
            raw["offset"] = float(self.BB_OFFSET)
        return raw

    def validate(self) -> None:
        """Raise if settings are out of range."""
        if self.SAMPLE_SIZE < 0:
            raise ValueError(f"BB_SAMPLE_SIZE must be >= 0, got {self.SAMPLE_SIZE}")
        if self.DATA_FILE and not Path(self.DATA_FILE).suffix:
            raise ValueError(f"BB_DATA_FILE needs a .json or .parquet suffix, got {self.DATA_FILE}")
