"""Bollinger Band parameters and their normalization from raw user input."""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass
from typing import Any, Mapping

PRICE_SOURCES = ("open", "high", "low", "close")
MA_TYPES = ("SMA",)

MIN_LENGTH = 1
MIN_STD_DEV_MULTIPLIER = 0.1


@dataclass(frozen=True)
class BandOptions:
    """Parameters for one band computation.

    Attributes:
        length: Window size in bars.
        source: Bar field feeding the statistics.
        std_dev_multiplier: Number of standard deviations between basis and band.
        offset: Bars to shift the output; positive moves it later in time.
        ma_type: Moving average type. Only ``"SMA"`` exists.
    """

    length: int = 20
    source: str = "close"
    std_dev_multiplier: float = 2.0
    offset: int = 0
    ma_type: str = "SMA"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any parameter is outside its valid range."""
        if isinstance(self.length, bool) or not isinstance(self.length, numbers.Integral):
            raise ValueError(f"length must be an integer, got {self.length!r}")
        if self.length < MIN_LENGTH:
            raise ValueError(f"length must be >= {MIN_LENGTH}, got {self.length}")
        if self.source not in PRICE_SOURCES:
            raise ValueError(
                f"Unknown source '{self.source}'. Available: {list(PRICE_SOURCES)}"
            )
        if not isinstance(self.std_dev_multiplier, numbers.Real) or not math.isfinite(
            self.std_dev_multiplier
        ):
            raise ValueError(
                f"std_dev_multiplier must be a finite number, got {self.std_dev_multiplier!r}"
            )
        if self.std_dev_multiplier <= 0:
            raise ValueError(
                f"std_dev_multiplier must be > 0, got {self.std_dev_multiplier}"
            )
        if isinstance(self.offset, bool) or not isinstance(self.offset, numbers.Integral):
            raise ValueError(f"offset must be an integer, got {self.offset!r}")
        if self.ma_type not in MA_TYPES:
            raise ValueError(
                f"Unsupported ma_type '{self.ma_type}'. Available: {list(MA_TYPES)}"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_BAND_OPTIONS = BandOptions()


def _number_or_default(value: Any, default: float) -> float:
    """Coerce form input to float; empty, zero or non-numeric input takes *default*."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number == 0 or math.isnan(number):
        return default
    return number


def normalize_options(raw: Mapping[str, Any] | None = None) -> BandOptions:
    """Coerce raw settings into a valid :class:`BandOptions`.

    This is the clamping done by the settings form, not by the engine:
    missing or zero values take the defaults, ``length`` is floored and
    kept >= 1, the multiplier is kept >= 0.1 and ``offset`` is floored.
    ``stdDevMultiplier`` is accepted as an alias of ``std_dev_multiplier``.

    Raises:
        ValueError: If ``source`` names an unknown bar field.
    """
    raw = raw or {}
    defaults = DEFAULT_BAND_OPTIONS

    length = _number_or_default(raw.get("length"), defaults.length)
    multiplier = _number_or_default(
        raw.get("std_dev_multiplier", raw.get("stdDevMultiplier")),
        defaults.std_dev_multiplier,
    )
    offset = _number_or_default(raw.get("offset"), defaults.offset)
    source = raw.get("source") or defaults.source

    # inf survives the clamps below but not the floors
    if math.isinf(length):
        length = defaults.length
    if math.isinf(offset):
        offset = defaults.offset
    if math.isinf(multiplier):
        multiplier = defaults.std_dev_multiplier

    return BandOptions(
        length=max(MIN_LENGTH, math.floor(length)),
        source=str(source).lower(),
        std_dev_multiplier=max(MIN_STD_DEV_MULTIPLIER, multiplier),
        offset=math.floor(offset),
        ma_type="SMA",
    )
