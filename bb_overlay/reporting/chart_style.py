"""Visual style and view state for the band overlay."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field, replace

from bb_overlay.indicators.band_options import DEFAULT_BAND_OPTIONS, BandOptions

LINE_STYLES = ("solid", "dashed")

# Plotly line.dash values
_DASH = {"solid": "solid", "dashed": "dash"}


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color[1:] if color.startswith("#") else ""
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    try:
        if len(value) != 6:
            raise ValueError
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    except ValueError:
        raise ValueError(f"Expected a #RRGGBB colour, got '{color}'") from None


@dataclass(frozen=True)
class BandStyle:
    """Line style for one band."""

    visible: bool = True
    color: str = "#FF9800"
    line_width: float = 1
    line_style: str = "solid"

    def __post_init__(self) -> None:
        if self.line_style not in LINE_STYLES:
            raise ValueError(
                f"Unknown line_style '{self.line_style}'. Available: {list(LINE_STYLES)}"
            )
        if (
            isinstance(self.line_width, bool)
            or not isinstance(self.line_width, numbers.Real)
            or not self.line_width > 0
        ):
            raise ValueError(f"line_width must be > 0, got {self.line_width!r}")
        _hex_to_rgb(self.color)

    @property
    def dash(self) -> str:
        return _DASH[self.line_style]


@dataclass(frozen=True)
class FillStyle:
    """Background fill between the upper and lower band."""

    visible: bool = True
    opacity: float = 0.1
    color: str = "#FF9800"

    def __post_init__(self) -> None:
        if not 0 <= self.opacity <= 1:
            raise ValueError(f"opacity must be within [0, 1], got {self.opacity}")
        _hex_to_rgb(self.color)

    @property
    def rgba(self) -> str:
        r, g, b = _hex_to_rgb(self.color)
        return f"rgba({r}, {g}, {b}, {self.opacity})"


@dataclass(frozen=True)
class BollingerStyle:
    """Complete overlay style."""

    basis: BandStyle = field(default_factory=lambda: BandStyle(color="#2196F3"))
    upper: BandStyle = field(default_factory=BandStyle)
    lower: BandStyle = field(default_factory=BandStyle)
    fill: FillStyle = field(default_factory=FillStyle)

    def with_band(self, name: str, **changes) -> "BollingerStyle":
        """Return a copy with one band's style changed."""
        if name not in ("basis", "upper", "lower"):
            raise ValueError(f"Unknown band '{name}'")
        return replace(self, **{name: replace(getattr(self, name), **changes)})


DEFAULT_STYLE = BollingerStyle()


@dataclass(frozen=True)
class ChartState:
    """Snapshot of everything the chart view needs besides the bars."""

    show_bands: bool = False
    options: BandOptions = DEFAULT_BAND_OPTIONS
    style: BollingerStyle = DEFAULT_STYLE

    def toggled(self) -> "ChartState":
        return replace(self, show_bands=not self.show_bands)
