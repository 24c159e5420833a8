"""Generate the HTML band chart."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

import pandas as pd
from tabulate import tabulate

from bb_overlay.config import Config
from bb_overlay.data.data_store import DataStore
from bb_overlay.data.sample_data import generate_sample_bars
from bb_overlay.indicators.band_options import BandOptions, normalize_options
from bb_overlay.reporting.chart_style import DEFAULT_STYLE, BollingerStyle, ChartState
from bb_overlay.reporting.html_renderer import HTMLRenderer

logger = logging.getLogger(__name__)


def load_bars(config: Config) -> pd.DataFrame:
    """Load bars from the configured file, falling back to sample data.

    A missing or malformed file is logged, not raised.
    """
    if config.DATA_FILE:
        store = DataStore(config.DATA_DIR)
        try:
            return store.load_file(config.DATA_FILE)
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Error loading data from %s: %s", config.DATA_FILE, exc)
            logger.info("Falling back to %d generated sample bars", config.SAMPLE_SIZE)

    return generate_sample_bars(config.SAMPLE_SIZE, seed=config.SAMPLE_SEED)


def settings_table(options: BandOptions, latest: Optional[Mapping[str, Any]] = None) -> str:
    """Render the current settings (and latest band values) as a text table."""
    rows = [
        ["Length", options.length],
        ["Source", options.source.capitalize()],
        ["Std Dev", options.std_dev_multiplier],
        ["Offset", options.offset],
        ["MA Type", options.ma_type],
    ]
    if latest:
        for key in ("upper", "basis", "lower"):
            value = latest.get(key)
            rows.append([key.capitalize(), "N/A" if value is None else value])
    return tabulate(rows, headers=["Setting", "Value"], tablefmt="grid")


def generate_chart(
    output_path: Optional[str] = None,
    config: Optional[Config] = None,
    raw_options: Optional[Mapping[str, Any]] = None,
    style: Optional[BollingerStyle] = None,
    show_bands: bool = True,
) -> Path:
    """Load bars, compute bands, render the HTML chart page.

    Args:
        output_path: Where to save. Defaults to ``config.output_file``.
        config: Optional Config override.
        raw_options: Unnormalized band options. Defaults to the ``BB_*``
            environment settings.
        style: Overlay style. Defaults to :data:`DEFAULT_STYLE`.
        show_bands: Whether the overlay is drawn.

    Returns:
        Path to the generated page.
    """
    cfg = config or Config()
    cfg.validate()
    out = Path(output_path) if output_path else cfg.output_file

    options = normalize_options(cfg.band_options_raw() if raw_options is None else raw_options)
    state = ChartState(show_bands=show_bands, options=options, style=style or DEFAULT_STYLE)

    bars = load_bars(cfg)
    logger.info("Rendering chart for %d bars...", len(bars))

    renderer = HTMLRenderer()
    bands = renderer.chart_builder.compute_overlay(bars, state) if show_bands else None
    latest = renderer.chart_builder.band_summary(bands) if show_bands else None
    html = renderer.render(
        bars,
        state,
        generated_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        latest=latest,
        bands=bands,
    )

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    logger.info("Band settings:\n%s", settings_table(options, latest))
    logger.info("Chart saved to %s", out)

    return out


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    generate_chart()
