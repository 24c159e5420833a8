"""Build Plotly candlestick chart JSON with the Bollinger Band overlay."""

from __future__ import annotations

import logging
from typing import Any, Optional

import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio

from bb_overlay.indicators.bollinger import compute_bollinger_bands
from bb_overlay.reporting.chart_style import BandStyle, ChartState

logger = logging.getLogger(__name__)


def _plot_values(series: pd.Series) -> list[Optional[float]]:
    """Series to plot values; undefined points become gaps."""
    return [None if pd.isna(v) else float(v) for v in series]


class ChartBuilder:
    """Create Plotly chart JSON from bars and a chart state."""

    PLOTLY_CONFIG = {"displayModeBar": True, "responsive": True}

    UP_COLOR = "#26A69A"
    DOWN_COLOR = "#EF5350"
    GRID_COLOR = "#393939"

    # ------------------------------------------------------------------
    # Candles + bands
    # ------------------------------------------------------------------

    def bollinger_chart(
        self,
        bars: pd.DataFrame,
        state: ChartState,
        title: str = "Bollinger Bands",
        bands: Optional[pd.DataFrame] = None,
    ) -> str:
        """Build the candlestick chart, with bands when enabled. Returns Plotly JSON string.

        *bands* is a precomputed band frame for *bars*; when None and the
        overlay is on, it is computed here via :meth:`compute_overlay`.
        """
        x = [ts.isoformat() for ts in pd.to_datetime(bars["timestamp"], unit="ms")]

        fig = go.Figure()
        fig.add_trace(go.Candlestick(
            x=x,
            open=bars["open"].tolist(), high=bars["high"].tolist(),
            low=bars["low"].tolist(), close=bars["close"].tolist(),
            name="Price",
            increasing=dict(line=dict(color=self.UP_COLOR), fillcolor=self.UP_COLOR),
            decreasing=dict(line=dict(color=self.DOWN_COLOR), fillcolor=self.DOWN_COLOR),
        ))

        if state.show_bands and len(bars):
            if bands is None:
                bands = self.compute_overlay(bars, state)
            if bands is not None:
                for trace in self._band_traces(x, bands, state):
                    fig.add_trace(trace)

        fig.update_layout(
            title=title,
            xaxis_title="Date",
            yaxis_title="Price",
            template="plotly_dark",
            height=500,
            margin=dict(l=50, r=20, t=50, b=40),
            xaxis_rangeslider_visible=False,
            legend=dict(orientation="h", y=1.08),
        )
        fig.update_xaxes(gridcolor=self.GRID_COLOR, griddash="dash")
        fig.update_yaxes(gridcolor=self.GRID_COLOR, griddash="dash")
        return pio.to_json(fig)

    # ------------------------------------------------------------------
    # Overlay traces
    # ------------------------------------------------------------------

    def _band_traces(
        self, x: list[str], bands: pd.DataFrame, state: ChartState,
    ) -> list[go.Scatter]:
        style = state.style
        traces: list[go.Scatter] = []

        upper = _plot_values(bands["upper"])
        lower = _plot_values(bands["lower"])

        if style.fill.visible:
            # Invisible upper edge, then lower edge filled up to it
            traces.append(go.Scatter(
                x=x, y=upper,
                mode="lines",
                line=dict(width=0),
                showlegend=False,
                hoverinfo="skip",
                name="fill_upper",
            ))
            traces.append(go.Scatter(
                x=x, y=lower,
                mode="lines",
                line=dict(width=0),
                fill="tonexty",
                fillcolor=style.fill.rgba,
                showlegend=False,
                hoverinfo="skip",
                name="fill_lower",
            ))

        series = {"upper": upper, "basis": _plot_values(bands["basis"]), "lower": lower}
        labels = {"upper": "UP", "basis": "MID", "lower": "DN"}
        for key in ("upper", "basis", "lower"):
            band_style: BandStyle = getattr(style, key)
            if not band_style.visible:
                continue
            traces.append(go.Scatter(
                x=x, y=series[key],
                mode="lines",
                name=labels[key],
                line=dict(
                    color=band_style.color,
                    width=band_style.line_width,
                    dash=band_style.dash,
                ),
            ))

        return traces

    def compute_overlay(self, bars: pd.DataFrame, state: ChartState) -> Optional[pd.DataFrame]:
        """Band frame for *bars*, or None (logged) when the computation fails."""
        try:
            return compute_bollinger_bands(bars, state.options)
        except ValueError as exc:
            logger.error("Band computation failed, showing candles only: %s", exc)
            return None

    @staticmethod
    def band_summary(bands: Optional[pd.DataFrame]) -> dict[str, Any]:
        """Latest defined band values, for the settings panel."""
        defined = bands.dropna() if bands is not None else None
        if defined is None or defined.empty:
            return {"basis": None, "upper": None, "lower": None}
        last = defined.iloc[-1]
        return {col: round(float(last[col]), 2) for col in ("basis", "upper", "lower")}
