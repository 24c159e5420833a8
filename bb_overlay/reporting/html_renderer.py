"""Render the band chart into a self-contained HTML page."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from bb_overlay.reporting.chart_builder import ChartBuilder
from bb_overlay.reporting.chart_style import ChartState

TEMPLATE_DIR = Path(__file__).parent / "templates"


class HTMLRenderer:
    """Render bars + chart state into a single HTML file."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.chart_builder = ChartBuilder()

    def render(
        self,
        bars: Any,
        state: ChartState,
        generated_at: str = "",
        title: str = "Bollinger Bands Chart",
        latest: Optional[dict[str, Any]] = None,
        bands: Any = None,
    ) -> str:
        """Produce the full HTML string.

        Args:
            bars: Bar DataFrame to plot.
            state: Overlay visibility, options and style.
            generated_at: Timestamp shown in the footer.
            title: Page heading.
            latest: Latest band values for the settings panel, if known.
            bands: Band frame already computed for *bars*, if any.

        Returns:
            Complete HTML string.
        """
        chart_json = Markup(self.chart_builder.bollinger_chart(bars, state, title=title, bands=bands))

        template = self.env.get_template("chart.html")
        return template.render(
            title=title,
            chart_json=chart_json,
            plotly_config=self.chart_builder.PLOTLY_CONFIG,
            show_bands=state.show_bands,
            options=state.options,
            bar_count=len(bars),
            latest=latest,
            generated_at=generated_at,
        )
