"""Interactive capture timeline rendering using Plotly."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import plotly.express as px

from pcapcodec.format.header import TimestampUnit
from pcapcodec.format.record import Record
from pcapcodec.logging_utils import get_logger
from pcapcodec.reader import CaptureReader

LOGGER = get_logger(__name__)


def _to_plot_rows(records: Iterable[Record], unit: TimestampUnit) -> List[dict]:
    rows: List[dict] = []
    for index, record in enumerate(records):
        rows.append(
            {
                "index": index,
                "timestamp": record.timestamp(unit),
                "captured_length": record.captured_length,
                "original_length": record.original_length,
                "status": "truncated" if record.is_truncated else "complete",
            }
        )
    return rows


def render(capture_path: str | Path, output_dir: str | Path | None = None) -> Path:
    """Render captured record sizes over time into an interactive timeline."""

    capture_file = Path(capture_path)
    with capture_file.open("rb") as handle:
        reader = CaptureReader(handle)
        rows = _to_plot_rows(reader, reader.header.timestamp_unit)

    target_dir = Path(output_dir) if output_dir else capture_file.parent
    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / "timeline.html"

    if not rows:
        html = """
        <!DOCTYPE html>
        <html lang=\"en\">
        <head><meta charset=\"utf-8\"><title>pcapcodec timeline</title></head>
        <body><h1>pcapcodec timeline</h1><p>No records available.</p></body>
        </html>
        """
        output_path.write_text(html, encoding="utf-8")
        LOGGER.info("No records available in %s; wrote placeholder timeline to %s", capture_path, output_path)
        return output_path

    fig = px.scatter(
        rows,
        x="timestamp",
        y="captured_length",
        color="status",
        hover_data={
            "index": True,
            "timestamp": True,
            "captured_length": True,
            "original_length": True,
        },
        category_orders={"status": ["complete", "truncated"]},
        labels={"timestamp": "Timestamp (s)", "captured_length": "Captured bytes"},
        title="pcapcodec timeline",
    )

    fig.update_layout(legend_title_text="Record", hovermode="closest")

    fig.write_html(output_path, include_plotlyjs="cdn", full_html=True)
    LOGGER.info("Wrote timeline with %s points to %s", len(rows), output_path)

    return output_path


__all__ = ["render"]
