"""
End-to-end runs: normalize → ingest → align → render.

Every stage either completes or raises a PipelineError; nothing is retried.
"""

from __future__ import annotations

import io
import logging
import os
from typing import Union

from .align import align_series
from .ingest import read_csv_file, read_rows
from .models import DEFAULT_STYLE, HWINFO_COLUMNS, ChartStyle, ColumnMap, PipelineResult
from .normalize import convert_to_utf8, transcode_to_utf8
from .render import create_chart
from .rules import TARGET_ENCODING

logger = logging.getLogger(__name__)


def run(
    input_path: Union[str, os.PathLike],
    output_path: Union[str, os.PathLike],
    columns: ColumnMap = HWINFO_COLUMNS,
    style: ChartStyle = DEFAULT_STYLE,
    normalize: bool = True,
) -> PipelineResult:
    encoding = None
    # A missing file is left to the ingestor, which reports it and yields no rows.
    if normalize and os.path.exists(input_path):
        encoding = convert_to_utf8(input_path)

    rows = read_csv_file(input_path, columns)
    series = align_series(rows)
    logger.info("aligned %d rows", len(series))

    create_chart(series, output_path, style)

    return PipelineResult(
        input_path=os.fspath(input_path),
        output_path=os.fspath(output_path),
        rows=len(series),
        first_label=series.x_label[0] if len(series) else None,
        last_label=series.x_label[-1] if len(series) else None,
        encoding=encoding,
    )


def render_csv_bytes(
    raw: bytes,
    columns: ColumnMap = HWINFO_COLUMNS,
    style: ChartStyle = DEFAULT_STYLE,
) -> bytes:
    """Same pipeline as run(), in memory. Returns PNG bytes."""
    encoded, _ = transcode_to_utf8(raw)
    text = encoded.decode(TARGET_ENCODING)

    rows = read_rows(io.StringIO(text, newline=""), columns)
    series = align_series(rows)

    out = io.BytesIO()
    create_chart(series, out, style)
    return out.getvalue()
