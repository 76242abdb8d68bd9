"""
Series alignment: turn ingested rows into the per-metric series plotted on
one positional x axis.

The x axis is the row index, not time. Rows are assumed to be in ascending
time order and inside one calendar day; neither is checked. A log that runs
past midnight gets negative elapsed labels after the rollover.
"""

from __future__ import annotations

import datetime as dt
from typing import Sequence

from .errors import TimeFormatError
from .models import AlignedSeries, Row
from .rules import TIME_FORMAT, TIME_FORMAT_NO_FRACTION

_DAY = dt.date(1900, 1, 1)
_MICROSECONDS = 1_000_000


def parse_time(text: str) -> dt.time:
    for fmt in (TIME_FORMAT, TIME_FORMAT_NO_FRACTION):
        try:
            return dt.datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise TimeFormatError(f"time {text!r} does not match {TIME_FORMAT}")


def elapsed_seconds(start: dt.time, end: dt.time) -> int:
    """Whole seconds from start to end, truncated toward zero."""
    delta = dt.datetime.combine(_DAY, end) - dt.datetime.combine(_DAY, start)
    micros = delta // dt.timedelta(microseconds=1)
    seconds = abs(micros) // _MICROSECONDS
    return -seconds if micros < 0 else seconds


def format_elapsed(seconds: int) -> str:
    return f"{seconds}s"


def align_series(rows: Sequence[Row]) -> AlignedSeries:
    if not rows:
        return AlignedSeries()

    times = [parse_time(row.time) for row in rows]
    origin = times[0]

    return AlignedSeries(
        x_index=list(range(len(rows))),
        x_label=[format_elapsed(elapsed_seconds(origin, t)) for t in times],
        ram=[row.ram for row in rows],
        cpu=[row.cpu for row in rows],
        gpu=[row.gpu for row in rows],
    )
