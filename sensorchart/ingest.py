"""
Column-indexed CSV ingestion.

Fields are picked by position (models.ColumnMap), never by header name.
Header records repeated inside the log are recognised by the value in the
time column and skipped, as are trailer records with an empty time.
"""

from __future__ import annotations

import csv
import enum
import logging
import os
from typing import Iterable, List, Sequence, Union

from .errors import MalformedRecordError
from .models import ColumnMap, Row
from .rules import HEADER_TOKEN

logger = logging.getLogger(__name__)


class RecordKind(enum.Enum):
    HEADER = "header"
    BLANK = "blank"
    DATA = "data"


def _field(record: Sequence[str], index: int, name: str, line: int | None) -> str:
    try:
        return record[index]
    except IndexError:
        where = f"line {line}: " if line is not None else ""
        raise MalformedRecordError(
            f"{where}record has {len(record)} fields, {name} column is {index}"
        ) from None


def classify_record(record: Sequence[str], columns: ColumnMap, line: int | None = None) -> RecordKind:
    if not record:
        return RecordKind.BLANK

    time = _field(record, columns.time, "time", line)
    if time == HEADER_TOKEN:
        return RecordKind.HEADER
    if time == "":
        return RecordKind.BLANK
    return RecordKind.DATA


def _number(record: Sequence[str], index: int, name: str, line: int | None) -> float:
    value = _field(record, index, name, line)
    try:
        return float(value)
    except ValueError:
        where = f"line {line}: " if line is not None else ""
        raise MalformedRecordError(f"{where}{name} value {value!r} is not a number") from None


def parse_record(record: Sequence[str], columns: ColumnMap, line: int | None = None) -> Row:
    return Row(
        time=_field(record, columns.time, "time", line),
        ram=_number(record, columns.ram, "ram", line),
        cpu=_number(record, columns.cpu, "cpu", line),
        gpu=_number(record, columns.gpu, "gpu", line),
    )


def _log_header(record: Sequence[str], columns: ColumnMap, line: int) -> None:
    logger.info("header record at line %d", line)
    logger.info("Time column: %r", _field(record, columns.time, "time", line))
    logger.info("RAM column: %r", _field(record, columns.ram, "ram", line))
    logger.info("CPU column: %r", _field(record, columns.cpu, "cpu", line))
    logger.info("GPU column: %r", _field(record, columns.gpu, "gpu", line))


def read_rows(lines: Iterable[str], columns: ColumnMap) -> List[Row]:
    """Parse CSV text lines into rows, in file order."""
    rows: List[Row] = []
    reader = csv.reader(lines)

    try:
        for record in reader:
            line = reader.line_num
            kind = classify_record(record, columns, line)

            if kind is RecordKind.HEADER:
                _log_header(record, columns, line)
                continue
            if kind is RecordKind.BLANK:
                continue

            rows.append(parse_record(record, columns, line))
    except csv.Error as exc:
        raise MalformedRecordError(f"line {reader.line_num}: {exc}") from exc

    return rows


def read_csv_file(path: Union[str, os.PathLike], columns: ColumnMap) -> List[Row]:
    """
    Read all rows from a UTF-8 CSV file, with or without a byte order mark.

    A missing file is not an error: it is reported and yields no rows.
    """
    try:
        fh = open(path, "r", encoding="utf-8-sig", newline="")
    except FileNotFoundError:
        logger.warning("File not found: %s", os.fspath(path))
        return []
    except OSError as exc:
        raise MalformedRecordError(f"cannot read {os.fspath(path)}: {exc}") from exc

    with fh:
        try:
            rows = read_rows(fh, columns)
        except UnicodeDecodeError as exc:
            raise MalformedRecordError(f"{os.fspath(path)} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise MalformedRecordError(f"cannot read {os.fspath(path)}: {exc}") from exc

    logger.debug("read %d rows from %s", len(rows), os.fspath(path))
    return rows
