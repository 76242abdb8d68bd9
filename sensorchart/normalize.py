"""
Encoding normalization for sensor log exports.

HWiNFO writes its CSV in Windows-1252. Everything downstream reads UTF-8, so
the file is transcoded once, in place, before ingestion.

The rewrite is destructive and is not idempotent for non-ASCII text: running
it on a file that is already UTF-8 decodes each multi-byte sequence as
several Windows-1252 characters. ASCII-only files come out byte-identical.
Files that start with a byte order mark are the exception: they are decoded
in the encoding the mark names, and the mark is dropped.
"""

from __future__ import annotations

import codecs
import hashlib
import logging
import os
from typing import Tuple, Union

from charset_normalizer import from_bytes

from .errors import NormalizationError
from .models import EncodingReport
from .rules import SOURCE_ENCODING, TARGET_ENCODING

logger = logging.getLogger(__name__)

# A byte order mark overrides the Windows-1252 default, as in the WHATWG decoder.
_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def _c1_table() -> dict:
    # Latin-1 maps 0x80-0x9F to the C1 controls; Windows-1252 puts printable
    # characters on all of them except 0x81, 0x8D, 0x8F, 0x90 and 0x9D, which
    # stay as C1 controls.
    table = {}
    for b in range(0x80, 0xA0):
        try:
            table[b] = bytes([b]).decode(SOURCE_ENCODING)
        except UnicodeDecodeError:
            continue
    return table


_CP1252_FROM_LATIN1 = _c1_table()


def _sniff_bom(raw: bytes) -> Tuple[str, int] | None:
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return encoding, len(bom)
    return None


def decode_source(raw: bytes) -> Tuple[str, str]:
    """Return (text, encoding used). Never fails on content."""
    sniffed = _sniff_bom(raw)
    if sniffed is not None:
        encoding, skip = sniffed
        return raw[skip:].decode(encoding, errors="replace"), encoding
    return raw.decode("latin-1").translate(_CP1252_FROM_LATIN1), SOURCE_ENCODING


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _detect(raw: bytes) -> str | None:
    match = from_bytes(raw).best()
    if match is None:
        return None
    return match.encoding


def transcode_to_utf8(raw: bytes) -> tuple[bytes, EncodingReport]:
    """
    Decode raw bytes as Windows-1252 and re-encode them as UTF-8.

    A leading UTF-8 or UTF-16 byte order mark selects that encoding instead
    and is dropped from the output. Never fails on content: every byte value
    has a mapping.
    """
    non_ascii = any(b > 0x7F for b in raw)
    text, source = decode_source(raw)
    detected = _detect(raw) if non_ascii else "ascii"

    if source == SOURCE_ENCODING and non_ascii and detected is not None \
            and detected.lower().replace("-", "_") in ("utf_8", "utf8"):
        logger.warning(
            "input already looks like UTF-8; decoding it as %s will garble non-ASCII characters",
            SOURCE_ENCODING,
        )

    encoded = text.encode(TARGET_ENCODING)

    report = EncodingReport(
        source=source,
        output=TARGET_ENCODING,
        bytes_in=len(raw),
        bytes_out=len(encoded),
        non_ascii=non_ascii,
        detected=detected,
        sha256=_sha256_hex(encoded),
    )
    return encoded, report


def convert_to_utf8(path: Union[str, os.PathLike]) -> EncodingReport:
    """
    Rewrite the file at `path` from Windows-1252 to UTF-8.

    The whole file is read and transcoded before it is opened for writing, so
    a failure before the write leaves the original untouched.
    """
    try:
        with open(path, "rb") as fh:
            raw = fh.read()
    except OSError as exc:
        raise NormalizationError(f"cannot read {os.fspath(path)}: {exc}") from exc

    encoded, report = transcode_to_utf8(raw)

    try:
        with open(path, "wb") as fh:
            fh.write(encoded)
    except OSError as exc:
        raise NormalizationError(f"cannot write {os.fspath(path)}: {exc}") from exc

    logger.debug(
        "normalized %s: %d -> %d bytes (detected %s)",
        os.fspath(path), report.bytes_in, report.bytes_out, report.detected,
    )
    return report
