"""Command line entry point: sensorchart [INPUT] [-o OUTPUT] ..."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .errors import PipelineError
from .models import COLUMN_PRESETS, DEFAULT_STYLE, ChartStyle, ColumnMap
from .pipeline import run
from .rules import DEFAULT_INPUT_PATH, DEFAULT_OUTPUT_PATH

logger = logging.getLogger("sensorchart")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="sensorchart",
        description="Render a sensor log CSV (e.g. HWiNFO64) as a RAM/CPU/GPU usage chart.",
    )
    ap.add_argument("input", nargs="?", default=DEFAULT_INPUT_PATH,
                    help=f"CSV log, rewritten in place as UTF-8 (default: {DEFAULT_INPUT_PATH})")
    ap.add_argument("-o", "--output", default=DEFAULT_OUTPUT_PATH,
                    help=f"PNG to write (default: {DEFAULT_OUTPUT_PATH})")
    ap.add_argument("--preset", choices=sorted(COLUMN_PRESETS), default="hwinfo",
                    help="column layout (default: hwinfo)")
    for name in ("time", "ram", "cpu", "gpu"):
        ap.add_argument(f"--{name}", type=int, metavar="N",
                        help=f"zero-based {name} column, overrides the preset")
    ap.add_argument("--no-normalize", action="store_true",
                    help="input is already UTF-8, do not rewrite it")
    ap.add_argument("--font-family", default=DEFAULT_STYLE.font_family)
    ap.add_argument("--font-size", type=int, default=DEFAULT_STYLE.font_size, help="pixels")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def resolve_columns(args: argparse.Namespace) -> ColumnMap:
    preset = COLUMN_PRESETS[args.preset]
    overrides = {
        name: getattr(args, name)
        for name in ("time", "ram", "cpu", "gpu")
        if getattr(args, name) is not None
    }
    return preset.model_copy(update=overrides) if overrides else preset


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        columns = ColumnMap.model_validate(resolve_columns(args).model_dump())
    except ValueError as exc:
        logger.error("invalid column map: %s", exc)
        return 2

    try:
        style = ChartStyle.model_validate(
            {**DEFAULT_STYLE.model_dump(), "font_family": args.font_family, "font_size": args.font_size}
        )
    except ValueError as exc:
        logger.error("invalid chart style: %s", exc)
        return 2

    try:
        result = run(args.input, args.output, columns, style, normalize=not args.no_normalize)
    except PipelineError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("%d rows plotted (%s .. %s) -> %s",
                result.rows, result.first_label, result.last_label, result.output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
