#!/usr/bin/env python3
"""
Render one half of the trackball case.

    trackball-forge -D part=top_case
    trackball-forge -D part=bottom_case -D wall_thickness=2.5 -o base.stl
    trackball-forge -D part=top_case --format svg

`part` selects the half; every other define overrides a case dimension.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import trimesh

from .export import FORMATS, UnsupportedFormat, render
from .models import REGISTRY, get_builder
from .models._helpers import GeometryError
from .params import DEFAULTS, CaseParams, ParameterError, as_params

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PARTS = ("top_case", "bottom_case")
NO_PART_MESSAGE = (
    'No part selected. Set part to "top_case" or "bottom_case" '
    "(e.g. -D part=top_case)."
)

EXIT_OK = 0
EXIT_NOTHING = 1
EXIT_USAGE = 2
EXIT_GEOMETRY = 3

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def select_part(
    part: Optional[str],
    params: CaseParams | Mapping[str, Any] | None = None,
) -> Optional[trimesh.Trimesh]:
    """
    Build the selected half.

    No selector: writes `NO_PART_MESSAGE` to stderr once and returns None.
    Any value other than the exact names in `PARTS` (aliases included)
    returns None without a message.
    """
    if not part:
        print(NO_PART_MESSAGE, file=sys.stderr)
        return None
    if part not in PARTS:
        return None
    return get_builder(part)(as_params(params))


def _parse_define(raw: str) -> Tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {raw!r}")
    # OpenSCAD style -D 'part="top_case"'
    return name.strip(), value.strip().strip("\"'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trackball-forge",
        description="Render the top or bottom half of the trackball case.",
    )
    parser.add_argument(
        "-D", "--define",
        dest="defines",
        action="append",
        type=_parse_define,
        default=[],
        metavar="NAME=VALUE",
        help="part=top_case|bottom_case, or override a dimension (repeatable)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="output file (default: <part>.<format> in the current directory)",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="output format (default: from the output suffix, else stl)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv("FORGE_LOG_LEVEL", "INFO").upper(),
        help="logging level (default: $FORGE_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="list parts and default dimensions, then exit",
    )
    return parser


def _print_listing() -> None:
    print("parts:", ", ".join(sorted(REGISTRY)))
    for name, value in DEFAULTS.items():
        print(f"  {name} = {value}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # defaults (FORGE_LOG_LEVEL) bypass `choices`
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    if args.list:
        _print_listing()
        return EXIT_OK

    defines: Dict[str, str] = dict(args.defines)
    part = defines.pop("part", None)

    fmt = args.format
    if fmt is None:
        suffix = args.output.suffix.lstrip(".").lower() if args.output else ""
        fmt = suffix if suffix in FORMATS else "stl"

    unknown: List[str] = [k for k in defines if k.lower().replace("-", "_") not in DEFAULTS]
    if unknown:
        logger.warning("ignoring unknown defines: %s", ", ".join(sorted(unknown)))

    if not part:
        select_part(part)
        return EXIT_NOTHING

    if part not in PARTS:
        logger.error("unknown part %r (expected one of: %s)", part, ", ".join(PARTS))
        return EXIT_NOTHING

    try:
        out = render(part, defines, fmt)
    except (ParameterError, UnsupportedFormat) as e:
        logger.error("%s", e)
        return EXIT_USAGE
    except GeometryError as e:
        logger.error("could not build %s: %s", part, e)
        return EXIT_GEOMETRY

    path = args.output or Path(out.filename)
    path.write_bytes(out.data)
    logger.info("wrote %s (%d bytes)", path, len(out.data))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
