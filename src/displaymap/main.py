"""
Application Entry
=================
Builds the virtual -> physical lookup tables and hands them to a writer.

Why is this file needed?
------------------------
It is the composition root. It:
1. Parses the command line into a MappingConfig.
2. Sets up logging.
3. Generates (or loads) the sample grids and resolves the inverse map.
4. Prints or writes the literal arrays and the region report.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Optional, Sequence

from displaymap.config import DEFAULT_METHOD, DEFAULT_SMOOTHNESS, MappingConfig
from displaymap.analysis.interpolation import INTERPOLATION_METHODS
from displaymap.controller.pipeline import MappingTables, generate_tables, resolve_tables
from displaymap.logging_config import setup_logging
from displaymap.model.io import LITERAL_FORMATS, TableWriter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="displaymap",
        description="Generate lookup tables mapping the CHIP-8 screen onto the PineTime display.",
    )
    parser.add_argument("--method", choices=sorted(INTERPOLATION_METHODS), default=DEFAULT_METHOD,
                        help="Interpolation method over the calibration data.")
    parser.add_argument("--smoothness", type=float, default=DEFAULT_SMOOTHNESS,
                        help="Smoothness factor of Sibson's C1 interpolation.")
    parser.add_argument("--floor", action="store_true",
                        help="Store floored values in the sample grids.")
    parser.add_argument("--language", choices=sorted(LITERAL_FORMATS), default="rust",
                        help="Language of the emitted literal arrays.")
    parser.add_argument("--output", metavar="FILE",
                        help="Write the tables to FILE instead of stdout.")
    parser.add_argument("--save", metavar="FILE.h5",
                        help="Also store the sample grids in an HDF5 file.")
    parser.add_argument("--load", metavar="FILE.h5",
                        help="Resolve from sample grids stored by --save; skips sampling.")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", metavar="FILE")
    return parser


def render_tables(tables: MappingTables, language: str) -> list[str]:
    return [
        TableWriter.format_grid(tables.x_grid, "X_VIRTUAL_GRID", language=language),
        TableWriter.format_grid(tables.y_grid, "Y_VIRTUAL_GRID", language=language),
        TableWriter.format_region_report(tables.region_map),
    ]


def run(args: argparse.Namespace) -> MappingTables:
    config = MappingConfig(
        method=args.method,
        smoothness=args.smoothness,
        floor_values=args.floor,
    )

    if args.load:
        if args.method != DEFAULT_METHOD or args.smoothness != DEFAULT_SMOOTHNESS:
            logger.warning("--method and --smoothness are ignored with --load; the stored grids are used as sampled.")
        x_grid, y_grid, physical = TableWriter.load_tables(args.load)
        config = dataclasses.replace(config, physical=physical)
        tables = resolve_tables(config, x_grid, y_grid)
    else:
        tables = generate_tables(config)

    if args.save:
        TableWriter.save_tables(args.save, tables.x_grid, tables.y_grid, config.physical)

    sections = render_tables(tables, args.language)
    if args.output:
        TableWriter.write_text(args.output, sections)
    else:
        print("\n\n".join(sections))
    return tables


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        run(args)
    except (ValueError, OSError) as e:
        logger.error(f"Table generation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
