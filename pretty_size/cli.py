from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from pretty_size.config import Settings
from pretty_size.edits import load_edits_file
from pretty_size.errors import ConfigError, PrettySizeError
from pretty_size.history import history_path, load_snapshot, save_snapshot, section_deltas
from pretty_size.parsers import load_linker_script, parse_size_listing
from pretty_size.pipeline import report_from_layout
from pretty_size.render import render_report
from pretty_size.size_tool import run_size_tool

LOG = logging.getLogger("cli")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pretty-size",
        description="Show how much of each linker script memory region a firmware image uses.",
    )
    parser.add_argument("elf", metavar="ELF", help="Path to the firmware binary")
    parser.add_argument(
        "-l",
        "--linker-script",
        required=True,
        help="Linker script with the MEMORY block describing the regions",
    )
    parser.add_argument(
        "-e",
        "--edits",
        help="JSON file with GroupRegions/Ignore edits applied before computing usage",
    )
    parser.add_argument(
        "--size-prog",
        default=settings.size_prog,
        help=f"Path to the size program (default: {settings.size_prog})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of the colored table",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Neither read nor write the previous-build size file",
    )
    parser.add_argument(
        "--history-file",
        default=settings.history_file,
        help=f"Name of the size history file next to ELF (default: {settings.history_file})",
    )
    parser.add_argument(
        "--bar-width",
        type=int,
        default=settings.bar_width,
        help=f"Width of the usage bars (default: {settings.bar_width})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help=f"Logging level (default: {settings.log_level})",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        listing = run_size_tool(args.size_prog, args.elf)
        regions = load_linker_script(args.linker_script)
        sections = parse_size_listing(listing)
        edits = load_edits_file(args.edits) if args.edits else []
        report = report_from_layout(
            regions,
            sections,
            edits,
            skip_empty=settings.skip_empty_sections,
            skip_unallocated=settings.skip_unallocated_sections,
        )
    except (PrettySizeError, OSError) as exc:
        LOG.debug("Report failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
        return 0

    deltas = None
    last_file = None
    if not args.no_history:
        last_file = history_path(args.elf, args.history_file)
        deltas = section_deltas(report, load_snapshot(last_file))

    render_report(report, deltas, console=Console(highlight=False), width=args.bar_width)

    if last_file is not None:
        try:
            save_snapshot(last_file, report)
        except OSError as exc:
            print(f"error: couldn't write {last_file}: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
