#!/usr/bin/env python
"""
Photo Mover - Command Line Interface
====================================

Moves photos and videos from a source directory into a date-organised
destination tree (<destination>/<YYYY>/<YYYY_MM_DD>/<name>).

Usage:
    python -m move_photos SOURCE DESTINATION [options]

    # Preview only (nothing is moved or deleted)
    python -m move_photos ./camera_dump ./Photos --dry-run

    # Use path, EXIF and sibling strategies, ask about conflicting dates
    python -m move_photos ./camera_dump ./Photos --strategy path exif siblings --resolve-conflicts
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .config import Config, config, TRANSFER_MODES, REPORT_FORMATS
from .datestamp_strategy import STRATEGIES, get_strategies
from .interaction_manager import InteractionManager, InteractionMode
from .main_orchestrator import BatchSummary, MovePhotosOrchestrator


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="move-photos",
        description="Sort photos into a YYYY/YYYY_MM_DD destination tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview what would happen
  move-photos ./camera_dump ./Photos --dry-run

  # Accept every confirmation (conflicts still go to the review report)
  move-photos ./camera_dump ./Photos --yes

  # Copy instead of move, using every strategy
  move-photos ./camera_dump ./Photos --transfer copy --strategy path exif siblings

Exit codes: 0 success, 1 errors, 3 a step was aborted, 130 interrupted
        """
    )

    parser.add_argument('source', type=Path, help='Directory holding the files to sort')
    parser.add_argument('destination', type=Path, help='Root of the date-organised tree')

    # Mode flags
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Preview deletions and transfers without enacting them'
    )

    answers = parser.add_mutually_exclusive_group()
    answers.add_argument(
        '--yes', '-y',
        action='store_true',
        help='Answer yes to every confirmation'
    )
    answers.add_argument(
        '--deferred',
        action='store_true',
        help='Answer no to every confirmation; only write the reports'
    )

    # Processing options
    parser.add_argument(
        '--strategy',
        nargs='+',
        choices=list(STRATEGIES),
        default=['path'],
        help='Datestamp strategies to apply (default: path)'
    )

    parser.add_argument(
        '--transfer',
        choices=TRANSFER_MODES,
        default=None,
        help=f'Move or copy files into the destination (default: {config.transfer_mode})'
    )

    parser.add_argument(
        '--resolve-conflicts',
        action='store_true',
        help='Ask which date to use when strategies disagree'
    )

    parser.add_argument(
        '--report-format',
        choices=REPORT_FORMATS,
        default=None,
        help=f'Format of the report files (default: {config.report_format})'
    )

    parser.add_argument(
        '--report-dir',
        type=Path,
        default=None,
        help='Where to write the reports (default: DESTINATION/_move_photos/reports)'
    )

    parser.add_argument(
        '--log-dir',
        type=Path,
        default=None,
        help='Where to write the session log (default: DESTINATION/_move_photos/logs)'
    )

    # Output control
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )
    verbosity.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress progress output'
    )

    return parser


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command line arguments."""
    if not args.source.exists():
        print(f"Error: Source directory not found: {args.source}")
        return False
    if not args.source.is_dir():
        print(f"Error: Not a directory: {args.source}")
        return False

    if not args.destination.exists():
        print(f"Error: Destination directory not found: {args.destination}")
        return False
    if not args.destination.is_dir():
        print(f"Error: Not a directory: {args.destination}")
        return False

    source = args.source.resolve()
    destination = args.destination.resolve()
    if source == destination:
        print("Error: Source and destination must be different directories")
        return False
    if destination in source.parents:
        print(f"Error: Source {args.source} lies inside the destination {args.destination}")
        return False

    return True


def build_config(args: argparse.Namespace) -> Config:
    """Apply command line overrides on top of the global config."""
    overrides = {}
    if args.transfer:
        overrides['transfer_mode'] = args.transfer
    if args.report_format:
        overrides['report_format'] = args.report_format
    if args.report_dir:
        overrides['report_dir'] = args.report_dir.resolve()
    if args.log_dir:
        overrides['log_dir'] = args.log_dir.resolve()
    return dataclasses.replace(config, **overrides)


def print_summary(summary: BatchSummary, output_func: Callable[[str], None] = print):
    """Print batch summary."""
    prefix = "[DRY RUN] " if summary.dry_run else ""

    output_func("\n" + "=" * 60)
    output_func(f"{prefix}SUMMARY")
    output_func("=" * 60)

    output_func(f"\nSource files found: {summary.total_files}")
    output_func(f"Unwanted files: {len(summary.unwanted)} (deleted: {summary.unwanted_deleted})")
    output_func(f"High confidence files: {len(summary.high_confidence)}")
    output_func(f"  Already at destination: {len(summary.already_present)} "
                f"(sources deleted: {summary.redundant_deleted})")
    if summary.in_place:
        output_func(f"  Already in place: {len(summary.in_place)}")
    if summary.dry_run:
        output_func(f"  Would transfer: {len(summary.planned)}")
    else:
        output_func(f"  Transferred: {len(summary.transferred)}")
    output_func(f"Unresolved (manual review): {len(summary.unresolved)}")

    if summary.unresolved:
        output_func("\nFiles needing manual review:")
        for pf in summary.unresolved:
            output_func(f"  [{pf.unresolved_reason.value}] {pf.source}")
            if pf.detail:
                output_func(f"      {pf.detail}")

    if summary.errors:
        output_func(f"\nErrors: {len(summary.errors)}")
        for message in summary.errors:
            output_func(f"  {message}")

    if summary.aborted_steps:
        output_func(f"\nAborted steps: {', '.join(summary.aborted_steps)}")

    for path in summary.report_files:
        output_func(f"Report: {path}")


def run_cli(args: argparse.Namespace,
            input_func: Callable[[str], str] = input,
            output_func: Callable[[str], None] = print) -> int:
    """Run one batch with given arguments. Returns the exit code."""
    if args.yes:
        mode = InteractionMode.AUTO_ACCEPT
    elif args.deferred:
        mode = InteractionMode.DEFERRED
    else:
        mode = InteractionMode.INTERACTIVE

    if args.verbose:
        console_level = logging.DEBUG
    elif args.quiet:
        console_level = logging.WARNING
    else:
        console_level = logging.INFO

    def progress(line: str):
        if not args.quiet:
            output_func(line)

    orchestrator: Optional[MovePhotosOrchestrator] = None
    try:
        cfg = build_config(args)
        strategies = get_strategies(args.strategy)

        orchestrator = MovePhotosOrchestrator(
            source_dir=args.source.resolve(),
            dest_root=args.destination.resolve(),
            strategies=strategies,
            interaction_manager=InteractionManager(mode, input_func=input_func, output_func=output_func),
            cfg=cfg,
            dry_run=args.dry_run,
            resolve_conflicts=args.resolve_conflicts,
            output_func=progress,
            console_log_level=console_level,
        )

        if not args.quiet:
            output_func(f"Source directory: {orchestrator.source_dir}")
            output_func(f"Destination: {orchestrator.dest_root}")
            output_func(f"Strategies: {', '.join(args.strategy)}")
            output_func(f"Transfer mode: {cfg.transfer_mode}")
            output_func(f"Dry run: {args.dry_run}")
            output_func(f"Interaction mode: {mode.value}")
            output_func("")

        summary = asyncio.run(orchestrator.run())
        print_summary(summary, output_func)
        return summary.exit_code

    except KeyboardInterrupt:
        output_func("\n\nInterrupted! Files already transferred stay where they are.")
        return 130

    except Exception as e:
        output_func(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    finally:
        if orchestrator is not None:
            orchestrator.close()


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not validate_args(args):
        sys.exit(1)

    sys.exit(run_cli(args))


if __name__ == "__main__":
    main()
