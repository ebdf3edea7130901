#!/usr/bin/env python3
"""
Ruby LSP Bundle Updater - Command Line Entry Point
Updates the gems of a project's composed Ruby LSP bundle.
"""

import sys
import os

# Add src to path
src_dir = os.path.dirname(os.path.abspath(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

import argparse
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ruby-lsp-update",
        description="Update the Ruby LSP gems in a project's composed bundle.",
    )
    parser.add_argument(
        "project_path",
        nargs="?",
        default=".",
        help="Project root containing the .ruby-lsp directory (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON configuration file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def setup_logging(level: str = "INFO", log_file=None, verbose: bool = False) -> None:
    """Log to stderr and optionally to a file; stdout carries progress lines."""
    handlers = [logging.StreamHandler(sys.stderr)]
    file_error = None
    if log_file:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path))
        except OSError as e:
            file_error = e

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    if file_error is not None:
        logger.warning(f"Could not open log file {log_file}, logging to stderr only: {file_error}")


def main(argv=None) -> int:
    """Run one update and return the process exit status."""
    args = build_parser().parse_args(argv)

    from lsp_update.config import load_config
    from lsp_update.context import resolve_project_context
    from lsp_update.outcome import OutcomeKind
    from lsp_update.runner import UpdateRunner
    from backends.bundler import BundlerCLIBackend

    config = load_config(args.config)
    setup_logging(config.log_level, config.log_file, args.verbose)

    try:
        context = resolve_project_context(args.project_path)
        backend = BundlerCLIBackend(config.bundle_command, cwd=context.project_root)
        if not backend.is_available():
            logger.warning(f"{config.bundle_command[0]} not found on PATH")

        outcome = UpdateRunner(context, backend).update()
    except Exception as e:
        logger.error(f"Update failed: {e}")
        return EXIT_FAILURE

    if outcome.kind == OutcomeKind.USAGE_ERROR:
        return EXIT_USAGE
    return EXIT_SUCCESS if outcome.success else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
