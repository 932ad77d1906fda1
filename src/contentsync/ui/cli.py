from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from contentsync.app import import_files
from contentsync.config import ConfigurationError, configure_logging, get_importer_config
from contentsync.domain.context import ImportContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise content entities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import YAML content records")
    importer.add_argument(
        "paths",
        nargs="+",
        type=Path,
        metavar="PATH",
        help="YAML files holding one record per document",
    )
    importer.add_argument(
        "--entity-type",
        type=str,
        help="Entity kind for every record (overrides embedded metadata)",
    )
    importer.add_argument(
        "--skip-constraint",
        action="append",
        default=[],
        metavar="NAME",
        help="Validation constraint to skip (repeatable)",
    )
    importer.add_argument(
        "--no-update",
        action="store_true",
        help="Leave entities that already exist untouched",
    )
    importer.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output",
    )

    return parser.parse_args(list(argv))


def _build_context(args: argparse.Namespace) -> ImportContext:
    entity_type = args.entity_type.strip() if args.entity_type else None
    if args.entity_type is not None and not entity_type:
        raise ValueError("--entity-type must not be empty")
    return ImportContext(
        entity_type=entity_type,
        skipped_constraints=frozenset(args.skip_constraint),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        context = _build_context(parsed_args)
        config = get_importer_config()
        if parsed_args.no_update:
            config = replace(config, update_entities=False)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command != "import":
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
        missing = [path for path in parsed_args.paths if not path.is_file()]
        if missing:
            raise FileNotFoundError(", ".join(str(path) for path in missing))  # noqa: TRY301
        result = import_files(parsed_args.paths, context=context, config=config)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)

    for uuid, failures in result.translation_failures.items():
        for langcode, message in failures.items():
            log.warning("Translation %s of %s failed: %s", langcode, uuid, message)
    if result.rejected or result.translation_failures:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
