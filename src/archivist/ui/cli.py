from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Final
from uuid import UUID

from dotenv import load_dotenv

from archivist.adapters.manifest import import_type, load_registry
from archivist.adapters.sqlalchemy import primary_key_type, startup
from archivist.app import archive_records, plan_clone
from archivist.config import ConfigurationError, configure_logging
from archivist.domain.cloning import resolve_reference

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_KEY_TYPES: Final[dict[str, Callable[[str], object]]] = {"int": int, "str": str, "uuid": UUID}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clone records into their archive shape")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to ARCHIVIST_DATABASE_URI)",
    )
    parser.add_argument(
        "--setup",
        type=str,
        help="Callable 'module:function' to run before cloning, e.g. to configure mappers",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every cloned record",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    archive = subparsers.add_parser("archive", help="Clone records and their declared children")
    _add_source_arguments(archive)
    archive.add_argument(
        "identities",
        nargs="+",
        help="Primary key values of the records to archive",
    )
    archive.add_argument(
        "--delete",
        action="store_true",
        help="Delete each source record once it has been archived",
    )
    archive.add_argument(
        "--transactional",
        action="store_true",
        help="Roll back the whole run if any record fails",
    )

    plan = subparsers.add_parser("plan", help="Show which attributes a clone would copy")
    _add_source_arguments(plan)
    plan.add_argument("identity", help="Primary key value of the record to inspect")

    return parser.parse_args(list(argv))


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--manifest",
        type=Path,
        required=True,
        help="TOML file declaring the cloneable types",
    )
    parser.add_argument(
        "--model",
        type=str,
        required=True,
        help="Source class as 'module:Class'",
    )
    parser.add_argument(
        "--key-type",
        choices=("auto", *_KEY_TYPES),
        default="auto",
        help="How to read record keys; auto follows the mapped primary key column",
    )


def _guess_identity(value: str) -> object:
    """Interpret a key as an int, then a UUID, else keep the string."""

    try:
        return int(value)
    except ValueError:
        pass
    try:
        return UUID(value)
    except ValueError:
        return value


def _key_converter(model: type, key_type: str) -> Callable[[str], object]:
    """Pick how keys become identities: the named type, else the mapped key column's."""

    if key_type != "auto":
        return _KEY_TYPES[key_type]
    column_type = primary_key_type(model)
    if column_type in _KEY_TYPES.values():
        return column_type
    return _guess_identity


def _parse_identity(value: str, convert: Callable[[str], object]) -> object:
    stripped = value.strip()
    if not stripped:
        raise ValueError("Empty record identity")
    return convert(stripped)


def _run_setup(reference: str) -> None:
    setup = resolve_reference(reference)
    if not callable(setup):
        raise ValueError(f"{reference!r} is not callable")
    setup()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        if parsed_args.setup:
            _run_setup(parsed_args.setup)
        registry = load_registry(parsed_args.manifest)
        model = import_type(parsed_args.model)
        convert = _key_converter(model, parsed_args.key_type)
        raw_keys = (
            parsed_args.identities if parsed_args.command == "archive" else [parsed_args.identity]
        )
        identities = [_parse_identity(value, convert) for value in raw_keys]
    except (ValueError, ImportError, AttributeError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        startup(database_uri=parsed_args.database_uri, force=True)
        if parsed_args.command == "archive":
            result = archive_records(
                model,
                identities,
                registry=registry,
                delete=parsed_args.delete,
                transactional=parsed_args.transactional,
            )
            if result.missing:
                log.warning("Missing records: %s", ", ".join(map(str, result.missing)))
        elif parsed_args.command == "plan":
            pairs = plan_clone(model, identities[0], registry=registry)
            for pair in pairs:
                log.info("%s -> %s", pair.source, pair.destination)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during archive")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
