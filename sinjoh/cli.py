"""Command line interface for exploring the game data files."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from pathlib import Path
from typing import Optional, Sequence

from .database import SqlRepl, export_resources
from .loader import LoaderError, NarcPaths, load_resources

logger = logging.getLogger(__name__)

_MANUAL_PATH_OPTIONS = (
    ("area_data_narc_path", "--area-data-narc-path", "Path to the `area_data.narc` file."),
    ("area_light_narc_path", "--area-light-narc-path", "Path to the `arealight.narc` file."),
    ("area_build_narc_path", "--area-build-narc-path", "Path to the `area_build.narc` file."),
)

_LEVELS = (
    logging.CRITICAL + 10,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
    logging.DEBUG,
)
_DEFAULT_LEVEL_INDEX = 3

_REPO_HINT = (
    "Failed to load the Pokémon Platinum data files. This could be due to multiple reasons:\n"
    "    - You didn't build the ROM. Make sure that a `build` directory is present in the "
    "`pokeplatinum` repo.\n"
    "    - Path(s) were changed in a newer revision of the `pokeplatinum` repo."
)
_MANUAL_HINT = "Failed to load the Pokémon Platinum data files."


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser of the command."""
    parser = argparse.ArgumentParser(
        prog="pokeplat-utils",
        description="CLI for exploring Pokémon Platinum's data files",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase logging verbosity."
    )
    parser.add_argument(
        "-q", "--quiet", action="count", default=0, help="Decrease logging verbosity."
    )

    resources = parser.add_argument_group("resources")
    for dest, flag, help_text in _MANUAL_PATH_OPTIONS:
        resources.add_argument(flag, dest=dest, type=Path, help=help_text)
    resources.add_argument(
        "--pokeplatinum-repo-path",
        type=Path,
        help="Path to the checkout of the `pret/pokeplatinum` Git repository.",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    sql = commands.add_parser("sql", help="Explore game data using SQL queries.")
    sql_commands = sql.add_subparsers(dest="sql_command", required=True)
    sql_commands.add_parser(
        "repl", help="Start an interactive SQL session for querying game data."
    )
    export = sql_commands.add_parser("export", help="Export game data to a SQLite database.")
    export.add_argument(
        "export_path",
        type=Path,
        help="Where the SQLite database is saved; an existing file is overwritten.",
    )
    return parser


def _resolve_narc_paths(
    args: argparse.Namespace, parser: argparse.ArgumentParser
) -> NarcPaths:
    manual = {dest: getattr(args, dest) for dest, _, _ in _MANUAL_PATH_OPTIONS}
    given = [dest for dest, value in manual.items() if value is not None]

    if args.pokeplatinum_repo_path is not None:
        if given:
            parser.error(
                "the manual NARC paths cannot be used with --pokeplatinum-repo-path"
            )
        return NarcPaths.from_repo(args.pokeplatinum_repo_path)

    if not given:
        parser.error(
            "either --pokeplatinum-repo-path or all the manual NARC paths are required"
        )
    missing = [flag for dest, flag, _ in _MANUAL_PATH_OPTIONS if manual[dest] is None]
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")
    return NarcPaths(**manual)


def _configure_logging(verbose: int, quiet: int) -> None:
    index = min(max(_DEFAULT_LEVEL_INDEX + verbose - quiet, 0), len(_LEVELS) - 1)
    logging.basicConfig(
        level=_LEVELS[index],
        format="[%(asctime)s %(levelname)s %(name)s] %(message)s",
        force=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    narc_paths = _resolve_narc_paths(args, parser)
    _configure_logging(args.verbose, args.quiet)

    logger.info("Starting %s", parser.prog)

    try:
        resources = load_resources(narc_paths)
    except LoaderError as exc:
        hint = _REPO_HINT if args.pokeplatinum_repo_path is not None else _MANUAL_HINT
        logger.error("%s\nCaused by: %s", hint, exc)
        return 1

    try:
        if args.sql_command == "repl":
            SqlRepl.from_resources(resources).repl()
        else:
            export_resources(resources, args.export_path)
    except (sqlite3.Error, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())