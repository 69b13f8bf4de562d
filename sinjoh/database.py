"""SQLite export and interactive querying of the parsed game data."""

from __future__ import annotations

import logging
import math
import os
import sqlite3
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from tabulate import tabulate

from .loader import PlatResources
from .sql_tables import (
    create_area_data_tables,
    create_area_light_tables,
    create_area_map_props_tables,
    populate_area_data_tables,
    populate_area_light_tables,
    populate_area_map_props_tables,
)

logger = logging.getLogger(__name__)


def prepare_database(resources: PlatResources, conn: sqlite3.Connection) -> None:
    """Create the tables and fill them with the game data."""
    start = time.perf_counter()

    create_area_data_tables(conn)
    populate_area_data_tables(conn, resources.area_data)
    create_area_light_tables(conn)
    populate_area_light_tables(conn, resources.area_lights)
    create_area_map_props_tables(conn)
    populate_area_map_props_tables(conn, resources.area_map_props)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("Populated SQLite database in %d ms", elapsed_ms)


def export_resources(resources: PlatResources, path: Union[str, os.PathLike]) -> Path:
    """Write the game data to a new SQLite database, replacing any existing file."""
    target = Path(path)
    try:
        target.unlink()
    except FileNotFoundError:
        pass

    conn = sqlite3.connect(target)
    try:
        prepare_database(resources, conn)
        conn.commit()
    finally:
        conn.close()

    absolute = target.absolute()
    logger.info("Finished exporting SQLite database to: %s", absolute)
    return absolute


def format_value(value: object) -> str:
    """Render a value returned by SQLite for display."""
    if value is None:
        return "<null>"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(bytes(value))} bytes blob>"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


@dataclass
class QueryResult:
    """The outcome of one SQL query."""

    columns: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    elapsed_ms: float = 0.0
    changes: int = 0

    def render(self) -> str:
        """Format the result as a left-aligned table."""
        return tabulate(
            self.rows,
            headers=self.columns,
            tablefmt="presto",
            stralign="left",
            numalign="left",
            disable_numparse=True,
        )


def _read_prompt() -> str:
    return input("❯ ")


class SqlRepl:
    """Runs SQL queries against a database of game data."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._conn.text_factory = lambda raw: raw.decode("utf-8", "replace")

    @classmethod
    def from_resources(cls, resources: PlatResources) -> SqlRepl:
        """Build an in-memory database from the game data."""
        conn = sqlite3.connect(":memory:")
        prepare_database(resources, conn)
        conn.commit()
        conn.isolation_level = None
        return cls(conn)

    def execute(self, query: str) -> QueryResult:
        """Run a single SQL statement and collect its results."""
        cursor = self._conn.cursor()
        try:
            start = time.perf_counter()
            cursor.execute(query)
            elapsed_ms = (time.perf_counter() - start) * 1000

            columns = [column[0] for column in cursor.description or ()]
            rows = [[format_value(value) for value in row] for row in cursor]
        finally:
            cursor.close()

        (changes,) = self._conn.execute("SELECT changes()").fetchone()
        return QueryResult(columns=columns, rows=rows, elapsed_ms=elapsed_ms, changes=changes)

    def repl(self, read_line: Optional[Callable[[], str]] = None) -> None:
        """Read queries until end of input, printing the results of each."""
        read = read_line or _read_prompt
        logger.info("Starting SQL REPL")

        while True:
            print()
            try:
                line = read()
            except (EOFError, KeyboardInterrupt):
                break
            except OSError as exc:
                logger.error("An error has occurred while reading stdin: %s", exc)
                continue

            if not line.strip():
                continue

            try:
                result = self.execute(line)
            except (sqlite3.Error, sqlite3.Warning) as exc:
                logger.error("Error while executing the SQL query: %s", exc)
                continue

            print(result.render())
            logger.info(
                "Got %d results in %d ms. %d row(s) affected.",
                len(result.rows),
                result.elapsed_ms,
                result.changes,
            )