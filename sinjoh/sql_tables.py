"""SQL table definitions and population for parsed game data."""

from __future__ import annotations

import enum
import sqlite3
from typing import Iterable

from .area_data import AreaData
from .area_light import AreaLight, AreaLightBlock, AreaLightProperties
from .area_map_props import AreaMapProps
from .nds import DsRgb


class AreaLightColorKind(enum.Enum):
    """The kinds of colors stored in the ``area_light_color`` table."""

    DIFFUSE = "diffuse"
    AMBIENT = "ambient"
    SPECULAR = "specular"
    EMISSION = "emission"


def create_area_data_tables(conn: sqlite3.Connection) -> None:
    """Create the ``area_data`` table."""
    conn.execute(
        """CREATE TABLE area_data (
            id                  INTEGER NOT NULL PRIMARY KEY,
            area_map_prop_id    INTEGER NOT NULL,
            map_texture_id      INTEGER NOT NULL,
            area_light_id       INTEGER NOT NULL,
            dummy               INTEGER NOT NULL
        )"""
    )


def populate_area_data_tables(
    conn: sqlite3.Connection, area_data: Iterable[AreaData]
) -> None:
    """Insert one row per area data file, keyed by its position."""
    with conn:
        conn.executemany(
            """INSERT INTO area_data (id, area_map_prop_id, map_texture_id, area_light_id, dummy)
            VALUES (?, ?, ?, ?, ?)""",
            (
                (
                    area_id,
                    area.map_prop_archives_id,
                    area.map_texture_archive_id,
                    area.area_light_archive_id,
                    area.dummy,
                )
                for area_id, area in enumerate(area_data)
            ),
        )


def create_area_light_tables(conn: sqlite3.Connection) -> None:
    """Create the ``area_light``, ``area_light_properties`` and ``area_light_color`` tables."""
    conn.execute(
        """CREATE TABLE area_light (
            id          INTEGER NOT NULL,
            end_time    INTEGER NOT NULL,
            PRIMARY KEY (id, end_time)
        )"""
    )
    conn.execute(
        """CREATE TABLE area_light_properties (
            light_id            INTEGER NOT NULL,
            area_light_id       INTEGER NOT NULL,
            area_light_end_time INTEGER NOT NULL,
            red                 INTEGER NOT NULL,
            green               INTEGER NOT NULL,
            blue                INTEGER NOT NULL,
            dir_x               INTEGER NOT NULL,
            dir_y               INTEGER NOT NULL,
            dir_z               INTEGER NOT NULL,
            PRIMARY KEY (light_id, area_light_id, area_light_end_time),
            FOREIGN KEY (area_light_id, area_light_end_time) REFERENCES area_light(id, end_time)
        )"""
    )
    conn.execute(
        """CREATE TABLE area_light_color (
            kind                TEXT CHECK(kind IN ('diffuse', 'ambient', 'specular', 'emission')) NOT NULL,
            area_light_id       INTEGER NOT NULL,
            area_light_end_time INTEGER NOT NULL,
            red                 INTEGER NOT NULL,
            green               INTEGER NOT NULL,
            blue                INTEGER NOT NULL,
            PRIMARY KEY (kind, area_light_id, area_light_end_time),
            FOREIGN KEY (area_light_id, area_light_end_time) REFERENCES area_light(id, end_time)
        )"""
    )


def _insert_light_properties(
    conn: sqlite3.Connection,
    light_id: int,
    area_light_id: int,
    block: AreaLightBlock,
    light: AreaLightProperties,
) -> None:
    conn.execute(
        """INSERT INTO area_light_properties
            (light_id, area_light_id, area_light_end_time, red, green, blue, dir_x, dir_y, dir_z)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            light_id,
            area_light_id,
            block.end_time,
            light.color.red,
            light.color.green,
            light.color.blue,
            *(component.to_float() for component in light.direction),
        ),
    )


def _insert_light_color(
    conn: sqlite3.Connection,
    kind: AreaLightColorKind,
    area_light_id: int,
    end_time: int,
    color: DsRgb,
) -> None:
    conn.execute(
        """INSERT INTO area_light_color (kind, area_light_id, area_light_end_time, red, green, blue)
        VALUES (?, ?, ?, ?, ?, ?)""",
        (kind.value, area_light_id, end_time, color.red, color.green, color.blue),
    )


def populate_area_light_tables(
    conn: sqlite3.Connection, area_lights: Iterable[AreaLight]
) -> None:
    """Insert the blocks, lights and colors of every area light file."""
    with conn:
        for area_light_id, area_light in enumerate(area_lights):
            for block in area_light.blocks:
                conn.execute(
                    "INSERT INTO area_light (id, end_time) VALUES (?, ?)",
                    (area_light_id, block.end_time),
                )

                for light_id, light in enumerate(block.lights()):
                    if light is not None:
                        _insert_light_properties(conn, light_id, area_light_id, block, light)

                colors = (
                    (AreaLightColorKind.DIFFUSE, block.diffuse_reflect_color),
                    (AreaLightColorKind.AMBIENT, block.ambient_reflect_color),
                    (AreaLightColorKind.SPECULAR, block.specular_reflect_color),
                    (AreaLightColorKind.EMISSION, block.emission_color),
                )
                for kind, color in colors:
                    _insert_light_color(conn, kind, area_light_id, block.end_time, color)


def create_area_map_props_tables(conn: sqlite3.Connection) -> None:
    """Create the ``area_map_prop`` table."""
    conn.execute(
        """CREATE TABLE area_map_prop (
            id          INTEGER NOT NULL,
            map_prop_id INTEGER NOT NULL,
            PRIMARY KEY (id, map_prop_id)
        )"""
    )


def populate_area_map_props_tables(
    conn: sqlite3.Connection, area_map_props: Iterable[AreaMapProps]
) -> None:
    """Insert one row per map prop ID of every area."""
    with conn:
        conn.executemany(
            "INSERT INTO area_map_prop (id, map_prop_id) VALUES (?, ?)",
            (
                (area_id, map_prop_id)
                for area_id, props in enumerate(area_map_props)
                for map_prop_id in props.map_props_ids
            ),
        )