"""Area data files, as found in the ``area_data.narc`` archive.

Areas group maps together: a map matrix can hold several areas, while a map
belongs to exactly one area.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

AREA_DATA_SIZE = 8
"""The size in bytes of an area data file."""


@dataclass(frozen=True)
class AreaData:
    """An area data file."""

    map_prop_archives_id: int
    """Index of the associated files in ``area_build.narc`` and ``areabm_texset.narc``."""

    map_texture_archive_id: int
    """Index of the associated file in ``map_tex_set.narc``."""

    area_light_archive_id: int
    """Index of the associated file in ``arealight.narc``."""

    dummy: int
    """Varies across the archive but is unused by the game."""

    @classmethod
    def from_bytes(cls, data: bytes) -> AreaData:
        """Decode an area data file from exactly 8 bytes."""
        raw = bytes(data)
        if len(raw) != AREA_DATA_SIZE:
            raise ValueError(
                f"area data must be {AREA_DATA_SIZE} bytes long, got {len(raw)}"
            )
        map_prop, map_texture, dummy, area_light = struct.unpack("<4H", raw)
        return cls(
            map_prop_archives_id=map_prop,
            map_texture_archive_id=map_texture,
            area_light_archive_id=area_light,
            dummy=dummy,
        )