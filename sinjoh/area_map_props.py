"""Area map props files, as found in the ``area_build.narc`` archive."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field


class AreaMapPropsError(Exception):
    """Raised when an area map props file cannot be read."""


@dataclass
class AreaMapProps:
    """IDs of the map props loaded while the player is in the area."""

    map_props_ids: list[int] = field(default_factory=list)

    @classmethod
    def parse_bytes(cls, data: bytes) -> AreaMapProps:
        """Parse a little-endian u16 count followed by that many u16 IDs."""
        raw = bytes(data)
        if len(raw) < 2:
            raise AreaMapPropsError("an error has occurred while reading the buffer")
        (count,) = struct.unpack_from("<H", raw)
        end = 2 + 2 * count
        if len(raw) < end:
            raise AreaMapPropsError("an error has occurred while reading the buffer")
        return cls(map_props_ids=list(struct.unpack_from(f"<{count}H", raw, 2)))