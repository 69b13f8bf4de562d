"""Area light files, as found in the ``arealight.narc`` archive."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .nds import DsFixed16, DsRgb, Vec3

_INT_RE = re.compile(r"[+-]?[0-9]+")


class AreaLightBlockLine(enum.Enum):
    """The successive lines of an area light block."""

    END_TIME = enum.auto()
    LIGHT_0 = enum.auto()
    LIGHT_1 = enum.auto()
    LIGHT_2 = enum.auto()
    LIGHT_3 = enum.auto()
    DIFFUSE_REFLECT_COLOR = enum.auto()
    AMBIENT_REFLECT_COLOR = enum.auto()
    SPECULAR_REFLECT_COLOR = enum.auto()
    EMISSION_COLOR = enum.auto()
    END = enum.auto()

    def next(self) -> AreaLightBlockLine:
        """Return the line that follows this one; END is followed by END."""
        members = list(type(self))
        position = members.index(self)
        return members[min(position + 1, len(members) - 1)]


class AreaLightError(Exception):
    """Base class for area light parsing errors."""


class ConversionError(AreaLightError):
    """The data is not valid UTF-8."""

    def __init__(self) -> None:
        super().__init__("unable to convert the byte array to a UTF-8 string")


class EarlyEmptyLineError(AreaLightError):
    """An empty line was found in the middle of a block."""

    def __init__(self, line_number: int) -> None:
        self.line_number = line_number
        super().__init__(
            "an empty line has been encountered while parsing a block "
            f"(line number {line_number})"
        )


class BlockParseOverrunError(AreaLightError):
    """The parser went past the end of a block."""

    def __init__(self) -> None:
        super().__init__(
            "there was an overrun while parsing an area light block - "
            "this is a bug in the parser"
        )


class MalformedBlockLineError(AreaLightError):
    """A block line could not be understood."""

    def __init__(self, line: AreaLightBlockLine, line_number: int) -> None:
        self.line = line
        self.line_number = line_number
        super().__init__(
            "a malformed line was encountered while parsing an area light block "
            f"(line {line.name}, line number {line_number})"
        )


class MalformedLineParameterError(AreaLightError):
    """A parameter of a block line is not a valid number."""

    def __init__(
        self, line: AreaLightBlockLine, line_number: int, parameter: int
    ) -> None:
        self.line = line
        self.line_number = line_number
        self.parameter = parameter
        super().__init__(
            "a malformed parameter was encountered while parsing an area light "
            f"block line (line {line.name}, line number {line_number}, "
            f"parameter {parameter})"
        )


class NotEnoughParametersError(AreaLightError):
    """A block line has fewer parameters than required."""

    def __init__(self, line: AreaLightBlockLine, line_number: int) -> None:
        self.line = line
        self.line_number = line_number
        super().__init__(
            "not enough parameters were specified on an area light block line "
            f"(line {line.name}, line number {line_number})"
        )


@dataclass
class AreaLightProperties:
    """Color and direction of one of the DS hardware lights."""

    color: DsRgb
    direction: Vec3[DsFixed16]


@dataclass
class AreaLightBlock:
    """Lighting that applies until ``end_time`` (seconds since midnight / 2)."""

    end_time: int = 0
    light_0: Optional[AreaLightProperties] = None
    light_1: Optional[AreaLightProperties] = None
    light_2: Optional[AreaLightProperties] = None
    light_3: Optional[AreaLightProperties] = None
    diffuse_reflect_color: DsRgb = field(default_factory=DsRgb)
    ambient_reflect_color: DsRgb = field(default_factory=DsRgb)
    specular_reflect_color: DsRgb = field(default_factory=DsRgb)
    emission_color: DsRgb = field(default_factory=DsRgb)

    def lights(self) -> Iterator[Optional[AreaLightProperties]]:
        """Yield the four lights in order."""
        yield self.light_0
        yield self.light_1
        yield self.light_2
        yield self.light_3


_LIGHT_FIELDS = {
    AreaLightBlockLine.LIGHT_0: "light_0",
    AreaLightBlockLine.LIGHT_1: "light_1",
    AreaLightBlockLine.LIGHT_2: "light_2",
    AreaLightBlockLine.LIGHT_3: "light_3",
}

_COLOR_FIELDS = {
    AreaLightBlockLine.DIFFUSE_REFLECT_COLOR: "diffuse_reflect_color",
    AreaLightBlockLine.AMBIENT_REFLECT_COLOR: "ambient_reflect_color",
    AreaLightBlockLine.SPECULAR_REFLECT_COLOR: "specular_reflect_color",
    AreaLightBlockLine.EMISSION_COLOR: "emission_color",
}


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class _LineParameters:
    """Sequential access to the comma-separated parameters of a line."""

    def __init__(self, text: str, kind: AreaLightBlockLine, line_number: int) -> None:
        self._values = iter(enumerate(text.split(",")))
        self._kind = kind
        self._line_number = line_number

    def take(self, count: int) -> list[tuple[int, str]]:
        taken = []
        for _ in range(count):
            item = next(self._values, None)
            if item is None:
                raise NotEnoughParametersError(self._kind, self._line_number)
            taken.append(item)
        return taken

    def parse_int(self, index: int, value: str, low: int, high: int) -> int:
        if _INT_RE.fullmatch(value) is None or (value.startswith("-") and low >= 0):
            raise MalformedLineParameterError(self._kind, self._line_number, index)
        number = int(value)
        if not low <= number <= high:
            raise MalformedLineParameterError(self._kind, self._line_number, index)
        return number

    def color(self) -> DsRgb:
        red, green, blue = (
            self.parse_int(index, value, 0, 0xFF) for index, value in self.take(3)
        )
        return DsRgb(red=red, green=green, blue=blue)

    def vector(self) -> Vec3[DsFixed16]:
        x, y, z = (
            DsFixed16.from_bits(self.parse_int(index, value, -0x8000, 0x7FFF))
            for index, value in self.take(3)
        )
        return Vec3(x, y, z)


@dataclass
class AreaLight:
    """An area light file: a list of blocks ordered by end time."""

    blocks: list[AreaLightBlock] = field(default_factory=list)

    @classmethod
    def parse_bytes(cls, data: bytes) -> AreaLight:
        """Parse an area light file from UTF-8 encoded bytes."""
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ConversionError() from exc
        return cls.parse_string(text)

    @classmethod
    def parse_string(cls, text: str) -> AreaLight:
        """Parse an area light file from text."""
        blocks: list[AreaLightBlock] = []
        block = AreaLightBlock()
        kind = AreaLightBlockLine.END_TIME

        for line_number, line in enumerate(_lines(text)):
            if line == "":
                if kind is AreaLightBlockLine.END_TIME:
                    continue
                raise EarlyEmptyLineError(line_number)
            if line == "EOF":
                break

            params = _LineParameters(line, kind, line_number)
            if kind is AreaLightBlockLine.END_TIME:
                [(index, value)] = params.take(1)
                block.end_time = params.parse_int(index, value, 0, 0xFFFFFFFF)
            elif kind in _LIGHT_FIELDS:
                setattr(block, _LIGHT_FIELDS[kind], cls._parse_light(params))
            elif kind in _COLOR_FIELDS:
                setattr(block, _COLOR_FIELDS[kind], params.color())
            else:
                raise BlockParseOverrunError()

            kind = kind.next()
            if kind is AreaLightBlockLine.END:
                blocks.append(block)
                block = AreaLightBlock()
                kind = AreaLightBlockLine.END_TIME

        return cls(blocks=blocks)

    @staticmethod
    def _parse_light(params: _LineParameters) -> Optional[AreaLightProperties]:
        [(_, valid)] = params.take(1)
        if valid != "1":
            return None
        color = params.color()
        direction = params.vector()
        return AreaLightProperties(color=color, direction=direction)

    def fix(self) -> None:
        """Clamp light directions to [-1, 1], as the game interprets them."""
        for block in self.blocks:
            for light in block.lights():
                if light is not None:
                    direction = light.direction
                    light.direction = Vec3(
                        *(c.clamp(DsFixed16.NEG_ONE, DsFixed16.ONE) for c in direction)
                    )