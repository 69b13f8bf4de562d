"""Loading of the game data files into parsed structures."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, TypeVar, Union

from .area_data import AreaData
from .area_light import AreaLight, AreaLightError
from .area_map_props import AreaMapProps, AreaMapPropsError
from .narc import NarcReader, NarcReaderError

logger = logging.getLogger(__name__)

AREA_DATA_NARC_REPO_BUILD_PATH = "build/res/field/area_data/area_data.narc"
AREA_LIGHT_NARC_REPO_BUILD_PATH = "build/res/field/lighting/lighting.narc"
AREA_BUILD_NARC_REPO_BUILD_PATH = "build/res/field/props/model_sets/prop_model_sets.narc"

T = TypeVar("T")
PathLike = Union[str, os.PathLike]


class LoaderError(Exception):
    """Raised when a game data file cannot be read or parsed."""


@dataclass(frozen=True)
class NarcPaths:
    """Locations of the NARC files holding the game data."""

    area_data_narc_path: Path
    area_light_narc_path: Path
    area_build_narc_path: Path

    @classmethod
    def from_repo(cls, repo_path: PathLike) -> NarcPaths:
        """Locate the NARC files inside a built decompilation repository."""
        root = Path(repo_path)
        return cls(
            area_data_narc_path=root / AREA_DATA_NARC_REPO_BUILD_PATH,
            area_light_narc_path=root / AREA_LIGHT_NARC_REPO_BUILD_PATH,
            area_build_narc_path=root / AREA_BUILD_NARC_REPO_BUILD_PATH,
        )


@dataclass
class PlatResources:
    """All the parsed game data."""

    area_data: list[AreaData] = field(default_factory=list)
    area_lights: list[AreaLight] = field(default_factory=list)
    area_map_props: list[AreaMapProps] = field(default_factory=list)


def _read_narc(
    path: PathLike,
    file_name: str,
    what: str,
    parse: Callable[[bytes], T],
) -> list[T]:
    logger.info("Reading `%s` at: %s", file_name, path)
    try:
        reader = NarcReader.read_from_file(path)
    except NarcReaderError as exc:
        raise LoaderError(f"Failed to read the {what} NARC file: {exc}") from exc

    with reader:
        logger.debug("Read %s NARC:\n%r", what, reader.header)
        try:
            return [parse(data) for data in reader.files_iter()]
        except NarcReaderError as exc:
            raise LoaderError(
                f"Unable to read a {what} file from the NARC: {exc}"
            ) from exc


def _parse_area_data(data: bytes) -> AreaData:
    try:
        return AreaData.from_bytes(data)
    except ValueError as exc:
        raise LoaderError(f"Unable to convert the area data to an array: {exc}") from exc


def _parse_area_light(data: bytes) -> AreaLight:
    try:
        area_light = AreaLight.parse_bytes(data)
    except AreaLightError as exc:
        raise LoaderError(f"Unable to parse an area light file: {exc}") from exc
    area_light.fix()
    return area_light


def _parse_area_map_props(data: bytes) -> AreaMapProps:
    try:
        return AreaMapProps.parse_bytes(data)
    except AreaMapPropsError as exc:
        raise LoaderError(f"Unable to parse an area build file: {exc}") from exc


def read_area_data(path: PathLike) -> list[AreaData]:
    """Read every area data file of ``area_data.narc``."""
    return _read_narc(path, "area_data.narc", "area data", _parse_area_data)


def read_area_lights(path: PathLike) -> list[AreaLight]:
    """Read every area light file of ``arealight.narc``, fixed as the game sees them."""
    return _read_narc(path, "arealight.narc", "area light", _parse_area_light)


def read_area_map_props(path: PathLike) -> list[AreaMapProps]:
    """Read every area map props file of ``area_build.narc``."""
    return _read_narc(path, "area_build.narc", "area build", _parse_area_map_props)


def load_resources(narc_paths: NarcPaths) -> PlatResources:
    """Read and parse all the game data files."""
    area_data = read_area_data(narc_paths.area_data_narc_path)
    logger.info("Read %d area data files", len(area_data))
    logger.debug("Read area data:\n%r", area_data)

    area_lights = read_area_lights(narc_paths.area_light_narc_path)
    logger.info("Read %d area lights", len(area_lights))
    logger.debug("Read area lights:\n%r", area_lights)

    area_map_props = read_area_map_props(narc_paths.area_build_narc_path)
    logger.info("Read %d area map props", len(area_map_props))
    logger.debug("Read area map props:\n%r", area_map_props)

    return PlatResources(
        area_data=area_data,
        area_lights=area_lights,
        area_map_props=area_map_props,
    )