"""
routes.py

Walking routes from a branch entrance to a media item or resource.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List

from city_library.catalog import Media
from city_library.floor_map import Coordinate, FloorMap
from city_library.library import Library
from city_library.pathfinder import Path, find_path, narrate_path, render_route
from city_library.resources import Resource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteResult:
    floor_map: FloorMap
    path: Path
    goal: Coordinate

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def steps(self) -> int:
        return max(len(self.path) - 1, 0)

    def directions(self) -> List[str]:
        return narrate_path(self.path)

    def render(self) -> List[str]:
        return render_route(self.floor_map, self.path, self.goal)


def route_from_entrance(library: Library, goal: Coordinate) -> RouteResult:
    floor_map = library.floor_map
    start = floor_map.entrance_coordinate()
    if start is None:
        logger.warning("%s has no entrance on its floor map", library.name)
        return RouteResult(floor_map, (), goal)
    return RouteResult(floor_map, find_path(floor_map, start, goal), goal)


def route_to_media(library: Library, media: Media) -> RouteResult:
    return route_from_entrance(library, media.location)


def route_to_resource(library: Library, resource: Resource) -> RouteResult:
    return route_from_entrance(library, resource.location)
