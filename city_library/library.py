"""
library.py

A library branch: its floor map, media catalog and bookable resources.
"""

from __future__ import annotations
import logging
import types
import uuid
from typing import Dict, Mapping, Optional, Tuple

from city_library.catalog import Media
from city_library.exceptions import (
    DuplicateEntityError,
    InvalidInputError,
    MediaNotFoundError,
    ResourceNotFoundError,
)
from city_library.floor_map import FloorMap
from city_library.resources import Resource

logger = logging.getLogger(__name__)


class Library:
    """
    One library branch.

    Media are keyed by their id string and resources by their integer id.
    Items must be placed inside the branch floor map.
    """

    def __init__(self, name: str, address: str, floor_map: FloorMap, library_id: Optional[str] = None):
        if name is None or not str(name).strip():
            raise InvalidInputError("Library name must not be blank")
        if address is None or not str(address).strip():
            raise InvalidInputError("Library address must not be blank")
        if not isinstance(floor_map, FloorMap):
            raise InvalidInputError("Library needs a floor map")
        self.library_id = str(library_id) if library_id is not None else str(uuid.uuid4())
        self.name = str(name).strip()
        self.address = str(address).strip()
        self.floor_map = floor_map
        self._media: Dict[str, Media] = {}
        self._resources: Dict[int, Resource] = {}

    # ---------------- Media ----------------
    @property
    def media(self) -> Tuple[Media, ...]:
        return tuple(self._media.values())

    def add_media(self, media: Media) -> Media:
        if media is None:
            raise InvalidInputError("media must not be None")
        if media.media_id in self._media:
            raise DuplicateEntityError(f"Media {media.media_id} is already in {self.name}")
        if not self.floor_map.in_bounds(media.location.row, media.location.col):
            raise InvalidInputError(f"'{media.title}' is placed at {media.location}, outside the floor map")
        self._media[media.media_id] = media
        logger.info("Added media %s ('%s') to %s", media.media_id, media.title, self.name)
        return media

    def find_media(self, media_id: str) -> Optional[Media]:
        return self._media.get(media_id)

    def require_media(self, media_id: str) -> Media:
        media = self._media.get(media_id)
        if media is None:
            raise MediaNotFoundError(f"Media not found: {media_id}")
        return media

    # ---------------- Resources ----------------
    @property
    def resources(self) -> Mapping[int, Resource]:
        return types.MappingProxyType(self._resources)

    def add_resource(self, resource: Resource) -> Resource:
        if resource is None:
            raise InvalidInputError("resource must not be None")
        if resource.resource_id in self._resources:
            raise DuplicateEntityError(f"Resource {resource.resource_id} is already in {self.name}")
        if not self.floor_map.in_bounds(resource.location.row, resource.location.col):
            raise InvalidInputError(f"'{resource.name}' is placed at {resource.location}, outside the floor map")
        self._resources[resource.resource_id] = resource
        logger.info("Added resource %s ('%s') to %s", resource.resource_id, resource.name, self.name)
        return resource

    def require_resource(self, resource_id: int) -> Resource:
        resource = self._resources.get(resource_id)
        if resource is None:
            raise ResourceNotFoundError(f"Resource not found: {resource_id}")
        return resource

    def __repr__(self) -> str:
        return f"Library({self.name!r}, media={len(self._media)}, resources={len(self._resources)})"
