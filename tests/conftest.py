import sys
import pathlib
import datetime

# Add project root to sys.path so imports from repo root work without installing
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import pytest

from city_library.catalog import Media, MediaCategory, MediaType
from city_library.floor_map import Coordinate, FloorMap
from city_library.library import Library
from city_library.resources import Resource, ResourceType
from city_library.system import LibrarySystem

TODAY = datetime.date(2025, 1, 10)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def floor_map():
    return FloorMap.build(width=10, height=6).populate_grid()


@pytest.fixture
def library(floor_map):
    lib = Library("Test Branch", "1 Test Street", floor_map, library_id="branch-1")
    lib.add_media(Media("Programming Pearls", "Jon Bentley", MediaType.BOOK, MediaCategory.SCIENCE,
                        Coordinate(1, 2), media_id="M1", copies=2))
    lib.add_media(Media("SnowFall", "David Promise", MediaType.DVD, MediaCategory.FICTION,
                        Coordinate(2, 3), media_id="M2", copies=1))
    lib.add_resource(Resource(1, "Study room", ResourceType.ROOM, "Study Room R1", Coordinate(3, 2)))
    return lib


@pytest.fixture
def system(library):
    s = LibrarySystem("Test System")
    s.add_library(library)
    return s


@pytest.fixture
def alice(system):
    return system.register_member("Alice", "Adams", "12345678901", "alice@example.com", "1111")


@pytest.fixture
def bob(system):
    return system.register_member("Bob", "Brown", "12345678902", "bob@example.com", "2222")


@pytest.fixture
def carol(system):
    return system.register_member("Carol", "Clark", "12345678903", "carol@example.com", "3333")
