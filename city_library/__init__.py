"""
City library: catalogs, member loans, waitlists, resource bookings and
floor-map routes for a branch library, driven from a console session.
"""

from city_library.catalog import Copy, CopyStatus, Media, MediaCategory, MediaType, Review
from city_library.floor_map import Coordinate, FloorMap
from city_library.library import Library
from city_library.members import Member
from city_library.pathfinder import find_path, narrate_path
from city_library.resources import Booking, Resource, ResourceType
from city_library.scheduling import available_slots, book_resource
from city_library.system import BorrowOutcome, BorrowStatus, LibrarySystem, ReturnOutcome

__version__ = "0.1.0"
