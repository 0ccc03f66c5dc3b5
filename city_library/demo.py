"""
demo.py

Builds a ready-to-use library system with one branch, its floor map, a small
catalog, a few bookable resources and one member.
"""

from __future__ import annotations
import logging

from city_library import config
from city_library.catalog import Media, MediaCategory, MediaType
from city_library.floor_map import Coordinate, FloorMap
from city_library.library import Library
from city_library.resources import Resource, ResourceType
from city_library.system import LibrarySystem

logger = logging.getLogger(__name__)

SYSTEM_NAME = "JOLA LIBRARY SYSTEM"
BRANCH_NAME = "Jola City Main Library"
BRANCH_ADDRESS = "22 Jola Lane"

# (media id, title, creator, kind, category, row, col)
DEMO_MEDIA = [
    ("M1", "Programming Pearls", "Jon Bentley", MediaType.BOOK, MediaCategory.SCIENCE, 1, 2),
    ("M2", "Machine is Coming", "Ileri Ayo", MediaType.EBOOK, MediaCategory.NON_FICTION, 2, 2),
    ("M3", "SnowFall", "David Promise", MediaType.DVD, MediaCategory.FICTION, 1, 3),
    ("M4", "Heaven in Paradise", "Seyi Ade", MediaType.BLURAY, MediaCategory.FANTASY, 1, 4),
    ("M5", "FIFA 2026", "Maggie Slessor", MediaType.GAME, MediaCategory.CHILDREN, 2, 4),
    ("M6", "Alex Luther", "Fejiro Ama", MediaType.DVD, MediaCategory.BIOGRAPHY, 2, 3),
    ("M7", "This Is Your Fight", "Temi Abiodun", MediaType.EBOOK, MediaCategory.BIOGRAPHY, 2, 1),
]

# (resource id, name, kind, description, row, col)
DEMO_RESOURCES = [
    (1, "Study room", ResourceType.ROOM, "Study Room R1", 3, 2),
    (2, "Computer", ResourceType.COMPUTER, "Computer 1", 4, 3),
    (3, "Study Desk", ResourceType.STUDY_DESK, "Study Desk 4", 1, 2),
    (4, "Printer", ResourceType.PRINTER, "Printer 3", 2, 2),
]

DEMO_MEMBER = ("Seyi", "Fashola", "16139722220", "seyifash@gmail.com", "2004")


def build_floor_map() -> FloorMap:
    """A 10x6 branch: walls around the edge and the entrance at (1, 1)."""
    return FloorMap.build(width=10, height=6, legend=config.DEFAULT_LEGEND).populate_grid()


def build_demo_system(copies: int = config.DEFAULT_COPIES_PER_MEDIA,
                      loan_days: int = config.DEFAULT_LOAN_DAYS,
                      max_active_loans: int = config.MAX_ACTIVE_LOANS) -> LibrarySystem:
    """
    Build the demo system.

    Args:
        copies: copies stocked per title.
        loan_days: loan period handed to the system.
        max_active_loans: loan limit handed to the system.
    """
    system = LibrarySystem(SYSTEM_NAME, loan_days=loan_days, max_active_loans=max_active_loans)
    branch = Library(BRANCH_NAME, BRANCH_ADDRESS, build_floor_map())

    for media_id, title, creator, kind, category, row, col in DEMO_MEDIA:
        branch.add_media(Media(title, creator, kind, category, Coordinate(row, col),
                               media_id=media_id, copies=copies))
    for resource_id, name, kind, description, row, col in DEMO_RESOURCES:
        branch.add_resource(Resource(resource_id, name, kind, description, Coordinate(row, col)))

    system.add_library(branch)
    system.register_member(*DEMO_MEMBER)
    logger.info("Demo system ready: %d media, %d resources, %d member(s)",
                len(branch.media), len(branch.resources), len(system.members))
    return system
