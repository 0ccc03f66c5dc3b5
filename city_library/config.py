"""
config.py

Configuration constants and logging setup for the city library.
"""

from __future__ import annotations
import datetime
import logging

# Loans
DEFAULT_LOAN_DAYS = 14
MAX_ACTIVE_LOANS = 10
DEFAULT_COPIES_PER_MEDIA = 50

# Member ids are handed out from this counter; the first member gets 1001
FIRST_MEMBER_ID = 1000

# Resource bookings
OPEN_TIME = datetime.time(8, 0)
CLOSE_TIME = datetime.time(20, 0)
SLOT_MINUTES = 60

# Floor map symbols
WALL = "#"
ENTRANCE = "E"
WALKWAY = " "
START_MARKER = "S"
GOAL_MARKER = "X"
ROUTE_MARKER = "*"

DEFAULT_LEGEND = {
    WALL: "Wall",
    WALKWAY: "Walkway",
    ENTRANCE: "Entrance/Exit",
}

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging for a console session.

    Args:
        verbose: log at DEBUG instead of INFO.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
