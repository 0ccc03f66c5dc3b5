"""
resources.py

Bookable library resources (rooms, computers, desks, printers) and their
bookings.
"""

from __future__ import annotations
import datetime
import logging
import types
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Tuple

from city_library.catalog import Review
from city_library.exceptions import (
    BookingConflictError,
    InvalidBookingWindowError,
    InvalidInputError,
    InvalidResourceError,
    StateConflictError,
)
from city_library.floor_map import Coordinate

logger = logging.getLogger(__name__)


class ResourceType(Enum):
    ROOM = "ROOM"
    COMPUTER = "COMPUTER"
    STUDY_DESK = "STUDY_DESK"
    PRINTER = "PRINTER"

    @classmethod
    def from_string(cls, value: str) -> "ResourceType":
        try:
            return cls(str(value).strip().upper().replace(" ", "_"))
        except ValueError:
            raise InvalidResourceError(f"Unknown resource type: {value!r}") from None


def intervals_overlap(start_a: datetime.datetime, end_a: datetime.datetime,
                      start_b: datetime.datetime, end_b: datetime.datetime) -> bool:
    """Half-open overlap: [a) and [b) touching at an end point do not overlap."""
    return start_a < end_b and end_a > start_b


def _positive_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInputError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class Booking:
    booking_id: int
    resource_id: int
    member_id: int
    start: datetime.datetime
    end: datetime.datetime

    def __post_init__(self):
        _positive_int("booking id", self.booking_id)
        _positive_int("resource id", self.resource_id)
        _positive_int("member id", self.member_id)
        if not isinstance(self.start, datetime.datetime) or not isinstance(self.end, datetime.datetime):
            raise InvalidBookingWindowError("booking start and end must be datetimes")
        if not self.start < self.end:
            raise InvalidBookingWindowError(f"booking must start before it ends ({self.start} >= {self.end})")

    def overlaps(self, start: datetime.datetime, end: datetime.datetime) -> bool:
        return intervals_overlap(start, end, self.start, self.end)


class Resource:
    """
    A bookable resource placed on the branch floor map.

    Bookings are keyed by booking id and never overlap one another.
    """

    def __init__(self, resource_id: int, name: str, kind, description: str, location: Coordinate):
        if isinstance(resource_id, bool) or not isinstance(resource_id, int) or resource_id <= 0:
            raise InvalidResourceError(f"Resource id must be a positive integer, got {resource_id!r}")
        if name is None or not str(name).strip():
            raise InvalidResourceError("Resource name must not be blank")
        if description is None or not str(description).strip():
            raise InvalidResourceError("Resource description must not be blank")
        if not isinstance(location, Coordinate):
            raise InvalidResourceError(f"location must be a Coordinate, got {location!r}")
        self.resource_id = resource_id
        self.name = str(name).strip()
        self.kind = kind if isinstance(kind, ResourceType) else ResourceType.from_string(kind)
        self.description = str(description).strip()
        self.location = location
        self._bookings: Dict[int, Booking] = {}
        self._reviews: List[Review] = []

    def _check(self) -> None:
        for key, booking in self._bookings.items():
            if key != booking.booking_id:
                raise StateConflictError(f"booking key {key} does not match id {booking.booking_id}")
            if booking.resource_id != self.resource_id:
                raise StateConflictError(f"booking {key} belongs to another resource")

    @property
    def bookings(self) -> Mapping[int, Booking]:
        return types.MappingProxyType(self._bookings)

    def sorted_bookings(self) -> List[Booking]:
        return sorted(self._bookings.values(), key=lambda b: (b.start, b.booking_id))

    def is_available_during(self, start: datetime.datetime, end: datetime.datetime) -> bool:
        return not any(booking.overlaps(start, end) for booking in self._bookings.values())

    def add_booking(self, booking: Booking) -> None:
        """
        Add a booking after re-checking it against every existing booking.

        Raises:
            InvalidResourceError: if the booking is for another resource or reuses an id.
            BookingConflictError: if the booking overlaps an existing one.
        """
        if booking.resource_id != self.resource_id:
            raise InvalidResourceError(
                f"Booking {booking.booking_id} is for resource {booking.resource_id}, not {self.resource_id}")
        if booking.booking_id in self._bookings:
            raise InvalidResourceError(f"Booking id {booking.booking_id} is already used on {self.name}")
        for existing in self._bookings.values():
            if existing.overlaps(booking.start, booking.end):
                raise BookingConflictError(
                    f"{self.name} is already booked from {existing.start:%Y-%m-%d %H:%M} "
                    f"to {existing.end:%H:%M}.")
        self._bookings[booking.booking_id] = booking
        self._check()

    def next_booking_id(self) -> int:
        return max(self._bookings) + 1 if self._bookings else 1

    @property
    def reviews(self) -> Tuple[Review, ...]:
        return tuple(self._reviews)

    def add_review(self, member_id: int, rating: int, text: str) -> Review:
        review = Review(member_id, rating, text)
        self._reviews.append(review)
        return review

    def __repr__(self) -> str:
        return f"Resource({self.resource_id}, {self.name!r}, {self.kind.value}, bookings={len(self._bookings)})"
