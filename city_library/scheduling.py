"""
scheduling.py

Resource bookings within opening hours, and the free hourly slots left on a
resource.
"""

from __future__ import annotations
import datetime
import logging
from typing import Dict, List

from city_library import config
from city_library.catalog import Review
from city_library.exceptions import (
    BookingConflictError,
    InvalidBookingWindowError,
    InvalidInputError,
    NoBookingError,
)
from city_library.library import Library
from city_library.resources import Booking, Resource

logger = logging.getLogger(__name__)

SLOT = datetime.timedelta(minutes=config.SLOT_MINUTES)


def check_booking_window(start: datetime.datetime, end: datetime.datetime) -> None:
    """
    Reject windows that are empty, span more than one day or fall outside
    opening hours.

    Raises:
        InvalidBookingWindowError
    """
    if not isinstance(start, datetime.datetime) or not isinstance(end, datetime.datetime):
        raise InvalidBookingWindowError("Booking start and end must be date-times.")
    if not start < end:
        raise InvalidBookingWindowError("Booking must start before it ends.")
    if start.date() != end.date():
        raise InvalidBookingWindowError("Booking must start and end on the same day.")
    if start.time() < config.OPEN_TIME or end.time() > config.CLOSE_TIME:
        raise InvalidBookingWindowError(
            f"Bookings must fall between {config.OPEN_TIME:%H:%M} and {config.CLOSE_TIME:%H:%M}.")


def book_resource(resource: Resource, member_id: int, start: datetime.datetime,
                  end: datetime.datetime) -> Booking:
    """
    Book `resource` for `member_id` over [start, end).

    Bookings that only touch an existing booking at an end point are allowed.

    Raises:
        InvalidBookingWindowError: the window is empty or outside opening hours.
        BookingConflictError: the window overlaps an existing booking.
    """
    if resource is None:
        raise InvalidInputError("resource must not be None")
    if isinstance(member_id, bool) or not isinstance(member_id, int) or member_id <= 0:
        raise InvalidInputError(f"member id must be a positive integer, got {member_id!r}")
    check_booking_window(start, end)

    if not resource.is_available_during(start, end):
        logger.warning("Booking conflict on resource %s for %s-%s", resource.resource_id, start, end)
        raise BookingConflictError(f"{resource.name} is not free from {start:%Y-%m-%d %H:%M} to {end:%H:%M}.")

    booking = Booking(resource.next_booking_id(), resource.resource_id, member_id, start, end)
    resource.add_booking(booking)
    logger.info("Booked %s (resource %s) for member %s: %s-%s",
                resource.name, resource.resource_id, member_id, start, end)
    return booking


def book_library_resource(library: Library, resource_id: int, member_id: int,
                          start: datetime.datetime, end: datetime.datetime) -> Booking:
    """Look up `resource_id` in `library` (ResourceNotFoundError if absent) and book it."""
    return book_resource(library.require_resource(resource_id), member_id, start, end)


def available_slots(resource: Resource, day: datetime.date) -> List[datetime.datetime]:
    """Start times of every free slot on `day`, in order."""
    slots = []
    start = datetime.datetime.combine(day, config.OPEN_TIME)
    closing = datetime.datetime.combine(day, config.CLOSE_TIME)
    while start + SLOT <= closing:
        if resource.is_available_during(start, start + SLOT):
            slots.append(start)
        start += SLOT
    return slots


def slots_for_range(resource: Resource, first_day: datetime.date,
                    last_day: datetime.date) -> Dict[datetime.date, List[datetime.time]]:
    """Free slot start times per day for every day from `first_day` to `last_day` inclusive."""
    free: Dict[datetime.date, List[datetime.time]] = {}
    day = first_day
    while day <= last_day:
        free[day] = [slot.time() for slot in available_slots(resource, day)]
        day += datetime.timedelta(days=1)
    return free


def bookings_for_member(library: Library, member_id: int) -> List[Booking]:
    """Every booking `member_id` holds in `library`, earliest first."""
    found = [booking
             for resource in library.resources.values()
             for booking in resource.bookings.values()
             if booking.member_id == member_id]
    return sorted(found, key=lambda b: (b.start, b.resource_id))


def review_resource(library: Library, resource_id: int, member_id: int, rating: int, text: str) -> Review:
    """
    Record a member's review of a resource they have booked.

    Raises:
        ResourceNotFoundError: unknown resource id.
        NoBookingError: the member holds no booking on the resource.
        InvalidReviewError: rating outside 1-5 or blank text.
    """
    resource = library.require_resource(resource_id)
    if not any(b.member_id == member_id for b in resource.bookings.values()):
        logger.warning("Member %s tried to review %s without a booking", member_id, resource.name)
        raise NoBookingError(f"Member {member_id} has no booking on {resource.name}.")
    review = resource.add_review(member_id, rating, text)
    logger.info("Member %s reviewed %s (%d/5)", member_id, resource.name, review.rating)
    return review
