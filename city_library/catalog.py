"""
catalog.py

Lendable media: titles, their physical copies, waitlists and reviews.
"""

from __future__ import annotations
import datetime
import logging
import uuid
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional, Tuple, TYPE_CHECKING

from city_library import config
from city_library.exceptions import (
    CopyNotAvailableError,
    CopyNotBorrowedError,
    CopyNotFoundError,
    InvalidInputError,
    InvalidMediaError,
    InvalidReviewError,
    StateConflictError,
)
from city_library.floor_map import Coordinate

if TYPE_CHECKING:
    from city_library.members import Member

logger = logging.getLogger(__name__)


class MediaType(Enum):
    BOOK = "BOOK"
    DVD = "DVD"
    BLURAY = "BLURAY"
    GAME = "GAME"
    EBOOK = "EBOOK"

    @classmethod
    def from_string(cls, value: str) -> "MediaType":
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidMediaError(f"Unknown media type: {value!r}") from None


class MediaCategory(Enum):
    FICTION = "FICTION"
    NON_FICTION = "NON_FICTION"
    SCIENCE = "SCIENCE"
    FANTASY = "FANTASY"
    HISTORY = "HISTORY"
    BIOGRAPHY = "BIOGRAPHY"
    CHILDREN = "CHILDREN"

    @classmethod
    def from_string(cls, value: str) -> "MediaCategory":
        try:
            return cls(str(value).strip().upper().replace("-", "_").replace(" ", "_"))
        except ValueError:
            raise InvalidMediaError(f"Unknown media category: {value!r}") from None


class CopyStatus(Enum):
    AVAILABLE = "AVAILABLE"
    BORROWED = "BORROWED"


@dataclass(frozen=True)
class Review:
    """A member's rating (1-5) and comment on a media item or resource."""
    member_id: int
    rating: int
    text: str

    def __post_init__(self):
        if isinstance(self.member_id, bool) or not isinstance(self.member_id, int) or self.member_id <= 0:
            raise InvalidReviewError(f"member id must be a positive integer, got {self.member_id!r}")
        if isinstance(self.rating, bool) or not isinstance(self.rating, int) or not 1 <= self.rating <= 5:
            raise InvalidReviewError(f"rating must be between 1 and 5, got {self.rating!r}")
        if self.text is None or not str(self.text).strip():
            raise InvalidReviewError("review text must not be blank")


class Copy:
    """
    One physical, lendable unit of a media title.

    A copy is either AVAILABLE, with no borrower and no due date, or BORROWED,
    with both. `borrow` and `return_copy` are the only transitions.
    """

    def __init__(self, barcode: str):
        if barcode is None or not str(barcode).strip():
            raise InvalidMediaError("copy barcode must not be blank")
        self.barcode = str(barcode)
        self.status = CopyStatus.AVAILABLE
        self.borrower_id: Optional[int] = None
        self.due_date: Optional[datetime.date] = None
        self._check()

    def _check(self) -> None:
        available = self.status is CopyStatus.AVAILABLE
        if not available == (self.borrower_id is None) == (self.due_date is None):
            raise StateConflictError(
                f"copy {self.barcode} is {self.status.value} with borrower={self.borrower_id} due={self.due_date}")

    @property
    def is_available(self) -> bool:
        return self.status is CopyStatus.AVAILABLE

    def borrow(self, member_id: int, due_date: datetime.date) -> None:
        if isinstance(member_id, bool) or not isinstance(member_id, int) or member_id <= 0:
            raise InvalidInputError(f"member id must be a positive integer, got {member_id!r}")
        if not isinstance(due_date, datetime.date):
            raise InvalidInputError(f"due date must be a date, got {due_date!r}")
        if self.status is not CopyStatus.AVAILABLE:
            raise CopyNotAvailableError(f"Copy {self.barcode} is not available.")
        self.status = CopyStatus.BORROWED
        self.borrower_id = member_id
        self.due_date = due_date
        self._check()

    def return_copy(self) -> None:
        if self.status is not CopyStatus.BORROWED:
            raise CopyNotBorrowedError(f"Copy {self.barcode} is not on loan.")
        self.status = CopyStatus.AVAILABLE
        self.borrower_id = None
        self.due_date = None
        self._check()

    def is_overdue(self, today: datetime.date) -> bool:
        return self.status is CopyStatus.BORROWED and self.due_date < today

    def __repr__(self) -> str:
        return f"Copy({self.barcode!r}, {self.status.value}, borrower={self.borrower_id}, due={self.due_date})"


class Media:
    """
    A catalog title with its copies, a FIFO waitlist and reviews.

    Args:
        title: non-blank title, stored stripped.
        creator: non-blank author/director/studio, stored stripped.
        kind: a MediaType or its name.
        category: a MediaCategory or its name.
        location: where the title is shelved on the branch floor map.
        media_id: catalog id; a random uuid4 string when omitted.
        copies: number of copies to stock, barcoded "<media id>-C<n>".
    """

    def __init__(self, title: str, creator: str, kind, category, location: Coordinate,
                 media_id: Optional[str] = None, copies: int = config.DEFAULT_COPIES_PER_MEDIA):
        if title is None or not str(title).strip():
            raise InvalidMediaError("title must not be blank")
        if creator is None or not str(creator).strip():
            raise InvalidMediaError("creator must not be blank")
        if not isinstance(location, Coordinate):
            raise InvalidMediaError(f"location must be a Coordinate, got {location!r}")
        if isinstance(copies, bool) or not isinstance(copies, int) or copies < 0:
            raise InvalidMediaError(f"copies must be a non-negative integer, got {copies!r}")
        if media_id is not None and not str(media_id).strip():
            raise InvalidMediaError("media id must not be blank")

        self.media_id = str(media_id) if media_id is not None else str(uuid.uuid4())
        self.title = str(title).strip()
        self.creator = str(creator).strip()
        self.kind = kind if isinstance(kind, MediaType) else MediaType.from_string(kind)
        self.category = category if isinstance(category, MediaCategory) else MediaCategory.from_string(category)
        self.location = location

        self._copies: Dict[str, Copy] = {}
        self._waitlist: Deque["Member"] = deque()
        self._reviews: List[Review] = []

        for i in range(1, copies + 1):
            self.add_copy(Copy(f"{self.media_id}-C{i}"))

    def _check(self) -> None:
        for key, copy in self._copies.items():
            if key != copy.barcode:
                raise StateConflictError(f"copy key {key} does not match barcode {copy.barcode}")

    # ---------------- Copies ----------------
    @property
    def copies(self) -> Tuple[Copy, ...]:
        return tuple(self._copies.values())

    def add_copy(self, copy: Copy) -> None:
        """Stock a copy; a barcode that is already stocked is ignored."""
        if copy is None:
            raise InvalidMediaError("copy must not be None")
        if copy.barcode not in self._copies:
            self._copies[copy.barcode] = copy
            self._check()

    def copy(self, barcode: str) -> Copy:
        try:
            return self._copies[barcode]
        except KeyError:
            raise CopyNotFoundError(f"Copy not found: {barcode}") from None

    def first_available_copy(self) -> Optional[Copy]:
        return next((c for c in self._copies.values() if c.is_available), None)

    def available_count(self) -> int:
        return sum(1 for c in self._copies.values() if c.is_available)

    # ---------------- Waitlist ----------------
    @property
    def waitlist(self) -> Tuple["Member", ...]:
        return tuple(self._waitlist)

    def has_waitlist(self) -> bool:
        return bool(self._waitlist)

    def join_waitlist(self, member: "Member") -> None:
        if member is None:
            raise InvalidInputError("member must not be None")
        if member in self._waitlist:
            logger.warning("Member %s is already waiting for '%s'", member.member_id, self.title)
        self._waitlist.append(member)

    def poll_next_from_waitlist(self) -> Optional["Member"]:
        """Remove and return the member at the front of the waitlist, or None."""
        if not self._waitlist:
            return None
        return self._waitlist.popleft()

    # ---------------- Reviews ----------------
    @property
    def reviews(self) -> Tuple[Review, ...]:
        return tuple(self._reviews)

    def add_review(self, member_id: int, rating: int, text: str) -> Review:
        review = Review(member_id, rating, text)
        self._reviews.append(review)
        return review

    def average_rating(self) -> Optional[float]:
        if not self._reviews:
            return None
        return sum(r.rating for r in self._reviews) / len(self._reviews)

    def __repr__(self) -> str:
        return f"Media({self.media_id!r}, {self.title!r}, {self.kind.value}, copies={len(self._copies)})"
