"""
system.py

The library system: registered branches and members, and the borrowing policy
that ties member accounts, copy lending state and waitlists together.
"""

from __future__ import annotations
import datetime
import logging
import types
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from city_library import config
from city_library.catalog import Copy, Media, Review
from city_library.exceptions import (
    BorrowingNotAllowedError,
    DuplicateEntityError,
    InvalidAccountError,
    InvalidInputError,
    LibraryNotFoundError,
    LoanLimitError,
    MemberNotFoundError,
    NotBorrowerError,
    OverdueBlockError,
)
from city_library.library import Library
from city_library.members import Member, validate_member_fields

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = ["date", "member_id", "media_id", "barcode", "action", "due_date"]


class BorrowStatus(Enum):
    BORROWED = "borrowed"
    WAITLISTED = "waitlisted"


@dataclass(frozen=True)
class BorrowOutcome:
    """What a borrow request did: lent a copy, or put the member on the waitlist."""
    status: BorrowStatus
    media: Media
    copy: Optional[Copy] = None
    due_date: Optional[datetime.date] = None
    waitlist_position: Optional[int] = None


@dataclass(frozen=True)
class ReturnOutcome:
    media: Media
    copy: Copy
    review: Optional[Review] = None
    reassigned_to: Optional[Member] = None


class LibrarySystem:
    """
    LibrarySystem owns every branch and member of the city library and applies
    the borrowing policy.

    The system never reads the clock: every borrow or return is told what
    "today" is. State changes are recorded in an in-memory activity log kept as
    a pandas DataFrame (`activity_log_df`) for reporting.
    """

    def __init__(self,
                 name: str,
                 loan_days: int = config.DEFAULT_LOAN_DAYS,
                 max_active_loans: int = config.MAX_ACTIVE_LOANS):
        """
        Args:
            name: display name of the system.
            loan_days: days until a new loan is due.
            max_active_loans: most copies a member may hold at once.
        """
        if name is None or not str(name).strip():
            raise InvalidInputError("Library system name must not be blank")
        if int(loan_days) <= 0:
            raise InvalidInputError(f"loan_days must be positive, got {loan_days}")
        if int(max_active_loans) <= 0:
            raise InvalidInputError(f"max_active_loans must be positive, got {max_active_loans}")
        self.name = str(name).strip()
        self.loan_days = int(loan_days)
        self.max_active_loans = int(max_active_loans)

        self._libraries: Dict[str, Library] = {}
        self._members: Dict[int, Member] = {}
        self._next_member_id = config.FIRST_MEMBER_ID

        self.activity_log_df = pd.DataFrame(columns=ACTIVITY_COLUMNS)

    # ---------------- Libraries ----------------
    @property
    def libraries(self) -> Mapping[str, Library]:
        return types.MappingProxyType(self._libraries)

    def add_library(self, library: Library) -> Library:
        if library is None:
            raise InvalidInputError("library must not be None")
        if library.library_id in self._libraries:
            raise DuplicateEntityError(f"A library with id {library.library_id} already exists")
        self._libraries[library.library_id] = library
        logger.info("Added library %s ('%s')", library.library_id, library.name)
        return library

    def require_library(self, library_id: str) -> Library:
        library = self._libraries.get(library_id)
        if library is None:
            raise LibraryNotFoundError(f"Library not found: {library_id}")
        return library

    # ---------------- Members ----------------
    @property
    def members(self) -> Mapping[int, Member]:
        return types.MappingProxyType(self._members)

    def add_member(self, member: Member) -> Member:
        """
        Add an already constructed member. The member's loan limit is reset to
        the system's.

        Raises:
            DuplicateEntityError: if the id is taken, or another member has the
                same full name or email (case-insensitive).
        """
        if member is None:
            raise InvalidInputError("member must not be None")
        if member.member_id in self._members:
            raise DuplicateEntityError(f"A member with id {member.member_id} already exists")
        self._check_unique_identity(member.full_name, member.email)
        member.max_active_loans = self.max_active_loans
        self._members[member.member_id] = member
        # keep generated ids clear of members added with explicit ids
        self._next_member_id = max(self._next_member_id, member.member_id)
        logger.info("Added member %s (%s)", member.member_id, member.full_name)
        return member

    def register_member(self, first_name: str, last_name: str, phone: str, email: str, pin: str) -> Member:
        """
        Register a new member with the next generated id (1001, 1002, ...).

        Raises:
            InvalidAccountError: if a field is missing or malformed.
            DuplicateEntityError: if the name or email is already registered.
        """
        validate_member_fields(first_name, last_name, phone, email, pin)
        self._check_unique_identity(f"{str(first_name).strip()} {str(last_name).strip()}", str(email).strip())
        member = Member(self._generate_member_id(), first_name, last_name, phone, email, pin,
                        can_borrow=True, max_active_loans=self.max_active_loans)
        return self.add_member(member)

    def _check_unique_identity(self, full_name: str, email: str) -> None:
        for existing in self._members.values():
            if existing.full_name.lower() == full_name.lower() or existing.email.lower() == email.lower():
                logger.warning("Rejected duplicate account for %s <%s>", full_name, email)
                raise DuplicateEntityError("A member with the same name or email is already registered.")

    def _generate_member_id(self) -> int:
        self._next_member_id += 1
        return self._next_member_id

    def find_member_by_id(self, member_id: int) -> Optional[Member]:
        if isinstance(member_id, bool) or not isinstance(member_id, int) or member_id <= 0:
            raise InvalidInputError(f"member id must be a positive integer, got {member_id!r}")
        return self._members.get(member_id)

    def require_member(self, member_id: int) -> Member:
        member = self.find_member_by_id(member_id)
        if member is None:
            raise MemberNotFoundError(f"Member not found: {member_id}")
        return member

    def authenticate(self, member_id: int, pin: str) -> Member:
        """Log a member in by id and plaintext PIN."""
        member = self.require_member(member_id)
        if pin is None or not member.check_pin(pin):
            logger.warning("Incorrect PIN for member %s", member_id)
            raise InvalidAccountError("Incorrect member id or PIN.")
        logger.debug("Member %s signed in", member_id)
        return member

    # ---------------- Borrowing policy ----------------
    def has_overdue_media(self, member: Member, today: datetime.date) -> bool:
        """True if any copy in any branch is on loan to `member` and past due on `today`."""
        for library in self._libraries.values():
            for media in library.media:
                for copy in media.copies:
                    if copy.borrower_id == member.member_id and copy.is_overdue(today):
                        return True
        return False

    def borrow_media(self, library: Library, media_id: str, member: Member, today: datetime.date) -> BorrowOutcome:
        """
        Lend a copy of `media_id` to `member`, or waitlist the member when every
        copy is out.

        A member found holding overdue copies is blocked from borrowing until
        those copies are returned.

        Raises:
            BorrowingNotAllowedError: the member is blocked.
            LoanLimitError: the member is at the active-loan limit.
            OverdueBlockError: the member has overdue copies.
            MediaNotFoundError: the media id is not in this library.
        """
        if library is None or member is None or today is None:
            raise InvalidInputError("library, member and today are required")

        if not member.can_borrow:
            logger.warning("Member %s is blocked from borrowing", member.member_id)
            raise BorrowingNotAllowedError(f"Member {member.member_id} is not allowed to borrow.")

        if not member.under_loan_limit(self.max_active_loans):
            logger.warning("Member %s is at the loan limit (%d)", member.member_id, self.max_active_loans)
            raise LoanLimitError(
                f"Member {member.member_id} already has {member.active_loan_count()} active loans "
                f"(limit {self.max_active_loans}).")

        if self.has_overdue_media(member, today):
            member.block_borrowing()
            self._log(today, member.member_id, "", "", "block")
            raise OverdueBlockError(
                f"Member {member.member_id} has overdue media and cannot borrow until it is returned.")

        media = library.require_media(media_id)
        copy = media.first_available_copy()
        if copy is None:
            media.join_waitlist(member)
            position = len(media.waitlist)
            self._log(today, member.member_id, media.media_id, "", "waitlist")
            logger.info("No copy of '%s' available; member %s is #%d on the waitlist",
                        media.title, member.member_id, position)
            return BorrowOutcome(BorrowStatus.WAITLISTED, media, waitlist_position=position)

        due = today + datetime.timedelta(days=self.loan_days)
        # member side first: it is the only step that can still refuse the loan
        member.add_borrowed_copy(copy.barcode, due)
        copy.borrow(member.member_id, due)
        self._log(today, member.member_id, media.media_id, copy.barcode, "borrow", due)
        logger.info("Lent %s ('%s') to member %s until %s", copy.barcode, media.title, member.member_id, due)
        return BorrowOutcome(BorrowStatus.BORROWED, media, copy=copy, due_date=due)

    def return_media(self,
                     library: Library,
                     media_id: str,
                     copy_barcode: str,
                     member: Member,
                     today: datetime.date,
                     rating: Optional[int] = None,
                     review_text: Optional[str] = None) -> ReturnOutcome:
        """
        Take back a copy from the member who borrowed it.

        The copy goes straight to the front of the waitlist when anyone is
        waiting. A review is recorded only when both a rating and non-blank text
        are given; partial review data is ignored.

        Raises:
            InvalidReviewError: a complete review has a rating outside 1-5.
            MediaNotFoundError / CopyNotFoundError: unknown media or barcode.
            NotBorrowerError: the copy is not on loan to this member.
        """
        if library is None or member is None or today is None or copy_barcode is None:
            raise InvalidInputError("library, copy barcode, member and today are required")

        review = None
        if rating is not None and review_text is not None and str(review_text).strip():
            # validated up front so a bad review rejects the whole return
            review = Review(member.member_id, rating, review_text)

        media = library.require_media(media_id)
        copy = media.copy(copy_barcode)
        if copy.borrower_id != member.member_id:
            logger.warning("Member %s tried to return %s, which is not on loan to them",
                           member.member_id, copy_barcode)
            raise NotBorrowerError(f"Copy {copy_barcode} is not on loan to member {member.member_id}.")

        copy.return_copy()
        member.remove_borrowed_copy(copy.barcode)
        self._log(today, member.member_id, media.media_id, copy.barcode, "return")
        logger.info("Member %s returned %s ('%s')", member.member_id, copy.barcode, media.title)

        if not self.has_overdue_media(member, today):
            member.allow_borrowing()

        reassigned_to = self._serve_waitlist(media, copy, today)

        if review is not None:
            review = media.add_review(review.member_id, review.rating, review.text)
        return ReturnOutcome(media, copy, review=review, reassigned_to=reassigned_to)

    def _serve_waitlist(self, media: Media, copy: Copy, today: datetime.date) -> Optional[Member]:
        """
        Hand a just-returned copy to the first waiting member, if any.

        A waiting member who is blocked or at the loan limit leaves the
        waitlist without the copy, which stays on the shelf.
        """
        waiting = media.poll_next_from_waitlist()
        if waiting is None:
            return None
        if not waiting.can_borrow:
            logger.warning("Member %s left the waitlist for '%s': blocked from borrowing",
                           waiting.member_id, media.title)
            return None
        if not waiting.under_loan_limit(self.max_active_loans):
            logger.warning("Member %s left the waitlist for '%s': at the loan limit",
                           waiting.member_id, media.title)
            return None
        due = today + datetime.timedelta(days=self.loan_days)
        waiting.add_borrowed_copy(copy.barcode, due)
        copy.borrow(waiting.member_id, due)
        self._log(today, waiting.member_id, media.media_id, copy.barcode, "reassign", due)
        logger.info("Copy %s passed to waitlisted member %s until %s", copy.barcode, waiting.member_id, due)
        return waiting

    def find_borrowed_items(self, library: Library, member: Member) -> List[Tuple[Media, Copy]]:
        """All (media, copy) pairs in `library` currently on loan to `member`."""
        return [(media, copy)
                for media in library.media
                for copy in media.copies
                if copy.borrower_id == member.member_id]

    # ---------------- Activity log ----------------
    def _log(self, today: datetime.date, member_id: int, media_id: str, barcode: str, action: str,
             due_date: Optional[datetime.date] = None) -> None:
        new_row = {"date": today.isoformat(), "member_id": member_id, "media_id": media_id, "barcode": barcode,
                   "action": action, "due_date": due_date.isoformat() if due_date else ""}
        if self.activity_log_df.empty:
            self.activity_log_df = pd.DataFrame([new_row], columns=ACTIVITY_COLUMNS)
        else:
            self.activity_log_df = pd.concat([self.activity_log_df, pd.DataFrame([new_row])], ignore_index=True)
