"""
members.py

Library member accounts and the validation of their contact details.
"""

from __future__ import annotations
import datetime
import logging
import re
import types
from typing import Dict, Mapping

from city_library import config
from city_library.exceptions import InvalidAccountError, InvalidInputError, LoanLimitError

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"\d{11}")
PIN_RE = re.compile(r"\d{4}")


def validate_member_fields(first_name: str, last_name: str, phone: str, email: str, pin: str) -> None:
    """
    Check the fields of a new account.

    Raises:
        InvalidAccountError: naming the first field that is missing or malformed.
    """
    if first_name is None or not str(first_name).strip():
        raise InvalidAccountError("First name must not be blank.")
    if last_name is None or not str(last_name).strip():
        raise InvalidAccountError("Last name must not be blank.")
    if phone is None or not PHONE_RE.fullmatch(str(phone)):
        raise InvalidAccountError("Phone number must be exactly 11 digits.")
    if email is None or not str(email).strip() or "@" not in str(email):
        raise InvalidAccountError("Email must not be blank and must contain '@'.")
    if pin is None or not PIN_RE.fullmatch(str(pin)):
        raise InvalidAccountError("PIN must be exactly 4 digits.")


class Member:
    """
    A registered library member.

    Tracks the copies the member has on loan (barcode -> due date) and whether
    the member may currently borrow. The loan map never grows past
    `max_active_loans`.
    """

    def __init__(self, member_id: int, first_name: str, last_name: str, phone: str, email: str, pin: str,
                 can_borrow: bool = True, max_active_loans: int = config.MAX_ACTIVE_LOANS):
        if isinstance(member_id, bool) or not isinstance(member_id, int) or member_id <= 0:
            raise InvalidAccountError(f"Member id must be a positive integer, got {member_id!r}")
        validate_member_fields(first_name, last_name, phone, email, pin)
        self.member_id = member_id
        self.first_name = str(first_name).strip()
        self.last_name = str(last_name).strip()
        self.phone = str(phone)
        self.email = str(email).strip()
        self.pin = str(pin)
        self.can_borrow = bool(can_borrow)
        self.max_active_loans = max_active_loans
        self._borrowed_copies: Dict[str, datetime.date] = {}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def borrowed_copies(self) -> Mapping[str, datetime.date]:
        return types.MappingProxyType(self._borrowed_copies)

    def check_pin(self, pin: str) -> bool:
        return self.pin == pin

    def active_loan_count(self) -> int:
        return len(self._borrowed_copies)

    def under_loan_limit(self, maximum: int) -> bool:
        return self.active_loan_count() < maximum

    def allow_borrowing(self) -> None:
        if not self.can_borrow:
            logger.info("Borrowing restored for member %s", self.member_id)
        self.can_borrow = True

    def block_borrowing(self) -> None:
        if self.can_borrow:
            logger.info("Borrowing blocked for member %s", self.member_id)
        self.can_borrow = False

    def add_borrowed_copy(self, barcode: str, due: datetime.date) -> None:
        if barcode is None or not str(barcode).strip():
            raise InvalidInputError("barcode must not be blank")
        if not isinstance(due, datetime.date):
            raise InvalidInputError(f"due date must be a date, got {due!r}")
        if barcode not in self._borrowed_copies and not self.under_loan_limit(self.max_active_loans):
            raise LoanLimitError(
                f"Member {self.member_id} already has {self.active_loan_count()} active loans.")
        self._borrowed_copies[barcode] = due

    def remove_borrowed_copy(self, barcode: str) -> None:
        self._borrowed_copies.pop(barcode, None)

    def __repr__(self) -> str:
        return f"Member({self.member_id}, {self.full_name!r}, loans={self.active_loan_count()})"
