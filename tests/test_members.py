import datetime

import pytest

from city_library.exceptions import InvalidAccountError, InvalidInputError, LoanLimitError
from city_library.members import Member, validate_member_fields

DUE = datetime.date(2025, 1, 24)
GOOD = dict(first_name="Ada", last_name="Lovelace", phone="01234567890", email="ada@example.com", pin="1815")


def make_member(**overrides):
    fields = dict(GOOD, **overrides)
    return Member(1001, **fields)


def test_valid_fields_pass():
    validate_member_fields(**GOOD)


@pytest.mark.parametrize("field,value", [
    ("first_name", ""),
    ("last_name", "   "),
    ("phone", "0123456789"),
    ("phone", "0123456789a"),
    ("email", "ada.example.com"),
    ("email", ""),
    ("pin", "123"),
    ("pin", "12a4"),
    ("pin", None),
])
def test_invalid_fields_rejected(field, value):
    with pytest.raises(InvalidAccountError):
        validate_member_fields(**dict(GOOD, **{field: value}))


def test_member_id_must_be_positive():
    with pytest.raises(InvalidAccountError):
        Member(0, **GOOD)


def test_names_are_stripped():
    member = make_member(first_name="  Ada ", last_name=" Lovelace")
    assert member.full_name == "Ada Lovelace"


def test_pin_check():
    member = make_member()
    assert member.check_pin("1815")
    assert not member.check_pin("0000")


def test_loans_are_tracked_and_read_only():
    member = make_member()
    member.add_borrowed_copy("M1-C1", DUE)
    assert member.borrowed_copies == {"M1-C1": DUE}
    assert member.active_loan_count() == 1
    with pytest.raises(TypeError):
        member.borrowed_copies["M1-C2"] = DUE
    member.remove_borrowed_copy("M1-C1")
    assert member.active_loan_count() == 0


def test_loan_map_never_exceeds_limit():
    member = Member(1001, max_active_loans=2, **GOOD)
    member.add_borrowed_copy("M1-C1", DUE)
    member.add_borrowed_copy("M1-C2", DUE)
    assert not member.under_loan_limit(2)
    with pytest.raises(LoanLimitError):
        member.add_borrowed_copy("M1-C3", DUE)
    assert set(member.borrowed_copies) == {"M1-C1", "M1-C2"}


def test_add_borrowed_copy_rejects_bad_values():
    member = make_member()
    with pytest.raises(InvalidInputError):
        member.add_borrowed_copy("", DUE)
    with pytest.raises(InvalidInputError):
        member.add_borrowed_copy("M1-C1", "soon")


def test_block_and_allow_borrowing():
    member = make_member()
    assert member.can_borrow
    member.block_borrowing()
    assert not member.can_borrow
    member.allow_borrowing()
    assert member.can_borrow
