import datetime

import pytest

from city_library.catalog import Copy, CopyStatus, Media, MediaCategory, MediaType, Review
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

DUE = datetime.date(2025, 1, 24)


def assert_consistent(copy):
    if copy.status is CopyStatus.AVAILABLE:
        assert copy.borrower_id is None and copy.due_date is None
    else:
        assert copy.borrower_id is not None and copy.due_date is not None


def make_media(copies=2, **kwargs):
    return Media("Dune", "Frank Herbert", "book", "fiction", Coordinate(1, 2), media_id="M9",
                 copies=copies, **kwargs)


def test_new_copy_is_available():
    copy = Copy("M1-C1")
    assert copy.is_available
    assert copy.borrower_id is None and copy.due_date is None


def test_borrow_then_return():
    copy = Copy("M1-C1")
    copy.borrow(1001, DUE)
    assert copy.status is CopyStatus.BORROWED
    assert copy.borrower_id == 1001 and copy.due_date == DUE
    copy.return_copy()
    assert copy.status is CopyStatus.AVAILABLE
    assert copy.borrower_id is None and copy.due_date is None


def test_borrow_twice_fails_and_keeps_state():
    copy = Copy("M1-C1")
    copy.borrow(1001, DUE)
    with pytest.raises(CopyNotAvailableError):
        copy.borrow(1002, DUE)
    assert copy.borrower_id == 1001


def test_return_available_copy_fails():
    with pytest.raises(CopyNotBorrowedError):
        Copy("M1-C1").return_copy()


@pytest.mark.parametrize("member_id,due", [(0, DUE), (-3, DUE), (True, DUE), (1001, None), (1001, "2025-01-24")])
def test_borrow_rejects_bad_arguments(member_id, due):
    copy = Copy("M1-C1")
    with pytest.raises(InvalidInputError):
        copy.borrow(member_id, due)
    assert copy.is_available


def test_state_stays_consistent_through_any_sequence():
    copy = Copy("M1-C1")
    for op in ["borrow", "borrow", "return", "return", "borrow", "return", "borrow"]:
        try:
            if op == "borrow":
                copy.borrow(1001, DUE)
            else:
                copy.return_copy()
        except (CopyNotAvailableError, CopyNotBorrowedError):
            pass
        assert_consistent(copy)


def test_overdue_only_after_due_date():
    copy = Copy("M1-C1")
    assert not copy.is_overdue(DUE + datetime.timedelta(days=30))
    copy.borrow(1001, DUE)
    assert not copy.is_overdue(DUE)
    assert copy.is_overdue(DUE + datetime.timedelta(days=1))


def test_media_stocks_barcoded_copies():
    media = make_media(copies=3)
    assert [c.barcode for c in media.copies] == ["M9-C1", "M9-C2", "M9-C3"]
    assert media.kind is MediaType.BOOK
    assert media.category is MediaCategory.FICTION
    assert media.available_count() == 3


def test_media_id_defaults_to_uuid():
    media = Media("Dune", "Frank Herbert", MediaType.BOOK, MediaCategory.FICTION, Coordinate(1, 2), copies=1)
    assert len(media.media_id) == 36
    assert media.copies[0].barcode.startswith(media.media_id)


def test_copy_lookup_and_first_available():
    media = make_media(copies=2)
    media.copy("M9-C1").borrow(1001, DUE)
    assert media.first_available_copy().barcode == "M9-C2"
    assert media.available_count() == 1
    with pytest.raises(CopyNotFoundError):
        media.copy("M9-C7")


def test_no_copies_means_none_available():
    media = make_media(copies=0)
    assert media.first_available_copy() is None


@pytest.mark.parametrize("field,value", [("title", " "), ("creator", ""), ("kind", "vinyl"), ("category", "poetry")])
def test_media_rejects_bad_fields(field, value):
    args = {"title": "Dune", "creator": "Frank Herbert", "kind": "book", "category": "fiction"}
    args[field] = value
    with pytest.raises(InvalidMediaError):
        Media(args["title"], args["creator"], args["kind"], args["category"], Coordinate(1, 1))


def test_waitlist_is_fifo(alice, bob, carol):
    media = make_media()
    media.join_waitlist(alice)
    media.join_waitlist(bob)
    media.join_waitlist(carol)
    assert media.has_waitlist()
    assert media.poll_next_from_waitlist() is alice
    assert media.poll_next_from_waitlist() is bob
    assert media.waitlist == (carol,)


def test_poll_empty_waitlist_returns_none():
    assert make_media().poll_next_from_waitlist() is None


def test_waitlist_accepts_repeat_member(alice):
    media = make_media()
    media.join_waitlist(alice)
    media.join_waitlist(alice)
    assert media.waitlist == (alice, alice)


def test_waitlist_rejects_none():
    with pytest.raises(InvalidInputError):
        make_media().join_waitlist(None)


def test_reviews_and_average_rating():
    media = make_media()
    assert media.average_rating() is None
    media.add_review(1001, 5, "Great")
    media.add_review(1002, 2, "Meh")
    assert len(media.reviews) == 2
    assert media.average_rating() == pytest.approx(3.5)


@pytest.mark.parametrize("member_id,rating,text", [(1001, 0, "x"), (1001, 6, "x"), (1001, 4, "  "), (0, 4, "x")])
def test_bad_review_is_rejected(member_id, rating, text):
    with pytest.raises(InvalidReviewError):
        Review(member_id, rating, text)
    media = make_media()
    with pytest.raises(InvalidReviewError):
        media.add_review(member_id, rating, text)
    assert media.reviews == ()


def test_mismatched_copy_key_is_reported():
    media = make_media(copies=1)
    media.copies[0].barcode = "elsewhere"
    with pytest.raises(StateConflictError):
        media.add_copy(Copy("M9-C2"))
