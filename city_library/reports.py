"""
reports.py

Tabular reports over the catalog, member loans, bookings and the activity log,
returned as pandas DataFrames.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional

import pandas as pd

from city_library.catalog import MediaCategory
from city_library.library import Library
from city_library.resources import Resource
from city_library.system import LibrarySystem

logger = logging.getLogger(__name__)

MEDIA_COLUMNS = ["Media ID", "Title", "Creator", "Kind", "Category", "Location",
                 "Copies", "Available", "Waitlist", "Avg Rating"]


def media_inventory(library: Library) -> pd.DataFrame:
    """
    Produce a DataFrame of the branch catalog.

    One row per title, with copy counts, waitlist length and the average
    rating (NaN when the title has no reviews).
    """
    rows = []
    for media in library.media:
        rating = media.average_rating()
        rows.append({
            "Media ID": media.media_id,
            "Title": media.title,
            "Creator": media.creator,
            "Kind": media.kind.value,
            "Category": media.category.value,
            "Location": str(media.location),
            "Copies": len(media.copies),
            "Available": media.available_count(),
            "Waitlist": len(media.waitlist),
            "Avg Rating": rating if rating is not None else float("nan"),
        })
    return pd.DataFrame(rows, columns=MEDIA_COLUMNS)


def search_media(library: Library, query: str) -> pd.DataFrame:
    """
    Search titles by title or creator using a case-insensitive substring match.

    Returns an empty DataFrame (with the inventory columns) for a blank query.
    """
    inventory = media_inventory(library)
    q = (query or "").strip()
    if q == "" or inventory.empty:
        return inventory.iloc[0:0]
    mask_title = inventory["Title"].astype(str).str.contains(q, case=False, na=False, regex=False)
    mask_creator = inventory["Creator"].astype(str).str.contains(q, case=False, na=False, regex=False)
    return inventory.loc[mask_title | mask_creator].reset_index(drop=True)


def available_media_by_category(library: Library, category) -> pd.DataFrame:
    """
    Titles in `category` with at least one copy on the shelf.

    `category` may be a MediaCategory or its name.
    """
    wanted = category if isinstance(category, MediaCategory) else MediaCategory.from_string(category)
    inventory = media_inventory(library)
    mask = (inventory["Category"] == wanted.value) & (inventory["Available"] > 0)
    return inventory.loc[mask].reset_index(drop=True)


def member_loans(system: LibrarySystem) -> pd.DataFrame:
    """
    Build a DataFrame summarizing members and their current loans.

    Returns columns: Member ID, Name, CanBorrow, BorrowedCount, BorrowedCopies
    (comma separated barcodes).
    """
    rows = []
    for member in system.members.values():
        barcodes = list(member.borrowed_copies)
        rows.append({
            "Member ID": member.member_id,
            "Name": member.full_name,
            "CanBorrow": member.can_borrow,
            "BorrowedCount": len(barcodes),
            "BorrowedCopies": ",".join(barcodes),
        })
    return pd.DataFrame(rows, columns=["Member ID", "Name", "CanBorrow", "BorrowedCount", "BorrowedCopies"])


def members_with_borrowed_media(system: LibrarySystem) -> List[Dict]:
    """
    Return the members who currently hold one or more copies.

    Each entry has the member ID, name and the list of borrowed barcodes.
    """
    loans = member_loans(system)
    loans = loans.loc[loans["BorrowedCount"] > 0]
    return [{"Member ID": row["Member ID"], "Name": row["Name"],
             "BorrowedCopies": row["BorrowedCopies"].split(",")}
            for _, row in loans.iterrows()]


def most_popular_category(system: LibrarySystem) -> Optional[str]:
    """
    Compute the most frequently borrowed category from the activity log.

    Loans handed on from a waitlist count as borrows. Returns None when
    nothing has been borrowed yet.
    """
    log = system.activity_log_df
    borrows = log[log["action"].isin(["borrow", "reassign"])]
    if borrows.empty:
        return None
    catalog = pd.DataFrame(
        [{"media_id": media.media_id, "Category": media.category.value}
         for library in system.libraries.values() for media in library.media],
        columns=["media_id", "Category"])
    merged = borrows.merge(catalog, on="media_id", how="left")
    merged["Category"] = merged["Category"].fillna("").astype(str)
    counts = merged.groupby("Category").size().reset_index(name="count")
    counts = counts[counts["Category"] != ""]
    if counts.empty:
        return None
    # ties go to the alphabetically first category
    top = counts.sort_values(["count", "Category"], ascending=[False, True]).iloc[0]
    return top["Category"]


def reviews_table(item) -> pd.DataFrame:
    """Reviews of a Media or Resource in the order they were written."""
    rows = [{"Member ID": r.member_id, "Rating": r.rating, "Review": r.text} for r in item.reviews]
    return pd.DataFrame(rows, columns=["Member ID", "Rating", "Review"])


def resource_schedule(resource: Resource) -> pd.DataFrame:
    """Bookings on `resource`, earliest first."""
    rows = [{"Booking ID": b.booking_id, "Member ID": b.member_id, "Start": b.start, "End": b.end}
            for b in resource.sorted_bookings()]
    return pd.DataFrame(rows, columns=["Booking ID", "Member ID", "Start", "End"])
