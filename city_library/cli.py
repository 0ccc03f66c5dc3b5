"""
cli.py

Interactive console session for the city library: sign in, then browse the
catalog, borrow and return media, book resources and find routes.
"""

from __future__ import annotations
import argparse
import datetime
import logging
from pathlib import Path
from typing import List, Optional

from city_library import config, plots, reports
from city_library.demo import build_demo_system
from city_library.exceptions import LibraryError
from city_library.library import Library
from city_library.members import Member
from city_library.routes import RouteResult, route_to_media, route_to_resource
from city_library.scheduling import SLOT, book_resource, bookings_for_member, review_resource, slots_for_range
from city_library.system import BorrowStatus, LibrarySystem

logger = logging.getLogger(__name__)


def input_prompt(prompt: str) -> str:
    """
    Wrapper around built-in input() that returns a stripped string and handles interrupts.

    Returns an empty string on EOF/KeyboardInterrupt.
    """
    try:
        return input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return ""


def read_int(prompt: str) -> Optional[int]:
    raw = input_prompt(prompt)
    return int(raw) if raw.isdigit() else None


def read_date(prompt: str) -> Optional[datetime.date]:
    try:
        return datetime.date.fromisoformat(input_prompt(prompt))
    except ValueError:
        return None


def print_sign_in_menu():
    print("\n--- Sign in ---")
    print("1. Register")
    print("2. Log in")
    print("0. Exit")


def print_menu():
    """
    Print the home menu to stdout.

    This function only prints available options and does not return a value.
    """
    print("\n--- City Library ---")
    print("1. List media")
    print("2. Search media by title/creator")
    print("3. Available media by category")
    print("4. Borrow media")
    print("5. Return media")
    print("6. My loans and bookings")
    print("7. List resources")
    print("8. Book a resource")
    print("9. Free slots for a resource")
    print("10. Bookings on a resource")
    print("11. Review a resource")
    print("12. Show reviews")
    print("13. Route to media")
    print("14. Route to resource")
    print("15. Reports")
    print("0. Log out")


def sign_in_loop(system: LibrarySystem) -> Optional[Member]:
    """Register or log in; returns the signed-in member, or None to exit."""
    while True:
        print_sign_in_menu()
        choice = input_prompt("Choose (0-2): ")
        if choice in ("0", ""):
            return None
        try:
            if choice == "1":
                member = system.register_member(input_prompt("First name: "), input_prompt("Last name: "),
                                                input_prompt("Phone (11 digits): "), input_prompt("Email: "),
                                                input_prompt("PIN (4 digits): "))
                print(f"Welcome, {member.full_name}! Your member id is {member.member_id}.")
                return member
            elif choice == "2":
                member_id = read_int("Member ID: ")
                if member_id is None:
                    print("Member ID must be a number.")
                    continue
                member = system.authenticate(member_id, input_prompt("PIN: "))
                print(f"Welcome back, {member.full_name}.")
                return member
            else:
                print("Unknown choice. Try again.")
        except LibraryError as e:
            print(f"Error: {e}")


def print_route(result: RouteResult, label: str, out_dir: Optional[Path] = None) -> None:
    if not result.found:
        print(f"No path could be found from the entrance to {label}.")
        return
    print("\nMap legend: # = wall | S = entrance | X = target | * = path\n")
    for row in result.render():
        print("  " + row)
    directions = result.directions()
    if not directions:
        print("Path is trivial (already at the target).")
    else:
        print("\nStep-by-step directions from entrance to target:")
        for i, step in enumerate(directions, start=1):
            print(f"  {i}) {step}")
    print(f"\nRoute found to {label} at {result.goal}.")
    if out_dir is not None:
        name = f"route_{result.goal.row}_{result.goal.col}.png"
        saved = plots.plot_route(result.floor_map, result.path, Path(out_dir) / name, title=f"Route to {label}")
        print(f"Route figure saved to {saved}")


def print_reviews(label: str, item) -> None:
    table = reports.reviews_table(item)
    if table.empty:
        print(f"{label} has no reviews yet.")
        return
    print(f"\n--- Reviews for {label} ---")
    for _, r in table.iterrows():
        print(f"* {r['Rating']}/5 by {r['Member ID']}: {r['Review']}")


def cli_loop(system: LibrarySystem, library: Library, member: Member, today: datetime.date,
             out_dir: Optional[Path] = None):
    """
    Interactive command-loop for a signed-in member.

    Presents a text menu, accepts user input and invokes the library core.
    Errors from the core are printed and the loop carries on. When `out_dir`
    is given, routes and reports also write figures there.
    """
    while True:
        print_menu()
        choice = input_prompt("Choose (0-15): ")
        if choice in ("0", ""):
            print(f"Goodbye, {member.first_name}.")
            break
        try:
            handle_choice(choice, system, library, member, today, out_dir)
        except LibraryError as e:
            print(f"Error: {e}")


def return_flow(system: LibrarySystem, library: Library, member: Member, today: datetime.date) -> None:
    items = system.find_borrowed_items(library, member)
    if not items:
        print("You have nothing on loan here.")
        return
    for i, (media, copy) in enumerate(items, start=1):
        print(f"{i}. {media.title} ({copy.barcode}) due {copy.due_date}")
    idx = read_int(f"Choose item (1-{len(items)}, 0 to cancel): ")
    if not idx or idx > len(items):
        print("Cancelled.")
        return
    media, copy = items[idx - 1]
    rating = read_int("Rating 1-5 (Enter to skip): ")
    text = input_prompt("Review (Enter to skip): ")
    outcome = system.return_media(library, media.media_id, copy.barcode, member, today, rating, text)
    print(f"'{media.title}' returned.")
    if outcome.review is not None:
        print("Thanks for your review!")
    if outcome.reassigned_to is not None:
        print("The copy went to the next member on the waitlist.")


def reports_flow(system: LibrarySystem, library: Library, out_dir: Optional[Path] = None) -> None:
    print(reports.member_loans(system).to_string(index=False))
    holders = reports.members_with_borrowed_media(system)
    print(f"\nMembers with borrowed media: {len(holders)}")
    for h in holders:
        print(f"{h['Member ID']} - {h['Name']}: {', '.join(h['BorrowedCopies'])}")
    print("Most popular category:", reports.most_popular_category(system) or "N/A")
    if out_dir is None:
        return
    out_dir = Path(out_dir)
    saved = plots.plot_route(library.floor_map, (), out_dir / "floor_map.png", title=library.name)
    print(f"Floor map figure saved to {saved}")
    saved = plots.plot_loan_activity(system.activity_log_df, out_dir / "activity.png")
    print(f"Activity figure saved to {saved}" if saved else "No activity to plot yet.")


def handle_choice(choice: str, system: LibrarySystem, library: Library, member: Member,
                  today: datetime.date, out_dir: Optional[Path] = None) -> None:
    if choice == "1":
        inventory = reports.media_inventory(library)
        print(f"\nTotal media: {len(inventory)}")
        for _, m in inventory.iterrows():
            print(f"{m['Media ID']}: {m['Title']} | {m['Creator']} | {m['Kind']} | "
                  f"{m['Available']}/{m['Copies']} available | waitlist {m['Waitlist']}")
    elif choice == "2":
        q = input_prompt("Search query: ")
        res = reports.search_media(library, q)
        print(f"Found {len(res)} result(s):")
        for _, m in res.iterrows():
            print(f"{m['Media ID']}: {m['Title']} | {m['Creator']} | {m['Available']} available")
    elif choice == "3":
        res = reports.available_media_by_category(library, input_prompt("Category: "))
        print(f"Found {len(res)} available title(s):")
        for _, m in res.iterrows():
            print(f"{m['Media ID']}: {m['Title']} | {m['Creator']} | {m['Available']} available")
    elif choice == "4":
        outcome = system.borrow_media(library, input_prompt("Media ID: "), member, today)
        if outcome.status is BorrowStatus.BORROWED:
            print(f"'{outcome.media.title}' copy {outcome.copy.barcode} issued. Due on {outcome.due_date}.")
        else:
            print(f"No copy of '{outcome.media.title}' is available. "
                  f"You are #{outcome.waitlist_position} on the waitlist.")
    elif choice == "5":
        return_flow(system, library, member, today)
    elif choice == "6":
        if not member.borrowed_copies:
            print("No active loans.")
        for barcode, due in member.borrowed_copies.items():
            overdue = " (OVERDUE)" if due < today else ""
            print(f"{barcode} due {due}{overdue}")
        for booking in bookings_for_member(library, member.member_id):
            resource = library.require_resource(booking.resource_id)
            print(f"{resource.name}: {booking.start:%Y-%m-%d %H:%M}-{booking.end:%H:%M}")
    elif choice == "7":
        for resource in library.resources.values():
            print(f"{resource.resource_id}: {resource.name} ({resource.kind.value}) "
                  f"- {resource.description} at {resource.location}")
    elif choice == "8":
        resource = library.require_resource(read_int("Resource ID: ") or 0)
        day = read_date("Date (YYYY-MM-DD): ")
        try:
            at = datetime.time.fromisoformat(input_prompt("Start time (HH:MM): "))
        except ValueError:
            at = None
        if day is None or at is None:
            print("Please enter a valid date and time.")
            return
        start = datetime.datetime.combine(day, at)
        booking = book_resource(resource, member.member_id, start, start + SLOT)
        print(f"Booked {resource.name} on {booking.start:%Y-%m-%d} "
              f"from {booking.start:%H:%M} to {booking.end:%H:%M}.")
    elif choice == "9":
        resource = library.require_resource(read_int("Resource ID: ") or 0)
        first_day = read_date("From date (YYYY-MM-DD): ")
        if first_day is None:
            print("Please enter a valid date.")
            return
        last_day = read_date("To date (YYYY-MM-DD, Enter for the same day): ") or first_day
        for day, slots in slots_for_range(resource, first_day, last_day).items():
            print(f"Free slots for {resource.name} on {day}: " +
                  (", ".join(f"{s:%H:%M}" for s in slots) if slots else "none"))
    elif choice == "10":
        resource = library.require_resource(read_int("Resource ID: ") or 0)
        schedule = reports.resource_schedule(resource)
        if schedule.empty:
            print(f"{resource.name} has no bookings.")
        for _, b in schedule.iterrows():
            print(f"#{b['Booking ID']} member {b['Member ID']}: {b['Start']:%Y-%m-%d %H:%M}-{b['End']:%H:%M}")
    elif choice == "11":
        resource_id = read_int("Resource ID: ") or 0
        rating = read_int("Rating 1-5: ")
        review = review_resource(library, resource_id, member.member_id,
                                 rating if rating is not None else 0, input_prompt("Review: "))
        print(f"Thanks for your review ({review.rating}/5)!")
    elif choice == "12":
        kind = input_prompt("Reviews for (1) media or (2) resource: ")
        if kind == "1":
            media = library.require_media(input_prompt("Media ID: "))
            print_reviews(f"'{media.title}'", media)
        elif kind == "2":
            resource = library.require_resource(read_int("Resource ID: ") or 0)
            print_reviews(resource.name, resource)
        else:
            print("Cancelled.")
    elif choice == "13":
        media = library.require_media(input_prompt("Media ID: "))
        print_route(route_to_media(library, media), f'"{media.title}"', out_dir)
    elif choice == "14":
        resource = library.require_resource(read_int("Resource ID: ") or 0)
        print_route(route_to_resource(library, resource), f'"{resource.name}" ({resource.kind.value})', out_dir)
    elif choice == "15":
        reports_flow(system, library, out_dir)
    else:
        print("Unknown choice. Try again.")


def demo_run(today: Optional[datetime.date] = None,
             loan_days: int = config.DEFAULT_LOAN_DAYS,
             copies: int = config.DEFAULT_COPIES_PER_MEDIA,
             out_dir: Optional[Path] = None):
    """
    Start a demo interactive session on the demo branch.

    Members sign in, use the home menu and log out; exiting the sign-in menu
    ends the session.
    """
    system = build_demo_system(copies=copies, loan_days=loan_days)
    library = next(iter(system.libraries.values()))
    print(f"Welcome to {system.name}!")
    while True:
        member = sign_in_loop(system)
        if member is None:
            break
        cli_loop(system, library, member, today or datetime.date.today(), out_dir)
    print("Goodbye.")
    return system


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="City library console")
    parser.add_argument("--today", type=datetime.date.fromisoformat, default=None,
                        help="Date to run the session on (YYYY-MM-DD); defaults to the system date")
    parser.add_argument("--loan-days", type=int, default=config.DEFAULT_LOAN_DAYS,
                        help="Loan period in days")
    parser.add_argument("--copies", type=int, default=config.DEFAULT_COPIES_PER_MEDIA,
                        help="Copies stocked per demo title")
    parser.add_argument("--out", type=Path, default=None,
                        help="Output folder for route and activity figures")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    config.configure_logging(args.verbose)
    demo_run(today=args.today, loan_days=args.loan_days, copies=args.copies, out_dir=args.out)


if __name__ == "__main__":
    main()
