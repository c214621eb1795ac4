#!/usr/bin/env python3
from __future__ import annotations

import asyncio
import os
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py

What it does:
- Opens one booking session for a local user
- Lets you click slots, switch full-day mode, set resource and date
- Prints the selection and the current availability report after every step
"""

from facility_booking.application.exceptions import (
    BookingConflictError,
    BookingValidationError,
    SchedulingError,
)
from facility_booking.domain.entities.booking import EventDetails, ResourceKind, ResourceRef
from facility_booking.wiring.dependencies import (
    get_booking_use_case,
    get_identity_provider,
    get_slot_grid,
    new_booking_session,
)

DEMO_DETAILS = EventDetails(
    event_title="Local test event",
    event_description="Booked from the local harness",
    attendees=20,
    department_category="Engineering",
    department="Computer Science",
    faculty_incharge="Dr. Local",
    contact_number="9999999999",
    contact_email="local@example.com",
)


def _print_header() -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print("Slots: " + " ".join(get_slot_grid().labels))
    print("Type a slot (e.g. 10:00) to toggle it.")
    print("Commands: /resource <venue|bus> <id> | /resource turf <area>, /date YYYY-MM-DD,")
    print("          /full, /clear, /submit, /quit")
    print("-" * 60)


def _print_state(session) -> None:
    slots = session.selection.slots
    print(f"selection ({session.selection.duration_type}): {' '.join(slots) if slots else '(empty)'}")
    report = session.report
    if report.has_conflicts:
        print(f"CONFLICT: {report.message()}")
    elif report.warning:
        print(f"WARNING: {report.warning}")


async def _run() -> None:
    user_id = os.getenv("BOOKING_USER_ID", "local_user_1")
    email = os.getenv("BOOKING_USER_EMAIL", "local@example.com")
    identity = get_identity_provider().resolve(user_id, email)
    session = new_booking_session(identity)
    use_case = get_booking_use_case()
    _print_header()

    while True:
        try:
            text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not text:
            continue

        parts = text.split()
        cmd = parts[0].lower()
        try:
            if cmd in ("/quit", "/exit"):
                print("Bye!")
                return
            if cmd == "/resource" and len(parts) >= 3:
                kind = ResourceKind(parts[1].lower())
                value = " ".join(parts[2:])
                if kind == ResourceKind.turf:
                    resource = ResourceRef(kind=kind, sub_area=value)
                else:
                    resource = ResourceRef(kind=kind, resource_id=value, name=value)
                await session.update_context(resource=resource, details=DEMO_DETAILS)
            elif cmd == "/date" and len(parts) == 2:
                await session.update_context(booking_date=date.fromisoformat(parts[1]))
            elif cmd == "/full":
                await session.set_full_duration()
            elif cmd == "/clear":
                await session.clear_duration()
            elif cmd == "/submit":
                result = await use_case.submit(session)
                print(f"Submitted booking {result.booking.id} ({result.booking.start_time}-{result.booking.end_time})")
                if result.warning:
                    print(f"WARNING: {result.warning}")
                await session.update_context(details=DEMO_DETAILS)
            elif cmd.startswith("/"):
                print("Unknown command")
                continue
            else:
                await session.toggle(parts[0])
        except BookingConflictError as e:
            print(f"Submission refused: {e}")
        except (SchedulingError, BookingValidationError, ValueError) as e:
            print(f"Error: {e}")
        _print_state(session)


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
