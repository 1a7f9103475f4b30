"""
Admission engine demo entry point.

Seeds an in-memory store with one verified cleaner and one existing
booking, then runs a handful of drafts through the booking service and
prints each decision.

Usage:
    Demo run:     python main.py
    JSON output:  python main.py --json
"""

import argparse
import asyncio
import datetime as dt
import json

from booking_core.config import settings
from booking_core.schemas.booking_schema import Booking
from booking_core.schemas.party_schema import Customer, Provider
from booking_core.services.booking_service import BookingService
from booking_core.storage.memory import InMemoryBookingStore


def _fields(day: dt.date, start: str, hours: int, total: float = 1050.0) -> dict:
    return {
        "providerRef": "cleaner-1",
        "serviceKind": "deep_cleaning",
        "schedule": {"date": day.isoformat(), "startTime": start, "durationHours": hours},
        "address": {
            "street": "12 Ngong Road",
            "city": "Nairobi",
            "state": "Nairobi",
            "coordinates": {"lat": -1.2921, "lng": 36.8219},
        },
        "pricing": {"baseAmount": 1000, "extraCharges": 200, "discount": 150, "totalAmount": total},
    }


def _seed(store: InMemoryBookingStore, day: dt.date) -> None:
    store.add_customer(Customer(id="customer-1", name="Achieng Otieno"))
    store.add_provider(Provider(id="cleaner-1", name="Wanjiru K.", is_verified=True))
    store.add_booking(
        Booking.model_validate(
            {"id": "BK-SEED", "customerRef": "customer-1", **_fields(day, "10:00", 2)}
        )
    )


async def run_demo(as_json: bool = False) -> list[dict]:
    store = InMemoryBookingStore()
    service = BookingService(store)
    day = dt.date.today() + dt.timedelta(days=7)
    _seed(store, day)

    attempts = [
        ("overlapping 11:00 for 1h", _fields(day, "11:00", 1)),
        ("abutting 12:00 for 1h", _fields(day, "12:00", 1)),
        ("total off by 10", _fields(day, "14:00", 1, total=1060.0)),
    ]
    report = []
    for label, fields in attempts:
        outcome = await service.create_booking("customer-1", fields)
        entry = {
            "attempt": label,
            "accepted": outcome.success,
            "message": outcome.message,
        }
        if outcome.error is not None:
            entry["error"] = outcome.error.to_dict()
        if outcome.booking is not None:
            entry["booking"] = outcome.booking.to_document()
        report.append(entry)
        if not as_json:
            status = "ACCEPTED" if outcome.success else f"REJECTED ({outcome.error.code})"
            print(f"{label:<28} {status:<34} {outcome.message}")

    if as_json:
        print(json.dumps(report, indent=2))
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=f"{settings.service_name} demo")
    parser.add_argument("--json", action="store_true", help="print decisions as JSON")
    args = parser.parse_args()
    asyncio.run(run_demo(as_json=args.json))
