"""Shared test fixtures and helpers."""

import datetime as dt
from typing import Any, Optional

import pytest

from booking_core.admission.pipeline import AdmissionPipeline
from booking_core.schemas.booking_schema import Booking, BookingDraft
from booking_core.schemas.party_schema import Customer, Provider
from booking_core.services.booking_service import BookingService
from booking_core.storage.memory import InMemoryBookingStore

TODAY = dt.date(2025, 5, 1)
BOOKING_DAY = dt.date(2025, 6, 1)

CUSTOMER_ID = "customer-1"
PROVIDER_ID = "cleaner-1"
UNVERIFIED_ID = "cleaner-unverified"
UNAVAILABLE_ID = "cleaner-away"


def fixed_clock() -> dt.date:
    return TODAY


def booking_fields(
    start_time: str = "14:00",
    duration: int = 1,
    day: dt.date = BOOKING_DAY,
    provider_ref: str = PROVIDER_ID,
    customer_ref: str = CUSTOMER_ID,
    status: str = "pending",
    payment_status: str = "pending",
    pricing: Optional[dict[str, float]] = None,
    lat: Optional[float] = -1.2921,
    lng: Optional[float] = 36.8219,
    **extra: Any,
) -> dict[str, Any]:
    """Raw camelCase payload, as a collaborator would submit it."""
    coordinates = {}
    if lat is not None:
        coordinates["lat"] = lat
    if lng is not None:
        coordinates["lng"] = lng
    payload = {
        "customerRef": customer_ref,
        "providerRef": provider_ref,
        "serviceKind": "regular_cleaning",
        "schedule": {
            "date": day.isoformat(),
            "startTime": start_time,
            "durationHours": duration,
        },
        "address": {
            "street": "12 Ngong Road",
            "city": "Nairobi",
            "state": "Nairobi",
            "coordinates": coordinates,
        },
        "pricing": pricing or {
            "baseAmount": 1000,
            "extraCharges": 200,
            "discount": 150,
            "totalAmount": 1050,
        },
        "status": status,
        "paymentStatus": payment_status,
    }
    payload.update(extra)
    return payload


def make_draft(**kwargs: Any) -> BookingDraft:
    """Helper to create a BookingDraft with sensible defaults."""
    return BookingDraft.model_validate(booking_fields(**kwargs))


def make_booking(booking_id: str, **kwargs: Any) -> Booking:
    """Helper to create an already-persisted Booking for seeding."""
    return Booking.model_validate({"id": booking_id, **booking_fields(**kwargs)})


@pytest.fixture
def store():
    store = InMemoryBookingStore()
    store.add_customer(Customer(id=CUSTOMER_ID, name="Achieng Otieno"))
    store.add_provider(Provider(id=PROVIDER_ID, name="Wanjiru K.", is_verified=True))
    store.add_provider(Provider(id=UNVERIFIED_ID, name="Brian M.", is_verified=False))
    store.add_provider(
        Provider(id=UNAVAILABLE_ID, name="Faith N.", is_verified=True, is_available=False)
    )
    yield store
    store.reset()


@pytest.fixture
def seeded_store(store):
    """Cleaner-1 already holds 10:00-12:00 on the booking day."""
    store.add_booking(make_booking("BK-EXISTING", start_time="10:00", duration=2))
    return store


@pytest.fixture
def pipeline(seeded_store):
    return AdmissionPipeline(seeded_store, clock=fixed_clock)


@pytest.fixture
def service(seeded_store):
    return BookingService(seeded_store, AdmissionPipeline(seeded_store, clock=fixed_clock))
