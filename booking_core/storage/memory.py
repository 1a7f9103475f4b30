"""
In-memory booking store.

Stands in for the document database in tests and the demo. Reads yield to
the event loop like real I/O would, so concurrent admissions interleave the
same way they do against a database. ``save`` is the atomic admission unit:
writes are serialized per ``(provider_ref, date)`` and the overlap check is
repeated under the partition lock right before the commit.
"""

import asyncio
import datetime as dt
import logging
import uuid
from typing import Optional

from booking_core.admission.conflicts import conflict_error, find_overlap
from booking_core.config import settings
from booking_core.errors import ConcurrentConflict
from booking_core.schemas.booking_schema import Booking, BookingDraft
from booking_core.schemas.party_schema import Customer, Provider

logger = logging.getLogger(__name__)


class InMemoryBookingStore:
    def __init__(
        self,
        query_timeout_sec: Optional[float] = None,
        latency_sec: float = 0.0,
    ) -> None:
        self._customers: dict[str, Customer] = {}
        self._providers: dict[str, Provider] = {}
        self._bookings: dict[str, Booking] = {}
        self._locks: dict[tuple[str, dt.date], asyncio.Lock] = {}
        self._query_timeout = (
            settings.storage.query_timeout_sec if query_timeout_sec is None else query_timeout_sec
        )
        self._latency = latency_sec

    # ------------------------------------------------------------------ #
    # Seeding
    # ------------------------------------------------------------------ #

    def add_customer(self, customer: Customer) -> Customer:
        self._customers[customer.id] = customer
        return customer

    def add_provider(self, provider: Provider) -> Provider:
        self._providers[provider.id] = provider
        return provider

    def add_booking(self, booking: Booking) -> Booking:
        """Insert a booking as-is, bypassing admission. Used to seed schedules."""
        self._bookings[booking.id] = booking
        return booking

    def reset(self) -> None:
        """Clear all records. Used by test fixtures for isolation."""
        self._customers.clear()
        self._providers.clear()
        self._bookings.clear()
        self._locks.clear()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def _io(self) -> None:
        await asyncio.sleep(self._latency)

    async def get_customer(self, customer_ref: str) -> Optional[Customer]:
        await self._io()
        return self._customers.get(customer_ref)

    async def get_provider(self, provider_ref: str) -> Optional[Provider]:
        await self._io()
        return self._providers.get(provider_ref)

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        await self._io()
        return self._bookings.get(booking_id)

    async def find_active_bookings(
        self,
        provider_ref: str,
        day: dt.date,
        exclude_id: Optional[str] = None,
    ) -> list[Booking]:
        async def query() -> list[Booking]:
            await self._io()
            return self._active_on(provider_ref, day, exclude_id)

        return await asyncio.wait_for(query(), timeout=self._query_timeout)

    def _active_on(
        self, provider_ref: str, day: dt.date, exclude_id: Optional[str]
    ) -> list[Booking]:
        return sorted(
            (
                b for b in self._bookings.values()
                if b.provider_ref == provider_ref
                and b.schedule.date == day
                and b.is_active
                and b.id != exclude_id
            ),
            key=lambda b: b.schedule.start_time,
        )

    def bookings_for(self, provider_ref: str) -> list[Booking]:
        return [b for b in self._bookings.values() if b.provider_ref == provider_ref]

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def _partition_lock(self, provider_ref: str, day: dt.date) -> asyncio.Lock:
        return self._locks.setdefault((provider_ref, day), asyncio.Lock())

    def _new_ref(self) -> str:
        return f"{settings.storage.booking_ref_prefix}-{uuid.uuid4().hex[:10].upper()}"

    async def save(self, booking: BookingDraft) -> Booking:
        """Commit a validated booking.

        Raises:
            ConcurrentConflict: if an overlapping active booking for the same
                cleaner was committed after the caller's pre-check.
        """
        async with self._partition_lock(booking.provider_ref, booking.schedule.date):
            await self._io()
            if booking.is_active:
                committed = self._active_on(
                    booking.provider_ref, booking.schedule.date, booking.id
                )
                other = find_overlap(booking, committed)
                if other is not None:
                    logger.warning(
                        "Write race on cleaner %s %s: booking %s already holds the slot",
                        booking.provider_ref, booking.schedule.date, other.id,
                    )
                    raise conflict_error(booking, other, ConcurrentConflict)

            now = dt.datetime.now(dt.timezone.utc)
            existing = self._bookings.get(booking.id) if booking.id else None
            stored = Booking.model_validate(
                {
                    **booking.model_dump(),
                    "id": booking.id or self._new_ref(),
                    "created_at": existing.created_at if existing else now,
                    "updated_at": now,
                }
            )
            self._bookings[stored.id] = stored
            logger.info("Booking %s saved (%s)", stored.id, stored.status.value)
            return stored
