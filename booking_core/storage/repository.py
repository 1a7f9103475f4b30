"""
Storage collaborator interface.

The admission stages only read through this interface. Writes go through
``save``, which is responsible for committing a booking atomically with
respect to its ``(provider_ref, date)`` partition.
"""

import datetime as dt
from typing import Optional, Protocol

from booking_core.schemas.booking_schema import Booking, BookingDraft
from booking_core.schemas.party_schema import Customer, Provider


class BookingRepository(Protocol):
    """Read side used by the admission pipeline."""

    async def get_customer(self, customer_ref: str) -> Optional[Customer]:
        ...

    async def get_provider(self, provider_ref: str) -> Optional[Provider]:
        ...

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        ...

    async def find_active_bookings(
        self,
        provider_ref: str,
        day: dt.date,
        exclude_id: Optional[str] = None,
    ) -> list[Booking]:
        """Coarse filter: the provider's non-cancelled, non-completed bookings on ``day``."""
        ...


class BookingStore(BookingRepository, Protocol):
    """Read side plus the atomic write."""

    async def save(self, booking: BookingDraft) -> Booking:
        """Persist a validated booking.

        Raises:
            ConcurrentConflict: if an overlapping booking for the same
                provider was committed after the admission pre-check.
        """
        ...
