"""
Booking lifecycle operations.

Each operation builds the draft a collaborator would submit, runs it
through the admission pipeline and, when admitted, commits it through the
store. The pipeline's check is the fast, user-facing pre-check; the store's
partition-locked re-check at commit time is what keeps two racing requests
from both taking the same slot.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from booking_core.admission.pipeline import AdmissionPipeline
from booking_core.errors import AdmissionError, ConcurrentConflict, ImmutableBooking, ReferenceNotFound
from booking_core.logging_context import get_request_logger, new_request_id
from booking_core.schemas.booking_schema import (
    AdmissionWarning,
    Booking,
    BookingDraft,
    BookingStatus,
    PaymentStatus,
    Rating,
    Schedule,
)
from booking_core.storage.repository import BookingStore

logger = get_request_logger(__name__)

RESCHEDULED_REASON = "rescheduled"

# Set by the service on creation, whichever spelling the caller used.
_SERVER_OWNED_KEYS = frozenset({
    "id", "customer_ref", "customerRef", "status", "payment_status", "paymentStatus",
    "rating", "created_at", "createdAt", "updated_at", "updatedAt",
})


@dataclass
class BookingOutcome:
    """Result of a lifecycle operation."""

    success: bool
    message: str
    booking: Optional[Booking] = None
    error: Optional[AdmissionError] = None
    warnings: list[AdmissionWarning] = field(default_factory=list)

    @classmethod
    def failed(cls, error: AdmissionError, booking: Optional[Booking] = None) -> "BookingOutcome":
        return cls(success=False, message=error.message, booking=booking, error=error)


class BookingService:
    def __init__(self, store: BookingStore, pipeline: Optional[AdmissionPipeline] = None) -> None:
        self.store = store
        self.pipeline = pipeline or AdmissionPipeline(store)

    async def _admit_and_save(self, draft: BookingDraft, mode: str) -> BookingOutcome:
        new_request_id()
        result = await self.pipeline.admit(draft, mode)
        if not result.accepted:
            return BookingOutcome.failed(result.error)

        try:
            stored = await self.store.save(result.booking.booking)
        except ConcurrentConflict as exc:
            # Same remediation as a pre-check conflict: pick another slot.
            return BookingOutcome.failed(exc)

        return BookingOutcome(
            success=True,
            message=f"Booking saved. Reference number: {stored.id}.",
            booking=stored,
            warnings=result.warnings,
        )

    async def _load(self, booking_id: str) -> Union[Booking, BookingOutcome]:
        booking = await self.store.get_booking(booking_id)
        if booking is None:
            return BookingOutcome.failed(
                ReferenceNotFound(f"Booking {booking_id} not found.", field="id",
                                  context={"ref": booking_id})
            )
        return booking

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        return await self.store.get_booking(booking_id)

    async def create_booking(
        self,
        customer_ref: str,
        fields: dict[str, Any],
        awaiting_payment: bool = False,
    ) -> BookingOutcome:
        """Create a customer-initiated booking.

        Status and payment status always start at their initial values
        regardless of what ``fields`` holds.

        Raises:
            pydantic.ValidationError: If ``fields`` violates a field constraint
                (unknown service kind, duration under one hour, bad time format).
        """
        payload = {k: v for k, v in fields.items() if k not in _SERVER_OWNED_KEYS}
        draft = BookingDraft.model_validate(
            {
                **payload,
                "customer_ref": customer_ref,
                "status": (
                    BookingStatus.PAYMENT_PENDING if awaiting_payment else BookingStatus.PENDING
                ),
                "payment_status": PaymentStatus.PENDING,
                "rating": None,
            }
        )
        outcome = await self._admit_and_save(draft, "create")
        if outcome.success:
            logger.info(
                "Booking created: %s for %s with cleaner %s",
                outcome.booking.id, customer_ref, draft.provider_ref,
            )
        return outcome

    async def change_schedule(
        self,
        booking_id: str,
        schedule: Schedule,
        provider_ref: Optional[str] = None,
    ) -> BookingOutcome:
        """Move a booking to another slot and/or another cleaner, in place."""
        current = await self._load(booking_id)
        if isinstance(current, BookingOutcome):
            return current
        draft = current.model_copy(
            update={"schedule": schedule, "provider_ref": provider_ref or current.provider_ref}
        )
        return await self._admit_and_save(draft, "update")

    async def update_status(
        self, booking_id: str, status: Union[BookingStatus, str]
    ) -> BookingOutcome:
        """Assign a new status. Unknown statuses raise ``ValueError``."""
        new_status = BookingStatus(status)
        current = await self._load(booking_id)
        if isinstance(current, BookingOutcome):
            return current
        outcome = await self._admit_and_save(
            current.model_copy(update={"status": new_status}), "update"
        )
        if outcome.success:
            logger.info(
                "Booking %s status: %s -> %s",
                booking_id, current.status.value, new_status.value,
            )
        return outcome

    async def cancel_booking(self, booking_id: str, reason: Optional[str] = None) -> BookingOutcome:
        current = await self._load(booking_id)
        if isinstance(current, BookingOutcome):
            return current
        if current.status == BookingStatus.COMPLETED:
            return BookingOutcome.failed(
                ImmutableBooking(
                    "Cannot cancel a completed booking.",
                    field="status",
                    context={"status": current.status.value},
                ),
                booking=current,
            )
        update: dict[str, Any] = {"status": BookingStatus.CANCELLED}
        if reason:
            update["cancellation_reason"] = reason
        outcome = await self._admit_and_save(current.model_copy(update=update), "update")
        if outcome.success:
            logger.info("Booking cancelled: %s", booking_id)
        return outcome

    async def reschedule_booking(self, booking_id: str, schedule: Schedule) -> BookingOutcome:
        """Book a successor in a new slot, then cancel the original.

        The successor points back through ``rescheduled_from``. While it is
        admitted the original still holds its own slot.
        """
        current = await self._load(booking_id)
        if isinstance(current, BookingOutcome):
            return current
        if not current.is_active:
            return BookingOutcome.failed(
                ImmutableBooking(
                    f"A {current.status.value} booking cannot be rescheduled.",
                    field="schedule",
                    context={"status": current.status.value},
                ),
                booking=current,
            )

        successor = BookingDraft.model_validate(
            {
                **current.model_dump(exclude={"id", "created_at", "updated_at", "rating"}),
                "schedule": schedule.model_dump(),
                "rescheduled_from": current.id,
                "cancellation_reason": None,
            }
        )
        outcome = await self._admit_and_save(successor, "create")
        if not outcome.success:
            return outcome

        released = await self.cancel_booking(current.id, reason=RESCHEDULED_REASON)
        if not released.success:
            logger.error(
                "Booking %s rescheduled to %s but the original could not be cancelled: %s",
                current.id, outcome.booking.id, released.message,
            )
            return BookingOutcome.failed(released.error, booking=outcome.booking)

        logger.info("Booking rescheduled: %s -> %s", current.id, outcome.booking.id)
        outcome.message = (
            f"Booking {current.id} rescheduled to {schedule.date.isoformat()} "
            f"at {schedule.start_time}. New reference number: {outcome.booking.id}."
        )
        return outcome

    async def rate_booking(
        self, booking_id: str, score: int, review: Optional[str] = None
    ) -> BookingOutcome:
        """Attach a customer rating. Only completed bookings can be rated.

        Raises:
            pydantic.ValidationError: If ``score`` is outside 1-5.
        """
        rating = Rating(score=score, review=review, created_at=dt.datetime.now(dt.timezone.utc))
        current = await self._load(booking_id)
        if isinstance(current, BookingOutcome):
            return current
        return await self._admit_and_save(current.model_copy(update={"rating": rating}), "update")
