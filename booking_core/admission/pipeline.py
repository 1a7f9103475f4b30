"""
Admission pipeline: the single entry point collaborators call.

Stages run in a fixed order and the first failure is returned unchanged:

1. derivation   : location point and end time (pure, never fails)
2. references   : customer, cleaner, predecessor and, on update, the booking
3. pricing      : non-negative amounts and the total invariant
4. status       : status/payment/rating/date consistency
5. schedule     : overlap against the cleaner's other active bookings

Usage:
    pipeline = AdmissionPipeline(store)
    result = await pipeline.admit(draft, mode="create")
    if result.accepted:
        await store.save(result.booking.booking)
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from booking_core.admission.conflicts import ScheduleConflictDetector
from booking_core.admission.derivation import derive
from booking_core.admission.pricing import PricingInvariantValidator
from booking_core.admission.references import ReferenceIntegrityChecker
from booking_core.admission.status_guard import StatusTransitionGuard, business_today
from booking_core.errors import AdmissionError
from booking_core.logging_context import get_request_logger
from booking_core.schemas.booking_schema import AdmissionWarning, BookingDraft, ValidatedBooking
from booking_core.storage.repository import BookingRepository

logger = get_request_logger(__name__)

ADMISSION_MODES = ("create", "update")


@dataclass
class AdmissionResult:
    """Outcome of a single admission: a validated booking or the first failure."""
    accepted: bool
    booking: Optional[ValidatedBooking] = None
    error: Optional[AdmissionError] = None

    @property
    def warnings(self) -> list[AdmissionWarning]:
        return list(self.booking.warnings) if self.booking is not None else []

    def unwrap(self) -> ValidatedBooking:
        """Return the validated booking or raise the failure."""
        if self.error is not None:
            raise self.error
        assert self.booking is not None
        return self.booking

    @classmethod
    def rejected(cls, error: AdmissionError) -> "AdmissionResult":
        return cls(accepted=False, error=error)


class AdmissionPipeline:
    def __init__(
        self,
        repository: BookingRepository,
        clock: Callable[[], dt.date] = business_today,
        pricing_tolerance: Optional[float] = None,
    ) -> None:
        self.references = ReferenceIntegrityChecker(repository)
        self.pricing = PricingInvariantValidator(pricing_tolerance)
        self.status = StatusTransitionGuard(clock)
        self.conflicts = ScheduleConflictDetector(repository)

    async def admit(self, draft: BookingDraft, mode: str = "create") -> AdmissionResult:
        """Run every stage against ``draft``.

        Args:
            draft: The candidate booking. Not modified.
            mode: ``"create"`` for a new booking (any id is discarded) or
                ``"update"`` for a change to the stored booking ``draft.id``.

        Returns:
            An accepted result carrying the derived booking and warnings, or
            a rejected result carrying the first failure.

        Raises:
            ValueError: If ``mode`` is not a known admission mode.
        """
        if mode not in ADMISSION_MODES:
            raise ValueError(f"Unknown admission mode {mode!r}; expected one of {ADMISSION_MODES}")

        candidate = derive(draft)
        if mode == "create" and candidate.id is not None:
            candidate = candidate.model_copy(update={"id": None})

        try:
            refs = await self.references.check(candidate, mode)
            self.pricing.check(candidate.pricing)
            warnings = self.status.check(candidate, refs.previous)
            await self.conflicts.check(candidate, refs.previous)
        except AdmissionError as exc:
            logger.info(
                "Draft rejected (%s) at %s stage: %s",
                exc.code, exc.stage.value, exc.message,
            )
            return AdmissionResult.rejected(exc)

        logger.info(
            "Draft admitted (%s) for cleaner %s on %s %s-%s",
            mode,
            candidate.provider_ref,
            candidate.schedule.date,
            candidate.schedule.start_time,
            candidate.schedule.end_time,
        )
        return AdmissionResult(
            accepted=True,
            booking=ValidatedBooking(booking=candidate, mode=mode, warnings=warnings),
        )
