"""
Status/payment consistency rules, checked on the resulting state.

Collaborators may assign a status directly, so there is no transition
table here: the guard only looks at the state the booking would end up in,
plus the stored booking when one is being updated.
"""

import datetime as dt
import logging
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from booking_core.config import settings
from booking_core.errors import (
    ImmutableBooking,
    InconsistentPaymentState,
    PastSchedulingDate,
    RatingNotAllowed,
)
from booking_core.schemas.booking_schema import (
    INACTIVE_STATUSES,
    AdmissionWarning,
    Booking,
    BookingDraft,
    BookingStatus,
    PaymentStatus,
)

logger = logging.getLogger(__name__)

UNSETTLED_PAYMENT = "unsettled_payment"


def business_today() -> dt.date:
    """Today's date in the configured business timezone."""
    return dt.datetime.now(ZoneInfo(settings.admission.timezone)).date()


class StatusTransitionGuard:
    def __init__(self, clock: Callable[[], dt.date] = business_today) -> None:
        self._clock = clock

    def check(
        self, draft: BookingDraft, previous: Optional[Booking] = None
    ) -> list[AdmissionWarning]:
        """Raise on the first violated rule; return any non-fatal warnings."""
        if previous is not None:
            self._check_immutable(draft, previous)

        if draft.rating is not None and draft.status != BookingStatus.COMPLETED:
            raise RatingNotAllowed(
                "A rating can only be given once the booking is completed.",
                field="rating",
                context={"status": draft.status.value},
            )

        if (
            draft.status == BookingStatus.PAYMENT_PENDING
            and draft.payment_status != PaymentStatus.PENDING
        ):
            raise InconsistentPaymentState(
                "A booking awaiting payment must have payment status 'pending'.",
                field="payment_status",
                context={"payment_status": draft.payment_status.value},
            )

        today = self._clock()
        if draft.schedule.date < today and draft.status not in INACTIVE_STATUSES:
            raise PastSchedulingDate(
                f"Booking date {draft.schedule.date.isoformat()} is in the past.",
                field="schedule.date",
                context={"date": draft.schedule.date.isoformat(), "today": today.isoformat()},
            )

        warnings = []
        if (
            draft.status == BookingStatus.COMPLETED
            and draft.payment_status == PaymentStatus.PENDING
        ):
            # Manual settlement happens; flag it for the operator instead of rejecting.
            logger.warning(
                "Booking %s completed with payment still pending", draft.id or "<new>"
            )
            warnings.append(
                AdmissionWarning(
                    code=UNSETTLED_PAYMENT,
                    message="Booking is completed but payment is still pending.",
                    field="payment_status",
                )
            )
        return warnings

    @staticmethod
    def _check_immutable(draft: BookingDraft, previous: Booking) -> None:
        if previous.is_active:
            return
        if draft.provider_ref != previous.provider_ref:
            raise ImmutableBooking(
                f"A {previous.status.value} booking cannot be reassigned.",
                field="provider_ref",
                context={"status": previous.status.value},
            )
        if not draft.schedule.same_slot(previous.schedule):
            raise ImmutableBooking(
                f"A {previous.status.value} booking cannot be rescheduled.",
                field="schedule",
                context={"status": previous.status.value},
            )
