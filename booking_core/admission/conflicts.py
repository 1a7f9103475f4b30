"""
Schedule conflict detection for a single provider and a single interval.

Two-phase filter: the repository returns the provider's active bookings on
the candidate's calendar day (index-friendly, coarse), then each one is
tested for half-open overlap in memory (precise). A candidate that starts
exactly when another booking ends does not conflict.
"""

import logging
from typing import Optional

from booking_core.errors import SchedulingConflict
from booking_core.schemas.booking_schema import Booking, BookingDraft, BookingStatus
from booking_core.storage.repository import BookingRepository
from booking_core.utils import interval_on, overlaps

logger = logging.getLogger(__name__)


def find_overlap(candidate: BookingDraft, others: list[Booking]) -> Optional[Booking]:
    """Return the first booking in ``others`` whose interval overlaps the candidate's."""
    c_start, c_end = interval_on(
        candidate.schedule.date, candidate.schedule.start_time, candidate.schedule.duration_hours
    )
    for other in others:
        if candidate.id is not None and other.id == candidate.id:
            continue
        o_start, o_end = interval_on(
            other.schedule.date, other.schedule.start_time, other.schedule.duration_hours
        )
        if overlaps(c_start, c_end, o_start, o_end):
            return other
    return None


def conflict_error(
    candidate: BookingDraft,
    other: Booking,
    error_cls: type[SchedulingConflict] = SchedulingConflict,
) -> SchedulingConflict:
    return error_cls(
        f"Cleaner already has a booking at {other.schedule.start_time} "
        f"for {other.schedule.duration_hours} hour(s) on "
        f"{other.schedule.date.isoformat()}.",
        field="schedule",
        context={
            "conflicting_booking_id": other.id,
            "start_time": other.schedule.start_time,
            "duration_hours": other.schedule.duration_hours,
            "date": other.schedule.date.isoformat(),
            "provider_ref": candidate.provider_ref,
        },
    )


class ScheduleConflictDetector:
    def __init__(self, repository: BookingRepository) -> None:
        self._repository = repository

    def needs_check(self, draft: BookingDraft, previous: Optional[Booking] = None) -> bool:
        if draft.status == BookingStatus.CANCELLED:
            return False
        if previous is None:
            return True
        if not previous.is_active and draft.is_active:
            # Leaving cancelled/completed puts the slot back on the calendar.
            return True
        return (
            draft.provider_ref != previous.provider_ref
            or not draft.schedule.same_slot(previous.schedule)
        )

    async def check(self, draft: BookingDraft, previous: Optional[Booking] = None) -> None:
        if not self.needs_check(draft, previous):
            logger.debug("Conflict check skipped for booking %s", draft.id or "<new>")
            return

        same_day = await self._repository.find_active_bookings(
            draft.provider_ref, draft.schedule.date, exclude_id=draft.id
        )
        other = find_overlap(draft, same_day)
        if other is not None:
            logger.info(
                "Conflict for cleaner %s on %s: %s+%sh overlaps booking %s",
                draft.provider_ref,
                draft.schedule.date,
                draft.schedule.start_time,
                draft.schedule.duration_hours,
                other.id,
            )
            raise conflict_error(draft, other)
