"""
Pure derivations applied to a draft before any validation runs.

These functions never fail on a well-formed draft and always return a new
model, leaving the input untouched. Running them twice yields the same
result.
"""

from typing import Optional

from booking_core.schemas.booking_schema import Address, BookingDraft, GeoPoint, Schedule
from booking_core.utils import add_hours_hhmm


def geo_point(lat: Optional[float], lng: Optional[float]) -> Optional[GeoPoint]:
    """Build a ``[lng, lat]`` point, or ``None`` unless both are present."""
    if lat is None or lng is None:
        return None
    return GeoPoint(coordinates=[float(lng), float(lat)])


def derive_location(address: Address) -> Address:
    """Recompute ``address.location`` from its raw coordinates.

    A missing coordinate clears any previously derived point.
    """
    coords = address.coordinates
    point = geo_point(coords.lat, coords.lng) if coords is not None else None
    return address.model_copy(update={"location": point})


def derive_end_time(schedule: Schedule) -> Schedule:
    """Recompute ``end_time`` as ``start_time`` plus ``duration_hours``."""
    end_time = add_hours_hhmm(schedule.start_time, schedule.duration_hours)
    return schedule.model_copy(update={"end_time": end_time})


def derive(draft: BookingDraft) -> BookingDraft:
    """Apply every derivation to a draft."""
    return draft.model_copy(
        update={
            "address": derive_location(draft.address),
            "schedule": derive_end_time(draft.schedule),
        }
    )
