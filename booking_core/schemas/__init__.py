from booking_core.schemas.booking_schema import (
    INACTIVE_STATUSES,
    Address,
    AdmissionWarning,
    Booking,
    BookingDetails,
    BookingDraft,
    BookingStatus,
    Coordinates,
    GeoPoint,
    PaymentStatus,
    Pricing,
    Rating,
    Schedule,
    ServiceKind,
    ValidatedBooking,
)
from booking_core.schemas.party_schema import Customer, Provider

__all__ = [
    "INACTIVE_STATUSES",
    "Address", "AdmissionWarning", "Booking", "BookingDetails", "BookingDraft",
    "BookingStatus", "Coordinates", "GeoPoint", "PaymentStatus", "Pricing",
    "Rating", "Schedule", "ServiceKind", "ValidatedBooking",
    "Customer", "Provider",
]
