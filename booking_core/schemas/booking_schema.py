"""Booking data models and the persisted document shape."""

import datetime as dt
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from booking_core.config import settings

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
MIN_DURATION_HOURS = 1


class ServiceKind(str, Enum):
    REGULAR_CLEANING = "regular_cleaning"
    DEEP_CLEANING = "deep_cleaning"
    MOVE_IN_OUT = "move_in_out"
    OFFICE_CLEANING = "office_cleaning"
    POST_CONSTRUCTION = "post_construction"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAYMENT_PENDING = "payment_pending"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# Bookings in these states no longer occupy their provider's time.
INACTIVE_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})


class DocumentModel(BaseModel):
    """Base model: snake_case attributes, camelCase document keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Schedule(DocumentModel):
    """When the booking takes place. ``end_time`` is derived, never trusted."""

    date: dt.date
    start_time: str = Field(pattern=HHMM_PATTERN)
    duration_hours: int = Field(
        ge=MIN_DURATION_HOURS,
        validation_alias=AliasChoices("durationHours", "duration", "duration_hours"),
    )
    end_time: Optional[str] = None

    def same_slot(self, other: "Schedule") -> bool:
        return (
            self.date == other.date
            and self.start_time == other.start_time
            and self.duration_hours == other.duration_hours
        )


class Coordinates(DocumentModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)


class GeoPoint(DocumentModel):
    """GeoJSON point; coordinates are ``[lng, lat]``."""

    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(min_length=2, max_length=2)


class Address(DocumentModel):
    street: str
    city: str
    state: str
    zip_code: Optional[str] = None
    instructions: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    location: Optional[GeoPoint] = None


class BookingDetails(DocumentModel):
    """Size of the job, used for quoting."""

    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    living_rooms: int = Field(default=0, ge=0)
    kitchens: int = Field(default=0, ge=0)
    extra_tasks: list[str] = Field(default_factory=list)
    special_instructions: Optional[str] = None


class Pricing(DocumentModel):
    # Sign checks belong to the pricing stage so they come back field-tagged.
    base_amount: float
    extra_charges: float = 0.0
    discount: float = 0.0
    total_amount: float

    @property
    def expected_total(self) -> float:
        return self.base_amount + self.extra_charges - self.discount


class Rating(DocumentModel):
    score: int = Field(ge=1, le=settings.admission.max_rating_score)
    review: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class BookingDraft(DocumentModel):
    """A candidate booking submitted for admission.

    ``id`` is absent for new bookings and required when an existing booking
    is being updated.
    """

    id: Optional[str] = None
    customer_ref: str
    provider_ref: str
    service_kind: ServiceKind
    schedule: Schedule
    address: Address
    details: BookingDetails = Field(default_factory=BookingDetails)
    pricing: Pricing
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    rating: Optional[Rating] = None
    cancellation_reason: Optional[str] = None
    rescheduled_from: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES

    def to_document(self) -> dict[str, Any]:
        """Serialize to the persisted camelCase document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Booking(BookingDraft):
    """A persisted booking; identity is assigned by the storage layer."""

    id: str


class AdmissionWarning(BaseModel):
    """Non-fatal finding surfaced to the operator."""

    code: str
    message: str
    field: Optional[str] = None


class ValidatedBooking(BaseModel):
    """A draft that passed every stage, with derived fields filled in."""

    booking: BookingDraft
    mode: Literal["create", "update"]
    warnings: list[AdmissionWarning] = Field(default_factory=list)
