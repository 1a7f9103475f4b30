"""Customer and provider records referenced by bookings."""

from typing import Optional

from pydantic import Field

from booking_core.schemas.booking_schema import DocumentModel


class Customer(DocumentModel):
    """Account that requests bookings."""
    id: str
    name: str
    email: Optional[str] = None


class Provider(DocumentModel):
    """Cleaner profile. Eligibility flags are owned by the profile service."""
    id: str
    name: str = ""
    is_verified: bool = False
    is_available: bool = True
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    specialties: list[str] = Field(default_factory=list)

    @property
    def is_eligible(self) -> bool:
        return self.is_verified and self.is_available
