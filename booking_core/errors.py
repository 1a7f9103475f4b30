"""
Classified admission failures.

Every failure carries the stage that raised it, the field it concerns
(when there is one), a human-readable message and optional diagnostic
context. ``to_dict()`` produces the ``{stage, field, message, context}``
structure handed back to collaborators.
"""

from enum import Enum
from typing import Any, Optional


class AdmissionStage(str, Enum):
    """Pipeline stage (or collaborator) a failure originated from."""

    DERIVATION = "derivation"
    REFERENCES = "references"
    PRICING = "pricing"
    STATUS = "status"
    SCHEDULE = "schedule"
    STORAGE = "storage"


class AdmissionError(Exception):
    """Base class for all admission failures."""

    stage: AdmissionStage = AdmissionStage.DERIVATION
    retryable: bool = False

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.field = field
        self.context = context or {}
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "stage": self.stage.value,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        if self.context:
            payload["context"] = dict(self.context)
        return payload

    def __repr__(self) -> str:
        return f"{self.code}(stage={self.stage.value!r}, field={self.field!r}, message={self.message!r})"


# --- Reference integrity ---


class ReferenceNotFound(AdmissionError):
    stage = AdmissionStage.REFERENCES


class ProviderUnverified(AdmissionError):
    stage = AdmissionStage.REFERENCES


class ProviderUnavailable(AdmissionError):
    stage = AdmissionStage.REFERENCES


# --- Pricing ---


class InvalidAmount(AdmissionError):
    stage = AdmissionStage.PRICING


class PricingMismatch(AdmissionError):
    stage = AdmissionStage.PRICING


# --- State consistency ---


class RatingNotAllowed(AdmissionError):
    stage = AdmissionStage.STATUS


class InconsistentPaymentState(AdmissionError):
    stage = AdmissionStage.STATUS


class PastSchedulingDate(AdmissionError):
    stage = AdmissionStage.STATUS


class ImmutableBooking(AdmissionError):
    """Raised when a cancelled or completed booking would be rescheduled or reassigned."""

    stage = AdmissionStage.STATUS


# --- Scheduling ---


class SchedulingConflict(AdmissionError):
    """The proposed interval overlaps another active booking of the provider.

    Retrying with a different interval is the expected remediation; the
    context carries the conflicting booking's start time and duration.
    """

    stage = AdmissionStage.SCHEDULE
    retryable = True


class ConcurrentConflict(SchedulingConflict):
    """An overlapping booking was committed between pre-check and write."""

    stage = AdmissionStage.STORAGE
