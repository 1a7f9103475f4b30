from booking_core.admission.conflicts import ScheduleConflictDetector
from booking_core.admission.derivation import derive, derive_end_time, derive_location
from booking_core.admission.pipeline import AdmissionPipeline, AdmissionResult
from booking_core.admission.pricing import PricingInvariantValidator
from booking_core.admission.references import ReferenceIntegrityChecker
from booking_core.admission.status_guard import StatusTransitionGuard

__all__ = [
    "AdmissionPipeline",
    "AdmissionResult",
    "ReferenceIntegrityChecker",
    "PricingInvariantValidator",
    "StatusTransitionGuard",
    "ScheduleConflictDetector",
    "derive",
    "derive_end_time",
    "derive_location",
]
