from booking_core.services.booking_service import BookingOutcome, BookingService

__all__ = ["BookingService", "BookingOutcome"]
