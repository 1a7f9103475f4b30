"""Booking admission engine for the cleaning-service marketplace."""
