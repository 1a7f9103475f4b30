"""Tests for the status/payment consistency guard."""

import datetime as dt

import pytest

from booking_core.admission.status_guard import UNSETTLED_PAYMENT, StatusTransitionGuard
from booking_core.errors import (
    ImmutableBooking,
    InconsistentPaymentState,
    PastSchedulingDate,
    RatingNotAllowed,
)
from tests.conftest import TODAY, fixed_clock, make_booking, make_draft


class TestRating:
    def setup_method(self):
        self.guard = StatusTransitionGuard(clock=fixed_clock)

    def test_rating_on_completed_allowed(self):
        draft = make_draft(status="completed", payment_status="paid", rating={"score": 5})
        assert self.guard.check(draft) == []

    @pytest.mark.parametrize("status", ["pending", "confirmed", "in_progress", "cancelled"])
    def test_rating_on_other_status_rejected(self, status):
        draft = make_draft(status=status, rating={"score": 4})
        with pytest.raises(RatingNotAllowed) as exc:
            self.guard.check(draft)
        assert exc.value.field == "rating"


class TestPaymentConsistency:
    def setup_method(self):
        self.guard = StatusTransitionGuard(clock=fixed_clock)

    def test_payment_pending_with_pending_payment(self):
        self.guard.check(make_draft(status="payment_pending", payment_status="pending"))

    @pytest.mark.parametrize("payment_status", ["paid", "failed", "refunded"])
    def test_payment_pending_with_other_payment_rejected(self, payment_status):
        with pytest.raises(InconsistentPaymentState) as exc:
            self.guard.check(make_draft(status="payment_pending", payment_status=payment_status))
        assert exc.value.field == "payment_status"

    def test_completed_unpaid_is_warning_not_error(self, caplog):
        draft = make_draft(status="completed", payment_status="pending")
        with caplog.at_level("WARNING"):
            warnings = self.guard.check(draft)
        assert [w.code for w in warnings] == [UNSETTLED_PAYMENT]
        assert "payment still pending" in caplog.text

    def test_completed_paid_has_no_warning(self):
        assert self.guard.check(make_draft(status="completed", payment_status="paid")) == []


class TestSchedulingDate:
    def setup_method(self):
        self.guard = StatusTransitionGuard(clock=fixed_clock)

    def test_past_date_rejected(self):
        draft = make_draft(day=TODAY - dt.timedelta(days=1))
        with pytest.raises(PastSchedulingDate) as exc:
            self.guard.check(draft)
        assert exc.value.field == "schedule.date"

    def test_today_allowed(self):
        self.guard.check(make_draft(day=TODAY))

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_past_date_allowed_for_closed_bookings(self, status):
        draft = make_draft(day=TODAY - dt.timedelta(days=30), status=status, payment_status="paid")
        self.guard.check(draft)


class TestImmutability:
    def setup_method(self):
        self.guard = StatusTransitionGuard(clock=fixed_clock)

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_closed_booking_cannot_move(self, status):
        previous = make_booking("BK-1", status=status, payment_status="paid")
        draft = make_draft(id="BK-1", status=status, payment_status="paid", start_time="16:00")
        with pytest.raises(ImmutableBooking) as exc:
            self.guard.check(draft, previous)
        assert exc.value.field == "schedule"

    def test_closed_booking_cannot_change_cleaner(self):
        previous = make_booking("BK-1", status="cancelled")
        draft = make_draft(id="BK-1", status="cancelled", provider_ref="cleaner-2")
        with pytest.raises(ImmutableBooking) as exc:
            self.guard.check(draft, previous)
        assert exc.value.field == "provider_ref"

    def test_closed_booking_can_be_rated(self):
        previous = make_booking("BK-1", status="completed", payment_status="paid")
        draft = make_draft(id="BK-1", status="completed", payment_status="paid", rating={"score": 3})
        self.guard.check(draft, previous)

    def test_active_booking_can_move(self):
        previous = make_booking("BK-1")
        self.guard.check(make_draft(id="BK-1", start_time="16:00"), previous)
