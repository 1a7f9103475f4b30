"""Pricing invariant: total == base + extras - discount, within tolerance."""

import math
from typing import Optional

from booking_core.config import settings
from booking_core.errors import InvalidAmount, PricingMismatch
from booking_core.schemas.booking_schema import Pricing

_NON_NEGATIVE_FIELDS = ("base_amount", "extra_charges", "discount")


class PricingInvariantValidator:
    def __init__(self, tolerance: Optional[float] = None) -> None:
        self.tolerance = settings.admission.pricing_tolerance if tolerance is None else tolerance

    def check(self, pricing: Pricing) -> None:
        for name in _NON_NEGATIVE_FIELDS:
            value = getattr(pricing, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidAmount(
                    f"{name} must be a non-negative amount, got {value}.",
                    field=f"pricing.{name}",
                    context={"value": value},
                )

        expected = pricing.expected_total
        # Rounding keeps an exact cent boundary on the accepting side.
        difference = round(abs(expected - pricing.total_amount), 9)
        if not math.isfinite(pricing.total_amount) or difference > self.tolerance:
            raise PricingMismatch(
                f"Total {pricing.total_amount} does not match "
                f"base + extras - discount = {expected}.",
                field="pricing.total_amount",
                context={
                    "expected_total": expected,
                    "total_amount": pricing.total_amount,
                    "tolerance": self.tolerance,
                },
            )
