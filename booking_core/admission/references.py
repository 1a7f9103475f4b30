"""Reference integrity: every pointer on a draft must resolve."""

import logging
from dataclasses import dataclass
from typing import Optional

from booking_core.errors import ProviderUnavailable, ProviderUnverified, ReferenceNotFound
from booking_core.schemas.booking_schema import Booking, BookingDraft, BookingStatus
from booking_core.schemas.party_schema import Customer, Provider
from booking_core.storage.repository import BookingRepository

logger = logging.getLogger(__name__)


@dataclass
class ResolvedReferences:
    """Entities looked up while checking a draft."""
    customer: Customer
    provider: Provider
    rescheduled_from: Optional[Booking] = None
    previous: Optional[Booking] = None


class ReferenceIntegrityChecker:
    """Resolves the customer, provider, predecessor and (on update) the booking itself."""

    def __init__(self, repository: BookingRepository) -> None:
        self._repository = repository

    async def check(self, draft: BookingDraft, mode: str = "create") -> ResolvedReferences:
        previous = None
        if mode == "update":
            if not draft.id:
                raise ReferenceNotFound("An update requires the booking id.", field="id")
            previous = await self._repository.get_booking(draft.id)
            if previous is None:
                raise ReferenceNotFound(
                    f"Booking {draft.id} not found.",
                    field="id",
                    context={"ref": draft.id},
                )

        customer = await self._repository.get_customer(draft.customer_ref)
        if customer is None:
            raise ReferenceNotFound(
                f"Customer {draft.customer_ref} not found.",
                field="customer_ref",
                context={"ref": draft.customer_ref},
            )

        provider = await self._repository.get_provider(draft.provider_ref)
        if provider is None:
            raise ReferenceNotFound(
                f"Cleaner {draft.provider_ref} not found.",
                field="provider_ref",
                context={"ref": draft.provider_ref},
            )
        self._check_eligibility(draft, provider)

        predecessor = None
        if draft.rescheduled_from:
            predecessor = await self._repository.get_booking(draft.rescheduled_from)
            if predecessor is None:
                raise ReferenceNotFound(
                    f"Rescheduled-from booking {draft.rescheduled_from} not found.",
                    field="rescheduled_from",
                    context={"ref": draft.rescheduled_from},
                )

        return ResolvedReferences(
            customer=customer,
            provider=provider,
            rescheduled_from=predecessor,
            previous=previous,
        )

    @staticmethod
    def _check_eligibility(draft: BookingDraft, provider: Provider) -> None:
        # A cancellation must go through whatever state the cleaner is in.
        if draft.status == BookingStatus.CANCELLED:
            if not provider.is_eligible:
                logger.debug("Skipping eligibility for cancelled booking on %s", provider.id)
            return
        if not provider.is_verified:
            raise ProviderUnverified(
                "Cannot book with an unverified cleaner.",
                field="provider_ref",
                context={"ref": provider.id},
            )
        if not provider.is_available:
            raise ProviderUnavailable(
                "Cleaner is currently unavailable.",
                field="provider_ref",
                context={"ref": provider.id},
            )
