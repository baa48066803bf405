import logging
from datetime import datetime, timezone
from typing import Optional

from common.models.users import Actor, UserRole
from common.repository.bank_details_repo import BankDetailsRepository
from common.schemas.banking import BankDetailsRequest
from common.utils.custom_exceptions import ForbiddenAction, NotFoundException
from common.utils.masking import mask_bank_details

logger = logging.getLogger(__name__)


class BankingService:
    def __init__(self, bank_details_repo: BankDetailsRepository):
        self.bank_details_repo = bank_details_repo

    def save_bank_details(
        self,
        owner_id: str,
        actor: Actor,
        request: BankDetailsRequest,
        now: Optional[datetime] = None,
    ) -> dict:
        self._authorise(owner_id, actor)
        now = now or datetime.now(timezone.utc)

        saved = self.bank_details_repo.save(owner_id, request, now)
        logger.info(f"Bank details for owner {owner_id} updated by {actor.user_id}")
        return mask_bank_details(saved, reveal=actor.role == UserRole.ADMIN)

    def get_bank_details(self, owner_id: str, actor: Actor) -> dict:
        """Payout details for an owner, masked unless the caller is an admin."""
        self._authorise(owner_id, actor)

        details = self.bank_details_repo.get(owner_id)
        if details is None:
            raise NotFoundException("bank details", owner_id, 404)

        logger.info(f"Bank details for owner {owner_id} viewed by {actor.user_id}")
        return mask_bank_details(details, reveal=actor.role == UserRole.ADMIN)

    @staticmethod
    def _authorise(owner_id: str, actor: Actor):
        if actor.role == UserRole.ADMIN:
            return
        if actor.role == UserRole.OWNER and actor.user_id == owner_id:
            return
        raise ForbiddenAction(
            f"{actor.role.value.lower()} '{actor.user_id}' may not manage bank details of owner '{owner_id}'"
        )
