"""
Sub-affiliate invite service.

Top-level affiliates recruit sub-affiliates by e-mail invite. Accepting
an invite happens during signup and must never break it.
"""

import secrets

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.config.business_constants import SUB_AFFILIATE_INVITE_TTL_DAYS
from affiliate_ledger.models.affiliate import Affiliate
from affiliate_ledger.models.enums import AffiliateStatus, InviteStatus
from affiliate_ledger.models.sub_affiliate_invite import SubAffiliateInvite
from affiliate_ledger.repositories.affiliate_repository import AffiliateRepository
from affiliate_ledger.repositories.sub_affiliate_invite_repository import (
    SubAffiliateInviteRepository,
)
from affiliate_ledger.services.affiliate_service import AffiliateService
from affiliate_ledger.services.base_service import BaseService, transaction
from affiliate_ledger.services.referral.link_service import ReferralLinkService
from affiliate_ledger.utils.datetime_utils import days_from, ensure_aware, utc_now
from affiliate_ledger.utils.exceptions import AffiliateError, InviteError


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class SubAffiliateInviteService(BaseService):
    """Sub-affiliate invitations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.invite_repo = SubAffiliateInviteRepository(session)
        self.affiliate_repo = AffiliateRepository(session)
        self.affiliate_service = AffiliateService(session)
        self.link_service = ReferralLinkService(session)

    @transaction
    async def create_invite(
        self,
        parent_affiliate_id: int,
        email: str,
        ttl_days: int = SUB_AFFILIATE_INVITE_TTL_DAYS,
    ) -> SubAffiliateInvite:
        """
        Invite someone to join as a sub-affiliate.

        Args:
            parent_affiliate_id: Inviting top-level affiliate
            email: Invitee e-mail
            ttl_days: Days until the invite expires

        Returns:
            Created invite (carrying the token to e-mail out)

        Raises:
            InviteError: If the e-mail is invalid or the parent is not eligible
        """
        normalized_email = _normalize_email(email)
        if "@" not in normalized_email:
            raise InviteError(f"Invalid e-mail address: {email}")

        try:
            await self.affiliate_service.validate_parent(parent_affiliate_id)
        except AffiliateError as e:
            raise InviteError(str(e)) from e

        invite = await self.invite_repo.create(
            parent_affiliate_id=parent_affiliate_id,
            email=normalized_email,
            invite_token=secrets.token_urlsafe(32),
            status=InviteStatus.PENDING,
            expires_at=days_from(utc_now(), ttl_days),
        )
        self.logger.info(
            "Sub-affiliate invite created",
            extra={"invite_id": invite.id, "parent_affiliate_id": parent_affiliate_id},
        )
        return invite

    async def accept_invite(
        self, invite_token: str, user_id: str, email: str
    ) -> Affiliate | None:
        """
        Turn a freshly signed-up user into a sub-affiliate.

        Requires a PENDING, unexpired invite addressed to ``email``
        (case-insensitive). Creates the affiliate, issues its referral link
        and marks the invite ACCEPTED inside a savepoint; the caller
        commits. Every failure is logged and yields None.

        Args:
            invite_token: Token from the invite e-mail
            user_id: New user
            email: New user's e-mail

        Returns:
            Created sub-affiliate or None
        """
        try:
            invite = await self.invite_repo.get_by_token(invite_token)
            if invite is None or invite.status != InviteStatus.PENDING:
                self.logger.info(
                    "Invite not found or no longer pending",
                    extra={"user_id": user_id},
                )
                return None

            if utc_now() > ensure_aware(invite.expires_at):
                async with self.session.begin_nested():
                    await self.invite_repo.set_status_if_pending(invite.id, InviteStatus.EXPIRED)
                self.logger.info(
                    "Invite expired",
                    extra={"invite_id": invite.id, "user_id": user_id},
                )
                return None

            if _normalize_email(email) != invite.email:
                self.logger.warning(
                    "Invite e-mail mismatch",
                    extra={"invite_id": invite.id, "user_id": user_id},
                )
                return None

            if await self.affiliate_repo.get_by_user_id(user_id):
                self.logger.info(
                    "User is already an affiliate, invite ignored",
                    extra={"invite_id": invite.id, "user_id": user_id},
                )
                return None

            await self.affiliate_service.validate_parent(invite.parent_affiliate_id)

            async with self.session.begin_nested():
                affiliate = await self.affiliate_repo.create(
                    user_id=user_id,
                    status=AffiliateStatus.ACTIVE,
                    parent_affiliate_id=invite.parent_affiliate_id,
                )
                await self.link_service.create_link_for(affiliate)
                accepted = await self.invite_repo.set_status_if_pending(
                    invite.id, InviteStatus.ACCEPTED, accepted_affiliate_id=affiliate.id
                )
                if not accepted:
                    raise InviteError(f"Invite {invite.id} was accepted concurrently")

        except (AffiliateError, SQLAlchemyError) as e:
            self.logger.error(
                "Failed to accept sub-affiliate invite",
                extra={"user_id": user_id, "error": type(e).__name__},
            )
            return None

        self.logger.info(
            "Sub-affiliate invite accepted",
            extra={
                "invite_id": invite.id,
                "affiliate_id": affiliate.id,
                "parent_affiliate_id": invite.parent_affiliate_id,
            },
        )
        return affiliate
