"""
SubAffiliateInvite repository.

Data access layer for SubAffiliateInvite model.
"""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from affiliate_ledger.models.enums import InviteStatus
from affiliate_ledger.models.sub_affiliate_invite import SubAffiliateInvite
from affiliate_ledger.repositories.base import BaseRepository


class SubAffiliateInviteRepository(BaseRepository[SubAffiliateInvite]):
    """SubAffiliateInvite repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize invite repository."""
        super().__init__(SubAffiliateInvite, session)

    async def get_by_token(self, invite_token: str) -> SubAffiliateInvite | None:
        """Get invite by its token."""
        return await self.get_by(invite_token=invite_token)

    async def set_status_if_pending(
        self,
        invite_id: int,
        status: InviteStatus,
        accepted_affiliate_id: int | None = None,
    ) -> bool:
        """
        Move a PENDING invite to a terminal status.

        Conditional update so two concurrent acceptances cannot both win.

        Returns:
            True if the invite was still PENDING
        """
        values: dict = {"status": status}
        if accepted_affiliate_id is not None:
            values["accepted_affiliate_id"] = accepted_affiliate_id

        stmt = (
            update(SubAffiliateInvite)
            .where(
                SubAffiliateInvite.id == invite_id,
                SubAffiliateInvite.status == InviteStatus.PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
