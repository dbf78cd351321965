from __future__ import annotations

from typing import Iterable, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventscale.integrations.directory.base import MemberContact
from eventscale.models import Member


def _to_contact(member: Member) -> MemberContact:
    return MemberContact(
        id=member.id,
        name=member.name,
        phone=member.phone,
        email=member.email,
    )


class SqlMemberDirectory:
    """Directory backed by the shared ``members`` table."""

    name = "native"

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_contact(self, church_id: uuid.UUID, member_id: uuid.UUID) -> Optional[MemberContact]:
        result = await self.session.execute(
            select(Member).where(Member.id == member_id, Member.church_id == church_id)
        )
        member = result.scalar_one_or_none()
        return _to_contact(member) if member else None

    async def get_contacts(
        self, church_id: uuid.UUID, member_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, MemberContact]:
        ids = set(member_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(Member).where(Member.church_id == church_id, Member.id.in_(ids))
        )
        return {member.id: _to_contact(member) for member in result.scalars().all()}
