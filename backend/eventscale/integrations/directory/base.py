from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol
import uuid


@dataclass
class MemberContact:
    id: uuid.UUID
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class MemberDirectory(Protocol):
    """Read-only lookup of people by directory id, scoped to one church."""

    name: str

    async def get_contact(self, church_id: uuid.UUID, member_id: uuid.UUID) -> Optional[MemberContact]:
        ...

    async def get_contacts(
        self, church_id: uuid.UUID, member_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, MemberContact]:
        ...
