from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from eventscale.core.database import get_db
from eventscale.core.permissions import Capability, Role, ensure_capability, parse_role
from eventscale.services.checklist_tracker import ChecklistTracker
from eventscale.services.db_service import DBService, require_tenant
from eventscale.services.public_gateway import PublicConfirmationGateway
from eventscale.services.scale_manager import ScaleManager


@dataclass
class CallerContext:
    """Tenant and role handed to us by the identity layer (trusted as given)."""

    church_id: uuid.UUID
    role: Role


def resolve_caller(church_id: Optional[str], role: Optional[str]) -> CallerContext:
    return CallerContext(church_id=require_tenant(church_id), role=parse_role(role))


async def get_caller(
    x_church_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> CallerContext:
    return resolve_caller(x_church_id, x_user_role)


def require(capability: Capability):
    """Dependency factory: resolve the caller once and check one capability."""

    async def _dependency(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        ensure_capability(caller.role, capability)
        return caller

    return _dependency


def get_db_service(db: AsyncSession = Depends(get_db)) -> DBService:
    return DBService(db)


def get_scale_manager(db_service: DBService = Depends(get_db_service)) -> ScaleManager:
    return ScaleManager(db_service)


def get_checklist_tracker(db_service: DBService = Depends(get_db_service)) -> ChecklistTracker:
    return ChecklistTracker(db_service)


def get_gateway(
    db_service: DBService = Depends(get_db_service),
    manager: ScaleManager = Depends(get_scale_manager),
) -> PublicConfirmationGateway:
    return PublicConfirmationGateway(db_service, manager)
