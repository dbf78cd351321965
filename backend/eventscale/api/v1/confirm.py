"""Public confirmation routes. No session, no role: the token is the credential."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from eventscale.api.deps import get_gateway
from eventscale.services.public_gateway import PublicConfirmationGateway

router = APIRouter()


class DecisionRequest(BaseModel):
    accept: bool


@router.get("/{token}")
async def get_invitation(
    token: str,
    change: bool = False,
    gateway: PublicConfirmationGateway = Depends(get_gateway),
):
    """Invitation card for the assignee.

    ``change=true`` shows the pending card for an entry that was already
    answered, without touching the stored answer.
    """
    projection = await gateway.get_public_projection(token, change=change)
    return projection.to_dict()


@router.post("/{token}")
async def submit_decision(
    token: str,
    payload: DecisionRequest,
    gateway: PublicConfirmationGateway = Depends(get_gateway),
):
    result = await gateway.apply_decision(token, payload.accept)
    return result.to_dict()
