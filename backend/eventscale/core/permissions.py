"""Closed role set and the capability matrix for operator actions.

Roles mirror the ones the church identity service hands out. A request
resolves its role once and checks a single capability against this table.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from eventscale.core.errors import AuthorizationFailure


class Role(str, Enum):
    ADMIN = "admin"
    PASTOR = "pastor"
    SECRETARY = "secretario"
    TREASURER = "tesoureiro"
    MEMBER = "membro"
    CELL_LEADER = "lider_celula"
    MINISTRY_LEADER = "lider_ministerio"
    STUDENT = "aluno"
    CONGREGANT = "congregado"


class Capability(str, Enum):
    VIEW_EVENTS = "view_events"
    MANAGE_EVENTS = "manage_events"
    MANAGE_CHECKLIST = "manage_checklist"
    TOGGLE_CHECKLIST = "toggle_checklist"
    MANAGE_SCALE = "manage_scale"


_ALL = frozenset(Capability)
_READ_ONLY = frozenset({Capability.VIEW_EVENTS})

PERMISSIONS: dict[Role, frozenset[Capability]] = {
    Role.ADMIN: _ALL,
    Role.PASTOR: _ALL,
    Role.SECRETARY: _ALL,
    Role.CELL_LEADER: _ALL,
    Role.MINISTRY_LEADER: _ALL,
    # Treasurer sees the checklist tab and may tick tasks, nothing else
    Role.TREASURER: frozenset({Capability.VIEW_EVENTS, Capability.TOGGLE_CHECKLIST}),
    Role.MEMBER: _READ_ONLY,
    Role.CONGREGANT: _READ_ONLY,
    Role.STUDENT: _READ_ONLY,
}


def parse_role(value: Optional[str]) -> Role:
    if not value:
        raise AuthorizationFailure("Missing role context")
    try:
        return Role(value.strip().lower())
    except ValueError:
        raise AuthorizationFailure(f"Unknown role: {value}")


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in PERMISSIONS.get(role, frozenset())


def ensure_capability(role: Role, capability: Capability) -> None:
    if not has_capability(role, capability):
        raise AuthorizationFailure(
            f"Role '{role.value}' is not allowed to {capability.value.replace('_', ' ')}"
        )
