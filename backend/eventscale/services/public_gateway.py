"""Unauthenticated confirmation surface for scale entries.

The only credential is the entry's public token, carried in the link sent to
the assignee. A token resolves to a minimal projection of the entry and its
event; the single write available is the assignee's own confirm/decline.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Optional

from eventscale.core.errors import NotFoundError
from eventscale.models import ServiceScaleEntry
from eventscale.services.db_service import DBService
from eventscale.services.messaging import first_name
from eventscale.services.scale_manager import ScaleManager, entry_state
from eventscale.services.scale_state import Actor, ScaleState, decision_for

logger = logging.getLogger(__name__)

INVALID_INVITATION = "This invitation has expired or is no longer valid"


@dataclass(frozen=True)
class Encouragement:
    text: str
    reference: str


ENCOURAGEMENTS: tuple[Encouragement, ...] = (
    Encouragement("Serve wholeheartedly, as if you were serving the Lord, not people.", "Ephesians 6:7"),
    Encouragement("Whatever you do, work at it with all your heart, as working for the Lord.", "Colossians 3:23"),
    Encouragement("Each of you should use whatever gift you have received to serve others.", "1 Peter 4:10"),
    Encouragement("Serve the Lord with gladness; come before him with joyful songs.", "Psalm 100:2"),
    Encouragement("Let us not become weary in doing good.", "Galatians 6:9"),
    Encouragement("Through love serve one another.", "Galatians 5:13"),
    Encouragement("Be steadfast, immovable, always abounding in the work of the Lord.", "1 Corinthians 15:58"),
    Encouragement("The Son of Man did not come to be served, but to serve.", "Mark 10:45"),
)


def select_encouragement(seed: str, options: tuple[Encouragement, ...] = ENCOURAGEMENTS) -> Encouragement:
    """Pick one text for a token; the same seed always gets the same text."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return options[int.from_bytes(digest[:8], "big") % len(options)]


class View(str, Enum):
    PENDING = "pending"
    DECIDED = "decided"


@dataclass
class PublicProjection:
    assignee_name: str
    event_title: str
    event_date: date
    event_time: time
    role: str
    confirmed: bool
    declined: bool
    state: ScaleState
    view: View
    encouragement: Encouragement

    def to_dict(self) -> dict:
        return {
            "assignee_name": self.assignee_name,
            "event_title": self.event_title,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "event_time": self.event_time.strftime("%H:%M") if self.event_time else None,
            "role": self.role,
            "confirmed": self.confirmed,
            "declined": self.declined,
            "state": self.state.value,
            "view": self.view.value,
            "can_change": self.state.is_decided,
            "encouragement": {
                "text": self.encouragement.text,
                "reference": self.encouragement.reference,
            },
        }


@dataclass
class DecisionResult:
    success: bool
    state: ScaleState

    def to_dict(self) -> dict:
        return {"success": self.success, "state": self.state.value}


class PublicConfirmationGateway:
    def __init__(self, db: DBService, manager: Optional[ScaleManager] = None):
        self.db = db
        self.manager = manager or ScaleManager(db)

    async def _resolve(self, token: str) -> ServiceScaleEntry:
        entry = await self.db.get_scale_entry_by_token(token)
        if not entry or entry.event is None:
            raise NotFoundError(INVALID_INVITATION)
        return entry

    def _project(self, entry: ServiceScaleEntry, token: str, change: bool = False) -> PublicProjection:
        state = entry_state(entry)
        # "Change my response" shows the pending card again; nothing is written
        view = View.DECIDED if state.is_decided and not change else View.PENDING
        event = entry.event
        return PublicProjection(
            assignee_name=first_name(entry.member.name if entry.member else None),
            event_title=event.title,
            event_date=event.date,
            event_time=event.time,
            role=entry.role,
            confirmed=bool(entry.confirmed),
            declined=bool(entry.declined),
            state=state,
            view=view,
            encouragement=select_encouragement(token),
        )

    async def get_public_projection(self, token: str, change: bool = False) -> PublicProjection:
        entry = await self._resolve(token)
        return self._project(entry, token, change=change)

    async def apply_decision(self, token: str, accept: bool) -> DecisionResult:
        entry = await self._resolve(token)
        state = await self.manager.apply_decision(entry, decision_for(accept), Actor.PUBLIC)
        logger.info(f"Public decision on scale entry {entry.id}: {state.value}")
        return DecisionResult(success=True, state=state)
