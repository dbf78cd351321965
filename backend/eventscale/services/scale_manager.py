from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from eventscale.core.config import GUEST_ROLE
from eventscale.core.errors import EventScaleError, NotFoundError
from eventscale.models import ServiceScaleEntry
from eventscale.services.db_service import DBService, IdLike, require_tenant
from eventscale.services.realtime import EventBroker, event_broker
from eventscale.services.scale_state import Actor, Decision, ScaleState, state_of, transition

logger = logging.getLogger(__name__)


@dataclass
class BulkAddResult:
    """Outcome of one pair in a bulk add. Failures do not undo other pairs."""

    member_id: str
    role: str
    ok: bool
    entry: Optional[ServiceScaleEntry] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "role": self.role,
            "ok": self.ok,
            "entry_id": str(self.entry.id) if self.entry else None,
            "error": self.error,
            "error_kind": self.error_kind,
        }


def entry_state(entry: ServiceScaleEntry) -> ScaleState:
    return state_of(bool(entry.confirmed), bool(entry.declined))


class ScaleManager:
    """Creates scale entries and applies every outcome change to them."""

    def __init__(self, db: DBService, broker: Optional[EventBroker] = None):
        self.db = db
        self.broker = broker or event_broker

    async def add_entry(self, event_id: IdLike, member_id: IdLike, role: str, church_id: IdLike) -> ServiceScaleEntry:
        entry = await self.db.add_scale_entry(event_id, member_id, role, church_id)
        logger.info(f"Added {entry.role} scale entry {entry.id} to event {entry.event_id}")
        self._publish(require_tenant(church_id), "scale.added", entry)
        return entry

    async def add_entries_bulk(
        self,
        event_id: IdLike,
        pairs: Iterable[Tuple[IdLike, str]],
        church_id: IdLike,
    ) -> List[BulkAddResult]:
        """Add each (member_id, role) pair as its own write."""
        results = []
        for member_id, role in pairs:
            try:
                entry = await self.add_entry(event_id, member_id, role, church_id)
            except EventScaleError as e:
                logger.warning(f"Bulk scale add failed for member {member_id} on event {event_id}: {e.detail}")
                results.append(BulkAddResult(
                    member_id=str(member_id),
                    role=role,
                    ok=False,
                    error=e.detail,
                    error_kind=e.kind,
                ))
            else:
                results.append(BulkAddResult(member_id=str(member_id), role=entry.role, ok=True, entry=entry))
        return results

    async def invite_guests(
        self,
        event_id: IdLike,
        member_ids: Iterable[IdLike],
        church_id: IdLike,
    ) -> List[BulkAddResult]:
        return await self.add_entries_bulk(
            event_id,
            [(member_id, GUEST_ROLE) for member_id in member_ids],
            church_id,
        )

    async def remove_entry(self, entry_id: IdLike, church_id: IdLike) -> ServiceScaleEntry:
        entry = await self.db.delete_scale_entry(entry_id, church_id)
        self._publish(require_tenant(church_id), "scale.removed", entry)
        return entry

    async def apply_decision(
        self,
        entry: ServiceScaleEntry,
        decision: Decision,
        actor: Actor,
    ) -> ScaleState:
        """Move an entry to the state the decision names.

        Both flags are written together; repeating the current outcome writes
        nothing. ``entry.event`` must already be loaded.
        """
        current = entry_state(entry)
        target = transition(current, decision, actor)
        if target == current:
            return current

        church_id = entry.event.church_id
        confirmed, declined = target.flags
        updated = await self.db.write_scale_outcome(entry.id, confirmed, declined)
        if not updated:
            raise NotFoundError("No such scale entry")
        await self.db.session.refresh(entry, attribute_names=["confirmed", "declined", "responded_at"])

        logger.info(f"Scale entry {entry.id}: {current.value} -> {target.value} ({actor.value})")
        self._publish(church_id, "scale.updated", entry)
        return target

    async def confirm_entry_as_operator(
        self,
        entry_id: IdLike,
        confirmed_target: bool,
        church_id: IdLike,
    ) -> ServiceScaleEntry:
        """Operator toggle: True confirms, False reopens the entry as pending."""
        entry = await self.db.get_scale_entry(entry_id, church_id)
        if not entry:
            raise NotFoundError("No such scale entry")
        decision = Decision.CONFIRM if confirmed_target else Decision.RESET
        if not confirmed_target and entry_state(entry) is ScaleState.DECLINED:
            # Un-confirming something that was never confirmed leaves it alone
            return entry
        await self.apply_decision(entry, decision, Actor.OPERATOR)
        return entry

    def _publish(self, church_id: Optional[uuid.UUID], kind: str, entry: ServiceScaleEntry) -> None:
        self.broker.publish(church_id, {
            "type": kind,
            "event_id": str(entry.event_id),
            "entry_id": str(entry.id),
            "role": entry.role,
            "state": entry_state(entry).value,
        })
