from eventscale.models.church import Church
from eventscale.models.member import Member
from eventscale.models.event import Event, EventStatus, EventType
from eventscale.models.checklist import ChecklistItem
from eventscale.models.scale import ServiceScaleEntry, generate_public_token

__all__ = [
    "Church",
    "Member",
    "Event",
    "EventStatus",
    "EventType",
    "ChecklistItem",
    "ServiceScaleEntry",
    "generate_public_token",
]
