from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Time, Uuid,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum
import uuid
from eventscale.core.database import Base


class EventType(str, Enum):
    SERVICE = "service"
    GATHERING = "gathering"
    MEETING = "meeting"
    SPECIAL = "special"
    REHEARSAL = "rehearsal"


class EventStatus(str, Enum):
    PLANNED = "planned"
    CONFIRMED = "confirmed"
    HELD = "held"
    CANCELED = "canceled"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("estimated_attendees IS NULL OR estimated_attendees >= 0", name="ck_events_estimated_nonneg"),
        CheckConstraint("actual_attendees IS NULL OR actual_attendees >= 0", name="ck_events_actual_nonneg"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    church_id = Column(Uuid(as_uuid=True), ForeignKey("churches.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    type = Column(String, nullable=False, default=EventType.SERVICE.value)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    # Directory id of the person in charge
    responsible_id = Column(Uuid(as_uuid=True), nullable=True)

    # Operator-managed; never moved by schedule logic
    status = Column(String, nullable=False, default=EventStatus.PLANNED.value)

    estimated_attendees = Column(Integer, nullable=True)
    actual_attendees = Column(Integer, nullable=True)
    registration_fee = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    checklist_items = relationship(
        "ChecklistItem",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChecklistItem.created_at",
    )
    scale_entries = relationship(
        "ServiceScaleEntry",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ServiceScaleEntry.created_at",
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title={self.title}, date={self.date})>"
