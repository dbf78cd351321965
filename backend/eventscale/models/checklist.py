from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from eventscale.core.database import Base


class ChecklistItem(Base):
    __tablename__ = "event_checklists"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    task = Column(String, nullable=False)
    responsible_id = Column(Uuid(as_uuid=True), nullable=True)
    completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="checklist_items")

    def __repr__(self):
        return f"<ChecklistItem(id={self.id}, task={self.task}, completed={self.completed})>"
