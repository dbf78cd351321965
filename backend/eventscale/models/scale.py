from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
import secrets
import uuid
from eventscale.core.database import Base


def generate_public_token() -> str:
    """Capability token for the public confirmation link (~192 bits)."""
    return secrets.token_urlsafe(24)


class ServiceScaleEntry(Base):
    __tablename__ = "service_scales"
    __table_args__ = (
        CheckConstraint("NOT (confirmed AND declined)", name="ck_service_scales_single_outcome"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id = Column(Uuid(as_uuid=True), ForeignKey("members.id"), nullable=False)

    role = Column(String, nullable=False)

    # Outcome: pending (both false), confirmed, declined. Never both true.
    confirmed = Column(Boolean, nullable=False, default=False)
    declined = Column(Boolean, nullable=False, default=False)
    responded_at = Column(DateTime, nullable=True)

    public_token = Column(String, unique=True, nullable=False, default=generate_public_token)

    created_at = Column(DateTime, default=datetime.utcnow)

    event = relationship("Event", back_populates="scale_entries")
    member = relationship("Member")

    def __repr__(self):
        return f"<ServiceScaleEntry(id={self.id}, role={self.role}, confirmed={self.confirmed}, declined={self.declined})>"
