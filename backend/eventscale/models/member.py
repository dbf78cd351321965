from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from datetime import datetime
import uuid
from eventscale.core.database import Base


class Member(Base):
    """Directory record. Owned by the membership module; read-only here."""

    __tablename__ = "members"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    church_id = Column(Uuid(as_uuid=True), ForeignKey("churches.id"), nullable=False)

    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Member(id={self.id}, name={self.name})>"
