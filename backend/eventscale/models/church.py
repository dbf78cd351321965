from sqlalchemy import Column, String, DateTime, Uuid
from datetime import datetime
import uuid
from eventscale.core.database import Base


class Church(Base):
    __tablename__ = "churches"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Church(id={self.id}, name={self.name})>"
