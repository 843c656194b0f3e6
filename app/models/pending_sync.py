from datetime import datetime

from sqlalchemy import Column, DateTime, String

from app.database import Base


class PendingSync(Base):
    """Upload awaiting commit and push to the media repository."""

    __tablename__ = "pending_media_sync"

    path = Column(String, primary_key=True)  # relative to the upload directory
    queued_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
