from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String, Text

from app.database import Base, generate_id


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(32), primary_key=True, default=generate_id)
    # Plain reference; posts may point at users that do not exist
    user_id = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    media_urls = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
