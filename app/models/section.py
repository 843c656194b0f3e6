from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint

from app.database import Base, generate_id


class Section(Base):
    __tablename__ = "sections"
    __table_args__ = (
        UniqueConstraint("user_id", "section_id", name="uq_sections_user_section"),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String, nullable=False, index=True)
    section_id = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
