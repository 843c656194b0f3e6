from datetime import datetime

from sqlalchemy import Column, DateTime, String

from app.database import Base, generate_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)

    # Registration fields
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # Optional profile fields
    dob = Column(String, nullable=True)              # store YYYY-MM-DD
    gender = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)  # public media URL

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
