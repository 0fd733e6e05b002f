"""
Login session model - NOT a user-facing domain object.

Rows back the session cookie so that every server process sharing the
database sees the same logins. Never exposed in the API.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, String
from nightguard.database import Base


class UserSession(Base):
    """
    One authenticated login.

    Invariants:
    - token is unique and opaque
    - a session past expires_at is treated as absent
    """
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    token = Column(String, nullable=False, unique=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    expires_at = Column(DateTime, nullable=False)
