from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from app.db.session import Base


class Match(Base):
    """Connection between two users. Created by either side, no acceptance step."""

    __tablename__ = "matches"

    match_id = Column(Integer, primary_key=True, autoincrement=True)
    match_user1_id = Column(String(128), ForeignKey("users.user_id"), nullable=False, index=True)
    match_user2_id = Column(String(128), ForeignKey("users.user_id"), nullable=False, index=True)
    matched_at = Column(DateTime(timezone=True), server_default=func.now())


class BlockedUser(Base):
    """Directed block from blocker to blocked."""

    __tablename__ = "blocked_users"

    blocker_id = Column(String(128), ForeignKey("users.user_id"), primary_key=True)
    blocked_id = Column(String(128), ForeignKey("users.user_id"), primary_key=True, index=True)
    blocked_at = Column(DateTime(timezone=True), server_default=func.now())


class Report(Base):
    """User report for moderation."""

    __tablename__ = "reports"

    reports_id = Column(Integer, primary_key=True, autoincrement=True)
    reporter_id = Column(String(128), ForeignKey("users.user_id"), nullable=False)
    reported_id = Column(String(128), ForeignKey("users.user_id"), nullable=False, index=True)
    reason = Column(String(100), nullable=True)
    details = Column(Text, nullable=False)
    reported_at = Column(DateTime(timezone=True), server_default=func.now())
