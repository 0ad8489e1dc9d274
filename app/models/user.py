from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base


class User(Base):
    """Account record mirrored from the Firebase auth user."""

    __tablename__ = "users"

    user_id = Column(String(128), primary_key=True)  # Firebase uid
    user_email = Column(String(255), nullable=False, default="")
    user_email_verified = Column(Boolean, default=False)
    user_phone = Column(String(20), nullable=True)
    user_phone_verified = Column(Boolean, default=False)

    # Privacy settings
    user_priset_is_private = Column(Boolean, default=False)
    user_priset_show_age = Column(Boolean, default=True)
    user_priset_show_bio = Column(Boolean, default=True)
    user_priset_last_updated = Column(DateTime(timezone=True), nullable=True)

    user_created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False)


class Profile(Base):
    """Matchmaking profile, one per user."""

    __tablename__ = "profiles"

    profile_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(128),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )

    profile_username = Column(String(50), nullable=False)
    profile_bio = Column(Text, nullable=True)
    profile_birthdate = Column(Date, nullable=False)

    # Comma-separated lists, e.g. "AI, Security"
    profile_academic_interests = Column(Text, nullable=True)
    profile_non_academic_interests = Column(Text, nullable=True)
    profile_looking_for = Column(Text, nullable=True)

    profile_created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="profile")
