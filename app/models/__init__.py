# Export all models for easy importing
from app.models.user import User, Profile
from app.models.match import Match, BlockedUser, Report

__all__ = [
    "User",
    "Profile",
    "Match",
    "BlockedUser",
    "Report",
]
