from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# ==================== Action Schemas ====================

class TargetUser(BaseModel):
    """Body of connect and block actions."""
    target_user_id: str = Field(..., min_length=1, max_length=128)


class ReportCreate(TargetUser):
    """Schema for reporting a user."""
    reason: Optional[str] = Field(None, max_length=100)
    details: str = Field(..., min_length=1, max_length=2000)


# ==================== Response Schemas ====================

class MatchResponse(BaseModel):
    """Schema for match response."""
    match_id: int
    match_user1_id: str
    match_user2_id: str
    matched_at: Optional[datetime]

    class Config:
        from_attributes = True


class BlockResponse(BaseModel):
    """Schema for block response."""
    blocker_id: str
    blocked_id: str
    blocked_at: Optional[datetime]

    class Config:
        from_attributes = True


class ReportResponse(BaseModel):
    """Schema for report response."""
    reports_id: int
    reporter_id: str
    reported_id: str
    reason: Optional[str]
    details: str
    reported_at: Optional[datetime]

    class Config:
        from_attributes = True


class MatchWithProfile(BaseModel):
    """Match with the other user's profile info."""
    match_id: int
    matched_user_id: str
    matched_user_name: Optional[str]  # None until the other user creates a profile
    matched_user_academic_interests: Optional[str]
    matched_user_non_academic_interests: Optional[str]
    matched_at: Optional[datetime]


class MatchListResponse(BaseModel):
    """List of matches."""
    matches: List[MatchWithProfile]
    total: int
