from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date


class ScoredProfile(BaseModel):
    """Candidate profile annotated with its compatibility score."""
    profile_id: int
    user_id: str
    profile_username: str
    profile_bio: Optional[str]
    profile_birthdate: date
    profile_academic_interests: Optional[str]
    profile_non_academic_interests: Optional[str]
    profile_looking_for: Optional[str]
    compatibility_score: int = Field(..., ge=0)

    class Config:
        from_attributes = True


class SuggestionsResponse(BaseModel):
    """Response for the suggestions endpoint."""
    suggestions: List[ScoredProfile]


class ErrorResponse(BaseModel):
    """Body returned for any InformatchError."""
    error: str
