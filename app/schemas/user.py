from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, date
import re


# ==================== Field Cleaning ====================

OPTIONAL_TEXT_FIELDS = (
    "profile_bio",
    "profile_academic_interests",
    "profile_non_academic_interests",
    "profile_looking_for",
)


def blank_to_none(value):
    """Trim text and store blank input as null."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def check_birthdate(value: Optional[date]) -> Optional[date]:
    if value is not None and value > date.today():
        raise ValueError("Birthdate cannot be in the future")
    return value


# ==================== Profile Schemas ====================

class ProfileBase(BaseModel):
    """Base profile fields."""
    profile_username: str = Field(..., min_length=1, max_length=50)
    profile_birthdate: date
    profile_bio: Optional[str] = Field(None, max_length=1000)
    profile_academic_interests: Optional[str] = Field(None, max_length=500)
    profile_non_academic_interests: Optional[str] = Field(None, max_length=500)
    profile_looking_for: Optional[str] = Field(None, max_length=500)


class ProfileCreate(ProfileBase):
    """Schema for creating a profile."""

    @field_validator("profile_username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def clean_optional_text(cls, v):
        return blank_to_none(v)

    @field_validator("profile_birthdate")
    @classmethod
    def validate_birthdate(cls, v):
        return check_birthdate(v)


class ProfileUpdate(BaseModel):
    """Schema for updating a profile (all fields optional)."""
    profile_username: Optional[str] = Field(None, min_length=1, max_length=50)
    profile_birthdate: Optional[date] = None
    profile_bio: Optional[str] = Field(None, max_length=1000)
    profile_academic_interests: Optional[str] = Field(None, max_length=500)
    profile_non_academic_interests: Optional[str] = Field(None, max_length=500)
    profile_looking_for: Optional[str] = Field(None, max_length=500)

    @field_validator("profile_username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("profile_username", "profile_birthdate")
    @classmethod
    def reject_null(cls, v):
        # Both columns are NOT NULL; leave the field out to keep the stored value
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def clean_optional_text(cls, v):
        return blank_to_none(v)

    @field_validator("profile_birthdate")
    @classmethod
    def validate_birthdate(cls, v):
        return check_birthdate(v)


class ProfileResponse(ProfileBase):
    """Schema for profile response."""
    profile_id: int
    user_id: str
    profile_created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfilePublic(BaseModel):
    """Public profile visible to other users, filtered by the owner's privacy settings."""
    profile_id: int
    user_id: str
    profile_username: str
    age: Optional[int]  # None when the owner hides their age
    profile_bio: Optional[str]
    profile_academic_interests: Optional[str]
    profile_non_academic_interests: Optional[str]
    profile_looking_for: Optional[str]


# ==================== Account Settings Schemas ====================

class AccountSettingsResponse(BaseModel):
    """Account row of the current user."""
    user_id: str
    user_email: str
    user_email_verified: Optional[bool]
    user_phone: Optional[str]
    user_phone_verified: Optional[bool]
    user_priset_is_private: Optional[bool]
    user_priset_show_age: Optional[bool]
    user_priset_show_bio: Optional[bool]
    user_priset_last_updated: Optional[datetime]
    user_created_at: Optional[datetime]

    class Config:
        from_attributes = True


class PhoneUpdate(BaseModel):
    """Schema for changing the phone number."""
    phone: str = Field(..., min_length=10, max_length=20)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        # Remove spaces and dashes
        cleaned = re.sub(r"[\s\-]", "", v)
        if not cleaned.startswith("+"):
            cleaned = "+" + cleaned
        if not re.match(r"^\+\d{10,15}$", cleaned):
            raise ValueError("Invalid phone number format. Use international format: +1234567890")
        return cleaned


class BirthdateUpdate(BaseModel):
    """Schema for changing the birthdate."""
    birthdate: date

    @field_validator("birthdate")
    @classmethod
    def validate_birthdate(cls, v):
        return check_birthdate(v)


class PrivacyUpdate(BaseModel):
    """Schema for privacy settings (all fields optional)."""
    is_private: Optional[bool] = None
    show_age: Optional[bool] = None
    show_bio: Optional[bool] = None
