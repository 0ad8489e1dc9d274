import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from firebase_admin.exceptions import FirebaseError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.dependencies import get_current_user
from app.core.firebase import firebase_service
from app.api.v1.profiles import get_profile_for
from app.models.user import User
from app.schemas.user import (
    AccountSettingsResponse,
    PhoneUpdate,
    BirthdateUpdate,
    PrivacyUpdate,
    ProfileResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/me", response_model=AccountSettingsResponse)
async def get_account_settings(current_user: User = Depends(get_current_user)):
    """Get current user's account settings."""
    return current_user


@router.put("/phone", response_model=AccountSettingsResponse)
async def update_phone_number(
    phone_data: PhoneUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Change the phone number.
    The number is pushed to Firebase Auth and has to be verified again.
    """
    try:
        firebase_service.update_phone_number(current_user.user_id, phone_data.phone)
    except (ValueError, FirebaseError) as e:
        logger.warning(f"Phone update rejected for {current_user.user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to update phone number: {e}",
        )

    current_user.user_phone = phone_data.phone
    current_user.user_phone_verified = False
    await db.commit()
    await db.refresh(current_user)

    return current_user


@router.put("/birthdate", response_model=ProfileResponse)
async def update_birthdate(
    birthdate_data: BirthdateUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the birthdate shown on the current user's profile."""
    profile = await get_profile_for(db, current_user.user_id)

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found. Create a profile first.",
        )

    profile.profile_birthdate = birthdate_data.birthdate
    await db.commit()
    await db.refresh(profile)

    return profile


@router.put("/privacy", response_model=AccountSettingsResponse)
async def update_privacy(
    privacy_data: PrivacyUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update privacy settings. Only provided fields change."""
    update_data = privacy_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(current_user, f"user_priset_{field}", value)

    current_user.user_priset_last_updated = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(current_user)

    return current_user
