from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_
from typing import Optional
from datetime import date

from app.db.session import get_db
from app.core.dependencies import get_current_user, get_current_user_id
from app.models.user import User, Profile
from app.models.match import Match, BlockedUser
from app.schemas.user import (
    ProfileCreate,
    ProfileUpdate,
    ProfileResponse,
    ProfilePublic,
)


router = APIRouter(prefix="/profiles", tags=["Profiles"])


def calculate_age(birth_date: date) -> int:
    """Calculate age from date of birth."""
    today = date.today()
    return today.year - birth_date.year - (
        (today.month, today.day) < (birth_date.month, birth_date.day)
    )


async def get_profile_for(db: AsyncSession, user_id: str) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def is_blocked_between(db: AsyncSession, user_a: str, user_b: str) -> bool:
    """True if either user blocked the other."""
    result = await db.execute(
        select(BlockedUser).where(
            or_(
                and_(BlockedUser.blocker_id == user_a, BlockedUser.blocked_id == user_b),
                and_(BlockedUser.blocker_id == user_b, BlockedUser.blocked_id == user_a),
            )
        ).limit(1)
    )
    return result.scalars().first() is not None


async def is_matched_between(db: AsyncSession, user_a: str, user_b: str) -> bool:
    """True if a match exists in either direction."""
    result = await db.execute(
        select(Match).where(
            or_(
                and_(Match.match_user1_id == user_a, Match.match_user2_id == user_b),
                and_(Match.match_user1_id == user_b, Match.match_user2_id == user_a),
            )
        ).limit(1)
    )
    return result.scalars().first() is not None


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get current user's profile."""
    profile = await get_profile_for(db, user_id)

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found. Please create a profile first.",
        )

    return profile


@router.post("/me", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_data: ProfileCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create profile for current user."""
    if await get_profile_for(db, current_user.user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile already exists. Use PUT to update.",
        )

    profile = Profile(
        user_id=current_user.user_id,
        **profile_data.model_dump(),
    )

    db.add(profile)
    await db.commit()
    await db.refresh(profile)

    return profile


@router.put("/me", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update current user's profile."""
    profile = await get_profile_for(db, user_id)

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found. Create a profile first.",
        )

    # Update only provided fields
    update_data = profile_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)

    return profile


@router.get("/{user_id}", response_model=ProfilePublic)
async def get_user_profile(
    user_id: str,
    current_user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get another user's public profile.
    Hidden when either side blocked the other, or when the owner is
    private and not connected with the caller.
    """
    not_found = HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Profile not found.",
    )

    result = await db.execute(
        select(Profile, User)
        .join(User, Profile.user_id == User.user_id)
        .where(Profile.user_id == user_id)
    )
    row = result.first()
    if row is None:
        raise not_found
    profile, owner = row

    if user_id != current_user_id:
        if await is_blocked_between(db, current_user_id, user_id):
            raise not_found
        if owner.user_priset_is_private and not await is_matched_between(
            db, current_user_id, user_id
        ):
            raise not_found

    show_age = owner.user_priset_show_age is not False
    show_bio = owner.user_priset_show_bio is not False

    return ProfilePublic(
        profile_id=profile.profile_id,
        user_id=profile.user_id,
        profile_username=profile.profile_username,
        age=calculate_age(profile.profile_birthdate) if show_age else None,
        profile_bio=profile.profile_bio if show_bio else None,
        profile_academic_interests=profile.profile_academic_interests,
        profile_non_academic_interests=profile.profile_non_academic_interests,
        profile_looking_for=profile.profile_looking_for,
    )
