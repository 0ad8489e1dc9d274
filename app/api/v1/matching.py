import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from app.db.session import get_db
from app.core.dependencies import get_current_user
from app.api.v1.profiles import is_blocked_between, is_matched_between
from app.models.user import User, Profile
from app.models.match import Match, BlockedUser, Report
from app.schemas.match import (
    TargetUser,
    ReportCreate,
    MatchResponse,
    BlockResponse,
    ReportResponse,
    MatchWithProfile,
    MatchListResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matching", tags=["Matching"])


async def get_target_user(db: AsyncSession, current_user: User, target_user_id: str) -> User:
    """Load the user an action is aimed at, rejecting self and unknown ids."""
    if target_user_id == current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot perform this action on yourself.",
        )

    result = await db.execute(select(User).where(User.user_id == target_user_id))
    target = result.scalar_one_or_none()

    if target is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found.",
        )
    return target


@router.post("/connect", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
async def connect(
    body: TargetUser,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Connect with another user.
    The match is created immediately; there is no accept step.
    """
    target = await get_target_user(db, current_user, body.target_user_id)

    if await is_blocked_between(db, current_user.user_id, target.user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot connect with this user.",
        )

    if await is_matched_between(db, current_user.user_id, target.user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Already connected with this user.",
        )

    match = Match(
        match_user1_id=current_user.user_id,
        match_user2_id=target.user_id,
    )
    db.add(match)
    await db.commit()
    await db.refresh(match)

    logger.info(f"Match {match.match_id} created: {current_user.user_id} -> {target.user_id}")
    return match


@router.post("/block", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
async def block_user(
    body: TargetUser,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Block a user. Both users stop seeing each other in suggestions."""
    target = await get_target_user(db, current_user, body.target_user_id)

    existing = await db.get(BlockedUser, (current_user.user_id, target.user_id))
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already blocked.",
        )

    block = BlockedUser(blocker_id=current_user.user_id, blocked_id=target.user_id)
    db.add(block)
    await db.commit()
    await db.refresh(block)

    return block


@router.post("/report", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def report_user(
    body: ReportCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Report a user for moderation."""
    target = await get_target_user(db, current_user, body.target_user_id)

    report = Report(
        reporter_id=current_user.user_id,
        reported_id=target.user_id,
        reason=body.reason,
        details=body.details,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)

    logger.warning(f"User {target.user_id} reported by {current_user.user_id}: {body.reason}")
    return report


@router.get("/matches", response_model=MatchListResponse)
async def get_matches(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get all connections of the current user, newest first."""
    user_id = current_user.user_id

    result = await db.execute(
        select(Match)
        .where(
            or_(
                Match.match_user1_id == user_id,
                Match.match_user2_id == user_id,
            )
        )
        .order_by(Match.match_id.desc())
    )
    matches = result.scalars().all()

    blocked_result = await db.execute(
        select(BlockedUser.blocker_id, BlockedUser.blocked_id).where(
            or_(BlockedUser.blocker_id == user_id, BlockedUser.blocked_id == user_id)
        )
    )
    blocked_ids = {
        blocked_id if blocker_id == user_id else blocker_id
        for blocker_id, blocked_id in blocked_result.all()
    }

    match_list = []
    seen = set()
    for match in matches:
        other_user_id = (
            match.match_user2_id if match.match_user1_id == user_id else match.match_user1_id
        )
        if other_user_id in blocked_ids or other_user_id in seen:
            continue
        seen.add(other_user_id)

        profile_result = await db.execute(
            select(Profile).where(Profile.user_id == other_user_id)
        )
        profile = profile_result.scalar_one_or_none()

        match_list.append(
            MatchWithProfile(
                match_id=match.match_id,
                matched_user_id=other_user_id,
                matched_user_name=profile.profile_username if profile else None,
                matched_user_academic_interests=(
                    profile.profile_academic_interests if profile else None
                ),
                matched_user_non_academic_interests=(
                    profile.profile_non_academic_interests if profile else None
                ),
                matched_at=match.matched_at,
            )
        )

    return MatchListResponse(
        matches=match_list,
        total=len(match_list),
    )
