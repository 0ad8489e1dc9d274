"""
Match Suggestion Service
Ranks other users by shared interests for the requesting user.

Candidates exclude the requester, users already connected with the
requester, and users on either side of a block. The compatibility score
is 2 points per shared academic interest plus 1 per shared non-academic
interest. Results are ordered by score, ties keep the fetch order.
"""

import logging
from typing import Iterable, List, Optional, Set

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DataAccessError, NotFoundError
from app.models.match import BlockedUser, Match
from app.models.user import Profile
from app.schemas.suggestion import ScoredProfile


logger = logging.getLogger(__name__)

ACADEMIC_WEIGHT = 2
NON_ACADEMIC_WEIGHT = 1


# ==================== Scoring ====================

def parse_interests(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated interest string into normalized tokens.
    "AI, Security,, " -> ["ai", "security"]
    """
    if not raw:
        return []
    tokens = (part.strip().lower() for part in raw.split(","))
    return [token for token in tokens if token]


def count_shared(mine: List[str], theirs: List[str]) -> int:
    """Count my tokens that appear in theirs (per token of mine, not per pair)."""
    their_set = set(theirs)
    return sum(1 for interest in mine if interest in their_set)


def compatibility_score(current: Profile, candidate: Profile) -> int:
    shared_academic = count_shared(
        parse_interests(current.profile_academic_interests),
        parse_interests(candidate.profile_academic_interests),
    )
    shared_non_academic = count_shared(
        parse_interests(current.profile_non_academic_interests),
        parse_interests(candidate.profile_non_academic_interests),
    )
    return shared_academic * ACADEMIC_WEIGHT + shared_non_academic * NON_ACADEMIC_WEIGHT


def rank_candidates(
    current: Profile,
    candidates: Iterable[Profile],
    excluded_ids: Set[str],
) -> List[ScoredProfile]:
    """
    Score every eligible candidate and sort by score, highest first.
    sorted() is stable, so equal scores keep the order of `candidates`.
    """
    scored = [
        ScoredProfile(
            profile_id=candidate.profile_id,
            user_id=candidate.user_id,
            profile_username=candidate.profile_username,
            profile_bio=candidate.profile_bio,
            profile_birthdate=candidate.profile_birthdate,
            profile_academic_interests=candidate.profile_academic_interests,
            profile_non_academic_interests=candidate.profile_non_academic_interests,
            profile_looking_for=candidate.profile_looking_for,
            compatibility_score=compatibility_score(current, candidate),
        )
        for candidate in candidates
        if candidate.user_id != current.user_id and candidate.user_id not in excluded_ids
    ]
    return sorted(scored, key=lambda profile: profile.compatibility_score, reverse=True)


# ==================== Data Access ====================

async def _fetch(db: AsyncSession, query, error_message: str):
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"{error_message}: {e}")
        raise DataAccessError(error_message) from e
    return result


async def get_matched_user_ids(db: AsyncSession, user_id: str) -> Set[str]:
    """IDs of users connected with `user_id`, whichever side created the match."""
    result = await _fetch(
        db,
        select(Match.match_user1_id, Match.match_user2_id).where(
            or_(
                Match.match_user1_id == user_id,
                Match.match_user2_id == user_id,
            )
        ),
        "Failed to fetch existing matches",
    )
    return {
        user2_id if user1_id == user_id else user1_id
        for user1_id, user2_id in result.all()
    }


async def get_blocked_user_ids(db: AsyncSession, user_id: str) -> Set[str]:
    """IDs of users blocked by `user_id`."""
    result = await _fetch(
        db,
        select(BlockedUser.blocked_id).where(BlockedUser.blocker_id == user_id),
        "Failed to fetch blocked users",
    )
    return set(result.scalars().all())


async def get_blocked_by_user_ids(db: AsyncSession, user_id: str) -> Set[str]:
    """IDs of users who blocked `user_id`."""
    result = await _fetch(
        db,
        select(BlockedUser.blocker_id).where(BlockedUser.blocked_id == user_id),
        "Failed to fetch users who blocked current user",
    )
    return set(result.scalars().all())


async def get_match_suggestions(db: AsyncSession, user_id: str) -> List[ScoredProfile]:
    """
    Build the ranked suggestion list for `user_id`.

    Raises:
        NotFoundError: the user has no profile yet
        DataAccessError: any query failed
    """
    result = await _fetch(
        db,
        select(Profile).where(Profile.user_id == user_id),
        "Failed to fetch current user profile",
    )
    current_profile = result.scalar_one_or_none()
    if current_profile is None:
        raise NotFoundError("Current user profile not found")

    result = await _fetch(
        db,
        select(Profile).where(Profile.user_id != user_id).order_by(Profile.profile_id),
        "Failed to fetch profiles",
    )
    other_profiles = result.scalars().all()

    # One AsyncSession cannot run statements concurrently, so these run in turn
    excluded_ids = (
        await get_matched_user_ids(db, user_id)
        | await get_blocked_user_ids(db, user_id)
        | await get_blocked_by_user_ids(db, user_id)
    )

    suggestions = rank_candidates(current_profile, other_profiles, excluded_ids)
    logger.info(
        f"Ranked {len(suggestions)} suggestions for {user_id} "
        f"({len(other_profiles)} profiles, {len(excluded_ids)} excluded)"
    )
    return suggestions
