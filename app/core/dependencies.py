from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.db.session import get_db
from app.core.exceptions import AuthError
from app.core.firebase import firebase_service
from app.models.user import User


# Security scheme; a missing header is reported as AuthError, not 403
security = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency to resolve the bearer token into Firebase claims.
    Raises AuthError if the header is missing or the token is invalid.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("User not authenticated")
    return firebase_service.verify_token(credentials.credentials)


async def get_current_user_id(claims: dict = Depends(get_token_claims)) -> str:
    """Dependency to get the authenticated user's id."""
    return claims["uid"]


async def get_current_user(
    claims: dict = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current user's account row.
    The row is created from the token claims on first use.
    """
    user_id = claims["uid"]
    result = await db.execute(select(User).where(User.user_id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            user_id=user_id,
            user_email=claims.get("email") or "",
            user_email_verified=bool(claims.get("email_verified", False)),
            user_phone=claims.get("phone_number"),
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)

    return user
