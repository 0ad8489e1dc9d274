import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.dependencies import get_current_user_id
from app.schemas.suggestion import ErrorResponse, SuggestionsResponse
from app.services.suggestions import get_match_suggestions


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suggestions", tags=["Suggestions"])


@router.api_route(
    "",
    methods=["GET", "POST"],
    response_model=SuggestionsResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_suggestions(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get ranked match suggestions for the current user.
    Excludes:
    - Own profile
    - Already matched users
    - Users blocked by or blocking the current user
    Errors are returned as {"error": message} with status 400.
    """
    suggestions = await get_match_suggestions(db, user_id)
    return SuggestionsResponse(suggestions=suggestions)


@router.options("")
async def suggestions_options():
    """Empty success for OPTIONS requests that are not CORS preflights."""
    return Response(status_code=200)
