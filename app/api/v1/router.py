from fastapi import APIRouter

from app.api.v1.profiles import router as profiles_router
from app.api.v1.matching import router as matching_router
from app.api.v1.suggestions import router as suggestions_router
from app.api.v1.settings import router as settings_router

api_router = APIRouter()

# Include all route modules
api_router.include_router(profiles_router)
api_router.include_router(matching_router)
api_router.include_router(suggestions_router)
api_router.include_router(settings_router)
