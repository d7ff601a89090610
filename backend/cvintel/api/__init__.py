from fastapi import APIRouter
from cvintel.api import ai, analysis, auth

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
api_router.include_router(analysis.history_router, prefix="/history", tags=["history"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
