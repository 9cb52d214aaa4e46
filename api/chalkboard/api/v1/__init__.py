"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from chalkboard.api.v1.endpoints import auth, users, practice, vision, ai, history

api_router = APIRouter()

# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(practice.router)
api_router.include_router(vision.router)
api_router.include_router(ai.router)
api_router.include_router(history.router)
