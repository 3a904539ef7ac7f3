"""API router for version 1."""
from fastapi import APIRouter

from akita_connect.api.v1.endpoints import preferences, push, webhooks


api_router = APIRouter()
api_router.include_router(webhooks.router)
api_router.include_router(push.router)
api_router.include_router(preferences.router)
