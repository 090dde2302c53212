"""API router configuration."""

from fastapi import APIRouter

from src.modules.scheduling.interfaces.router import router as schedule_router

api_router = APIRouter()

# Programme schedule
api_router.include_router(schedule_router)
