"""Aggregate API routers."""

from fastapi import APIRouter

from .leaderboard import router as leaderboard_router
from .schedule import router as schedule_router
from .system import router as system_router
from .walkers import router as walkers_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    schedule_router,
    walkers_router,
    leaderboard_router,
)

__all__ = ["ALL_ROUTERS"]
