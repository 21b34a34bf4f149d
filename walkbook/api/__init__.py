"""API assembly helpers."""

from __future__ import annotations

from fastapi import FastAPI

from .routers import ALL_ROUTERS


def register_routes(app: FastAPI) -> None:
    """Mount the system, schedule, walker and leaderboard routers."""

    for router in ALL_ROUTERS:
        app.include_router(router)


__all__ = ["register_routes"]
