"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from transfer_agent.api.routes import (
    auth,
    health,
    issuers,
    journal,
    restrictions,
    securities,
    shareholders,
    uploads,
    users,
)


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    api_router.include_router(users.router, tags=["users"])
    api_router.include_router(issuers.router, tags=["issuers"])
    api_router.include_router(shareholders.router, tags=["shareholders"])
    api_router.include_router(securities.router, tags=["securities"])
    api_router.include_router(restrictions.router, tags=["restrictions"])
    api_router.include_router(journal.router, tags=["transfers"])
    api_router.include_router(uploads.router, tags=["documents"])

    application.include_router(api_router)


__all__ = ["register_routes"]
