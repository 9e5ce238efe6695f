"""
FastAPI routers grouped by domain (teams, schedule, announcements, users).

Each module exposes an APIRouter included by teamhub.app.create_app. Handlers
only translate HTTP to EntityStorage calls; a missing record becomes a 404.
"""

from fastapi import HTTPException, Request

from teamhub.services.storage_service import EntityStorage


def get_storage(request: Request) -> EntityStorage:
    storage = getattr(getattr(request.app, "state", None), "storage", None)
    if storage is None:
        raise RuntimeError("EntityStorage not configured")
    return storage


def found(entity, what: str):
    if entity is None:
        raise HTTPException(404, f"{what} not found")
    return entity
