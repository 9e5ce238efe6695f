from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from teamhub.domain.entities import User
from teamhub.routers import found, get_storage
from teamhub.routers.schemas import UserCreate, changes

router = APIRouter(prefix="/users", tags=["users"])


def public_user(user: User) -> dict:
    record = user.to_record()
    record.pop("password", None)
    return record


@router.post("", status_code=201)
async def create_user(payload: UserCreate, request: Request):
    storage = get_storage(request)
    if await storage.get_user_by_username(payload.username):
        raise HTTPException(409, "Username already taken")
    user = await storage.create_user(changes(payload))
    return public_user(user)


@router.get("/{user_id}")
async def get_user(user_id: int, request: Request):
    user = found(await get_storage(request).get_user(user_id), "User")
    return public_user(user)


@router.get("/{user_id}/teams")
async def get_user_teams(user_id: int, request: Request):
    storage = get_storage(request)
    found(await storage.get_user(user_id), "User")
    return await storage.get_teams_by_user_id(user_id)
