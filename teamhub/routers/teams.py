from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from teamhub.routers import found, get_storage
from teamhub.routers.schemas import MemberCreate, MemberUpdate, TeamCreate, TeamUpdate, changes

router = APIRouter(tags=["teams"])


@router.get("/teams")
async def list_teams(request: Request):
    return await get_storage(request).get_teams()


@router.post("/teams", status_code=201)
async def create_team(payload: TeamCreate, request: Request):
    return await get_storage(request).create_team(changes(payload))


@router.get("/teams/join/{join_code}")
async def team_by_join_code(join_code: str, request: Request):
    code = (join_code or "").strip().upper()
    return found(await get_storage(request).get_team_by_join_code(code), "Team")


@router.get("/teams/{team_id}")
async def get_team(team_id: int, request: Request):
    return found(await get_storage(request).get_team(team_id), "Team")


@router.patch("/teams/{team_id}")
async def update_team(team_id: int, payload: TeamUpdate, request: Request):
    return found(await get_storage(request).update_team(team_id, changes(payload)), "Team")


@router.delete("/teams/{team_id}")
async def delete_team(team_id: int, request: Request):
    if not await get_storage(request).delete_team(team_id):
        raise HTTPException(404, "Team not found")
    return {"ok": True}


# -------------------------- members --------------------------
@router.get("/teams/{team_id}/members")
async def list_members(team_id: int, request: Request):
    return await get_storage(request).get_team_members(team_id)


@router.post("/teams/{team_id}/members", status_code=201)
async def add_member(team_id: int, payload: MemberCreate, request: Request):
    storage = get_storage(request)
    found(await storage.get_team(team_id), "Team")
    found(await storage.get_user(payload.user_id), "User")
    if await storage.get_team_member(team_id, payload.user_id):
        raise HTTPException(409, "User is already a member of this team")
    return await storage.create_team_member({**changes(payload), "team_id": team_id})


@router.patch("/members/{member_id}")
async def update_member(member_id: int, payload: MemberUpdate, request: Request):
    return found(await get_storage(request).update_team_member(member_id, changes(payload)), "Member")


@router.delete("/members/{member_id}")
async def remove_member(member_id: int, request: Request):
    if not await get_storage(request).delete_team_member(member_id):
        raise HTTPException(404, "Member not found")
    return {"ok": True}
