from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from teamhub.routers import found, get_storage
from teamhub.routers.schemas import AnnouncementCreate, AnnouncementUpdate, changes

router = APIRouter(tags=["announcements"])


@router.get("/teams/{team_id}/announcements")
async def list_announcements(team_id: int, request: Request):
    return await get_storage(request).get_announcements(team_id)


@router.get("/teams/{team_id}/announcements/recent")
async def recent_announcements(team_id: int, request: Request, limit: int = Query(5, ge=1, le=100)):
    return await get_storage(request).get_recent_announcements(team_id, limit)


@router.post("/teams/{team_id}/announcements", status_code=201)
async def create_announcement(team_id: int, payload: AnnouncementCreate, request: Request):
    storage = get_storage(request)
    found(await storage.get_team(team_id), "Team")
    return await storage.create_announcement({**changes(payload), "team_id": team_id})


@router.get("/announcements/{announcement_id}")
async def get_announcement(announcement_id: int, request: Request):
    return found(await get_storage(request).get_announcement(announcement_id), "Announcement")


@router.patch("/announcements/{announcement_id}")
async def update_announcement(announcement_id: int, payload: AnnouncementUpdate, request: Request):
    storage = get_storage(request)
    return found(await storage.update_announcement(announcement_id, changes(payload)), "Announcement")


@router.delete("/announcements/{announcement_id}")
async def delete_announcement(announcement_id: int, request: Request):
    if not await get_storage(request).delete_announcement(announcement_id):
        raise HTTPException(404, "Announcement not found")
    return {"ok": True}
