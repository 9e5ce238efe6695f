"""Matches, events and attendance."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from teamhub.core.utils import parse_datetime
from teamhub.routers import found, get_storage
from teamhub.routers.schemas import (
    AttendanceCreate,
    EventCreate,
    EventUpdate,
    MatchCreate,
    MatchUpdate,
    changes,
)

router = APIRouter(tags=["schedule"])


# -------------------------- matches --------------------------
@router.get("/teams/{team_id}/matches")
async def list_matches(team_id: int, request: Request):
    return await get_storage(request).get_matches(team_id)


@router.get("/teams/{team_id}/matches/recent")
async def recent_matches(team_id: int, request: Request, limit: int = Query(5, ge=1, le=100)):
    return await get_storage(request).get_recent_matches(team_id, limit)


@router.get("/teams/{team_id}/matches/upcoming")
async def upcoming_matches(team_id: int, request: Request, limit: int = Query(5, ge=1, le=100)):
    return await get_storage(request).get_upcoming_matches(team_id, limit)


@router.post("/teams/{team_id}/matches", status_code=201)
async def create_match(team_id: int, payload: MatchCreate, request: Request):
    storage = get_storage(request)
    found(await storage.get_team(team_id), "Team")
    return await storage.create_match({**changes(payload), "team_id": team_id})


@router.get("/matches/{match_id}")
async def get_match(match_id: int, request: Request):
    return found(await get_storage(request).get_match(match_id), "Match")


@router.patch("/matches/{match_id}")
async def update_match(match_id: int, payload: MatchUpdate, request: Request):
    return found(await get_storage(request).update_match(match_id, changes(payload)), "Match")


@router.delete("/matches/{match_id}")
async def delete_match(match_id: int, request: Request):
    if not await get_storage(request).delete_match(match_id):
        raise HTTPException(404, "Match not found")
    return {"ok": True}


# -------------------------- events --------------------------
@router.get("/teams/{team_id}/events")
async def list_events(team_id: int, request: Request):
    return await get_storage(request).get_events(team_id)


@router.get("/teams/{team_id}/events/upcoming")
async def upcoming_events(team_id: int, request: Request, limit: int = Query(5, ge=1, le=100)):
    return await get_storage(request).get_upcoming_events(team_id, limit)


@router.post("/teams/{team_id}/events", status_code=201)
async def create_event(team_id: int, payload: EventCreate, request: Request):
    start_time, end_time = parse_datetime(payload.start_time), parse_datetime(payload.end_time)
    if end_time and end_time < start_time:
        raise HTTPException(400, "end_time must not be before start_time")
    storage = get_storage(request)
    found(await storage.get_team(team_id), "Team")
    return await storage.create_event({**changes(payload), "team_id": team_id})


@router.get("/events/{event_id}")
async def get_event(event_id: int, request: Request):
    return found(await get_storage(request).get_event(event_id), "Event")


@router.patch("/events/{event_id}")
async def update_event(event_id: int, payload: EventUpdate, request: Request):
    return found(await get_storage(request).update_event(event_id, changes(payload)), "Event")


@router.delete("/events/{event_id}")
async def delete_event(event_id: int, request: Request):
    if not await get_storage(request).delete_event(event_id):
        raise HTTPException(404, "Event not found")
    return {"ok": True}


# -------------------------- attendance --------------------------
@router.get("/events/{event_id}/attendance")
async def list_attendance(event_id: int, request: Request):
    return await get_storage(request).get_attendance(event_id)


@router.post("/events/{event_id}/attendance")
async def respond_to_event(event_id: int, payload: AttendanceCreate, request: Request):
    """Create the user's attendance row, or update its status when one exists."""
    storage = get_storage(request)
    found(await storage.get_event(event_id), "Event")
    existing = await storage.attendance.get_by_event_and_user(event_id, payload.user_id)
    if existing:
        return await storage.update_attendance(existing.id, {"status": payload.status or existing.status})
    return await storage.create_attendance({**changes(payload), "event_id": event_id})
