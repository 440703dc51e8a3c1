from fastapi import APIRouter, Depends

import database
import event_service
import team_service
from dependencies import get_current_user
from errors import bad, not_found
from schemas import TeamCreate

router = APIRouter(tags=["teams"])


@router.post("/teams")
def create_team(payload: TeamCreate, user: dict = Depends(get_current_user)):
    if team_service.find_user_team(user["_id"]) is not None:
        raise bad("You are already on a team.")
    team = team_service.create_team(user["_id"], payload.name, payload.description)
    return database.serialize_doc(team)


@router.get("/teams/{id}")
def get_team(id: str, user: dict = Depends(get_current_user)):
    team = team_service.get_team(id)
    if team is None:
        raise not_found("Team not found")
    return database.serialize_doc(team)


@router.get("/events")
def list_events():
    return [database.serialize_doc(e) for e in event_service.list_events()]


@router.get("/events/current")
def current_event():
    return database.serialize_doc(event_service.get_current_event())
