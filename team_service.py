from typing import Optional

import database
from event_service import get_current_event
from schemas import Team


def find_user_team(user_id) -> Optional[dict]:
    """Team in the current event that has the user as a member."""
    event = get_current_event()
    return database.get_collection("team").find_one(
        {"members": database.to_object_id(user_id), "event": event["_id"]}
    )


def get_team(team_id) -> Optional[dict]:
    return database.find_by_id("team", team_id)


def is_member(user_id, team_id) -> bool:
    team = get_team(team_id)
    if team is None:
        return False
    return database.to_object_id(user_id) in team.get("members", [])


def create_team(owner_id, name: str, description: Optional[str] = None) -> dict:
    owner = database.to_object_id(owner_id)
    event = get_current_event()
    team = database.build_document(
        Team,
        {"name": name, "description": description, "event": event["_id"], "admin": owner, "members": [owner]},
    )
    team_id = database.create_document("team", team)
    return get_team(team_id)
