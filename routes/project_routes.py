import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

import database
from dependencies import get_current_user, require_admin, require_project_owner_or_admin
from errors import bad, not_found
from event_service import get_current_event
from schemas import Prize, PrizeCreate, PrizeUpdate, Project, ProjectCreate, ProjectUpdate
from team_service import find_user_team

logger = logging.getLogger("hackathon-backend")
router = APIRouter(prefix="/projects", tags=["projects"])

DUPLICATE_PROJECT = "You already have a project. Please edit or delete your existing project."


def _update(collection_name: str, id: str, changes: dict) -> Optional[dict]:
    changes = {**changes, "updated_at": datetime.now(timezone.utc)}
    return database.get_collection(collection_name).find_one_and_update(
        {"_id": database.to_object_id(id)},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )


# ----------------------- Prizes -----------------------
# Declared before /{id} so "prizes" is never taken for a project id.

@router.post("/prizes")
def create_prize(payload: PrizeCreate, admin: dict = Depends(require_admin)):
    event = get_current_event()
    prize = database.build_document(Prize, {**payload.model_dump(), "event": event["_id"]})
    prize_id = database.create_document("prize", prize)
    return database.serialize_doc(database.find_by_id("prize", prize_id))


@router.get("/prizes")
def get_all_prizes():
    return [database.serialize_doc(p) for p in database.get_documents("prize")]


@router.put("/prizes/enter/{id}")
def enter_project(id: str, prize_id: Optional[str] = Query(None, alias="prizeID"),
                  user: dict = Depends(require_project_owner_or_admin)):
    """Enter project `id` for a prize. Entering twice lists the prize twice."""
    if not prize_id:
        raise bad("Missing Prize ID")
    project = database.find_by_id("project", id)
    prize = database.find_by_id("prize", prize_id)
    if project is None or prize is None:
        raise bad("Invalid Project or Prize ID")

    updated = database.get_collection("project").find_one_and_update(
        {"_id": project["_id"]},
        {"$push": {"prizes": prize["_id"]}, "$set": {"updated_at": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    return database.serialize_doc(updated)


@router.get("/prizes/{id}")
def get_prize_by_id(id: str):
    prize = database.find_by_id("prize", id)
    if prize is None:
        raise not_found("Prize not found")
    return database.serialize_doc(prize)


@router.patch("/prizes/{id}")
def edit_prize(id: str, payload: PrizeUpdate, admin: dict = Depends(require_admin)):
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("winner") is not None:
        changes["winner"] = database.to_object_id(changes["winner"])
    prize = _update("prize", id, changes)
    if prize is None:
        raise not_found("Prize not found")
    return database.serialize_doc(prize)


@router.delete("/prizes/{id}")
def delete_prize(id: str, admin: dict = Depends(require_admin)):
    result = database.get_collection("prize").delete_one({"_id": database.to_object_id(id)})
    if result.deleted_count == 0:
        raise not_found("Prize not found")
    return {"message": "Successfully deleted prize."}


# ----------------------- Projects -----------------------

@router.post("")
def create_project(payload: ProjectCreate, user: dict = Depends(get_current_user)):
    event = get_current_event()
    team_id = database.to_object_id(payload.team)
    projects = database.get_collection("project")

    if projects.find_one({"team": team_id, "event": event["_id"]}):
        raise bad(DUPLICATE_PROJECT)

    if not user.get("admin"):
        user_team = find_user_team(user["_id"])
        if user_team is None or user_team["_id"] != team_id:
            raise bad("You can only create projects for your team.")

    data = payload.model_dump()
    data.update({"team": team_id, "event": event["_id"], "prizes": []})
    project = database.build_document(Project, data)
    try:
        project_id = database.create_document("project", project)
    except DuplicateKeyError:
        raise bad(DUPLICATE_PROJECT)

    logger.info("Created project %s for team %s", project_id, team_id)
    return database.serialize_doc(database.find_by_id("project", project_id))


@router.get("")
def get_all_projects(admin: dict = Depends(require_admin)):
    return [database.serialize_doc(p) for p in database.get_documents("project")]


@router.get("/{id}")
def get_project_by_id(id: str, user: dict = Depends(require_project_owner_or_admin)):
    project = database.find_by_id("project", id)
    if project is None:
        raise not_found("Project not found")
    return database.serialize_doc(project)


@router.patch("/{id}")
def edit_project(id: str, payload: ProjectUpdate, user: dict = Depends(require_project_owner_or_admin)):
    project = _update("project", id, payload.model_dump(exclude_unset=True))
    if project is None:
        raise not_found("Project not found")
    return database.serialize_doc(project)


@router.delete("/{id}")
def delete_project(id: str, user: dict = Depends(require_project_owner_or_admin)):
    result = database.get_collection("project").delete_one({"_id": database.to_object_id(id)})
    if result.deleted_count == 0:
        raise not_found("Project not found")
    return {"message": "Successfully deleted project."}
