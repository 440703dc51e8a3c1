from fastapi import APIRouter, Depends
from pymongo import ReturnDocument

import database
import status_service
from dependencies import require_admin, require_owner_or_admin
from errors import bad, not_found
from schemas import Settings, UserUpdate
from settings_service import get_settings, is_confirmation_open
from team_service import find_user_team

router = APIRouter(prefix="/users", tags=["users"])

# fields visible through the users API
USER_PROJECTION = {"_id": 1, "email": 1, "admin": 1, "name": 1, "company": 1}


def _get_user_or_404(id: str) -> dict:
    user = database.find_by_id("user", id, USER_PROJECTION)
    if user is None:
        raise not_found("User not found")
    return user


@router.get("")
def get_users(admin: dict = Depends(require_admin)):
    users = database.get_documents("user", projection=USER_PROJECTION)
    return [database.serialize_doc(u) for u in users]


@router.get("/{id}")
def get_user_by_id(id: str, user: dict = Depends(require_owner_or_admin)):
    return database.serialize_doc(_get_user_or_404(id))


@router.patch("/{id}")
def update_user(id: str, payload: UserUpdate, user: dict = Depends(require_owner_or_admin)):
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise bad("Nothing to update")
    updated = database.get_collection("user").find_one_and_update(
        {"_id": database.to_object_id(id)},
        {"$set": changes},
        projection=USER_PROJECTION,
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise not_found("User not found")
    return database.serialize_doc(updated)


@router.get("/{id}/status")
def get_user_status(id: str, user: dict = Depends(require_owner_or_admin)):
    _get_user_or_404(id)
    return database.serialize_doc(status_service.get_status(id))


@router.post("/{id}/admit")
def admit_user(id: str, admin: dict = Depends(require_admin)):
    target = _get_user_or_404(id)
    status = status_service.set_admitted(target["_id"], admin["_id"])
    return database.serialize_doc(status)


@router.post("/{id}/reject")
def reject_user(id: str, admin: dict = Depends(require_admin)):
    target = _get_user_or_404(id)
    status = status_service.set_admitted(target["_id"], admin["_id"], admitted=False)
    return database.serialize_doc(status)


@router.post("/{id}/confirm")
def confirm_user(id: str, user: dict = Depends(require_owner_or_admin),
                 settings: Settings = Depends(get_settings)):
    target = _get_user_or_404(id)
    if not is_confirmation_open(settings):
        raise bad("Confirmation is closed.")
    if not status_service.get_status(target["_id"]).get("admitted"):
        raise bad("User has not been admitted.")
    return database.serialize_doc(status_service.set_confirmed(target["_id"]))


@router.get("/{id}/team")
def get_user_team(id: str, user: dict = Depends(require_owner_or_admin)):
    team = find_user_team(id)
    if team is None:
        raise bad("User does not have a team!")
    return database.serialize_doc(team)
