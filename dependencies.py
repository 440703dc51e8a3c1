"""
Access control, as FastAPI dependencies.

Every gate resolves the `x-access-token` header to a user first (401 when it is
missing or does not resolve) and then applies its own predicate. A failing
predicate is also a 401 and the route handler never runs.
"""

from typing import Optional

from bson import ObjectId
from fastapi import Depends, Header, Query

import database
from errors import bad, unauthorized
from security import get_by_token
from team_service import is_member


def get_token(x_access_token: Optional[str] = Header(None, alias="x-access-token")) -> Optional[str]:
    return x_access_token


def get_current_user(token: Optional[str] = Depends(get_token)) -> dict:
    if not token:
        raise unauthorized("Missing access token")
    user = get_by_token(token)
    if user is None:
        raise unauthorized("Invalid access token")
    return user


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not user.get("admin"):
        raise unauthorized("Admin access required")
    return user


def require_owner_or_admin(id: str, user: dict = Depends(get_current_user)) -> dict:
    """Admin, or the user whose id is the `id` path parameter."""
    if user.get("admin") or str(user["_id"]) == id:
        return user
    raise unauthorized()


def require_project_owner_or_admin(id: str, user: dict = Depends(get_current_user)) -> dict:
    """Admin, or a member of the team that owns project `id`."""
    if user.get("admin"):
        return user
    project = None
    if ObjectId.is_valid(id):
        project = database.get_collection("project").find_one({"_id": ObjectId(id)}, {"team": 1})
    if project is None or not is_member(user["_id"], project["team"]):
        raise unauthorized()
    return user


def require_check_in_access(
    check_in_item_id: Optional[str] = Query(None, alias="checkInItemID"),
    user_id: Optional[str] = Query(None, alias="userID"),
    token: Optional[str] = Depends(get_token),
) -> dict:
    """Admin, or self check-in on an item that allows it."""
    if not token:
        raise unauthorized("Missing access token")
    if not check_in_item_id or not user_id:
        raise bad("Missing checkInItemID or userID")
    user = get_current_user(token)
    if user.get("admin"):
        return user
    item = database.find_by_id("checkinitem", check_in_item_id)
    if item is not None and item.get("enable_self_checkin") and str(user["_id"]) == user_id:
        return user
    raise unauthorized()
