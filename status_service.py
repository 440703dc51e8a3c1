"""Per-user admission / verification / confirmation flags."""

from datetime import datetime, timezone

from pymongo import ReturnDocument

import database

_DEFAULTS = {"verified": False, "admitted": None, "admitted_by": None, "confirmed": False, "declined": False}


def _upsert(user_id, changes: dict) -> dict:
    now = datetime.now(timezone.utc)
    on_insert = {k: v for k, v in _DEFAULTS.items() if k not in changes}
    on_insert["created_at"] = now
    return database.get_collection("status").find_one_and_update(
        {"user": database.to_object_id(user_id)},
        {"$set": {**changes, "updated_at": now}, "$setOnInsert": on_insert},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )


def get_status(user_id) -> dict:
    """Status document for a user, created with default flags on first access."""
    status = database.get_collection("status").find_one({"user": database.to_object_id(user_id)})
    if status is not None:
        return status
    return _upsert(user_id, {})


def verify_user(user_id) -> dict:
    return _upsert(user_id, {"verified": True})


def set_admitted(user_id, admitter_id, admitted: bool = True) -> dict:
    return _upsert(user_id, {"admitted": admitted, "admitted_by": database.to_object_id(admitter_id)})


def set_confirmed(user_id, confirmed: bool = True) -> dict:
    return _upsert(user_id, {"confirmed": confirmed, "declined": not confirmed})
