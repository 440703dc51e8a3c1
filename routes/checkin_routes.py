import logging

from fastapi import APIRouter, Depends, Query

import database
from dependencies import get_current_user, require_admin, require_check_in_access
from errors import not_found
from schemas import CheckinHistory, CheckinItem, CheckinItemCreate

logger = logging.getLogger("hackathon-backend")
router = APIRouter(prefix="/check-in", tags=["check-in"])


@router.post("/items")
def create_checkin_item(payload: CheckinItemCreate, admin: dict = Depends(require_admin)):
    item = database.build_document(CheckinItem, payload.model_dump())
    item_id = database.create_document("checkinitem", item)
    return database.serialize_doc(database.find_by_id("checkinitem", item_id))


@router.get("/items")
def get_checkin_items(user: dict = Depends(get_current_user)):
    return [database.serialize_doc(i) for i in database.get_documents("checkinitem")]


@router.put("")
def check_in(
    check_in_item_id: str = Query(..., alias="checkInItemID"),
    user_id: str = Query(..., alias="userID"),
    user: dict = Depends(require_check_in_access),
):
    item = database.find_by_id("checkinitem", check_in_item_id)
    if item is None:
        raise not_found("Check-in item not found")
    target = database.find_by_id("user", user_id, {"_id": 1})
    if target is None:
        raise not_found("User not found")

    entry = database.build_document(
        CheckinHistory, {"user": target["_id"], "item": item["_id"], "checked_in_by": user["_id"]}
    )
    entry_id = database.create_document("checkinhistory", entry)
    logger.info("User %s checked in to %s", user_id, check_in_item_id)
    return database.serialize_doc(database.find_by_id("checkinhistory", entry_id))
