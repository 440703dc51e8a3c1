from fastapi import APIRouter, Depends

import database
import settings_service
from dependencies import require_admin
from schemas import Settings, SettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
def get_settings(settings: Settings = Depends(settings_service.get_settings)):
    return settings.model_dump()


@router.patch("")
def update_settings(payload: SettingsUpdate, admin: dict = Depends(require_admin)):
    updated = settings_service.update_settings(payload.model_dump(exclude_unset=True))
    return database.serialize_doc(updated)


@router.get("/registration-open")
def registration_open(settings: Settings = Depends(settings_service.get_settings)):
    return {"open": settings_service.is_registration_open(settings)}


@router.get("/confirmation-open")
def confirmation_open(settings: Settings = Depends(settings_service.get_settings)):
    return {"open": settings_service.is_confirmation_open(settings)}
