"""
Settings singleton.

There is at most one settings document. It is created from the
`settings.json` template the first time it is needed; handlers receive it
through the `get_settings` dependency instead of reading global state.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo import ReturnDocument

import database
from config import SETTINGS_TEMPLATE
from schemas import Settings

logger = logging.getLogger("hackathon-backend")


def _load_template() -> dict:
    with SETTINGS_TEMPLATE.open("r", encoding="utf-8") as f:
        parameters = json.load(f).get("parameters", {})
    # zero/null values mean "leave unset"
    return {
        key: definition["value"]
        for key, definition in parameters.items()
        if definition.get("value") not in (0, None) or isinstance(definition.get("value"), bool)
    }


def get_instance() -> Optional[dict]:
    return database.get_collection("settings").find_one({})


def create_singleton() -> dict:
    """Return the settings document, creating it from the template if absent."""
    settings = get_instance()
    if settings is not None:
        return settings
    doc = database.build_document(Settings, _load_template())
    database.create_document("settings", doc)
    logger.info("Created settings singleton from %s", SETTINGS_TEMPLATE)
    return get_instance()


def update_settings(changes: dict) -> dict:
    create_singleton()
    changes = {**changes, "updated_at": datetime.now(timezone.utc)}
    return database.get_collection("settings").find_one_and_update(
        {}, {"$set": changes}, return_document=ReturnDocument.AFTER
    )


def get_settings() -> Settings:
    """FastAPI dependency: the settings document resolved once per request."""
    return Settings(**{k: v for k, v in create_singleton().items() if k in Settings.model_fields})


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _window_open(start: Optional[datetime], end: Optional[datetime], now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    start, end = _as_utc(start), _as_utc(end)
    opened = start is None or now >= start
    closed = end is not None and now > end
    return opened and not closed


def is_registration_open(settings: Settings, now: Optional[datetime] = None) -> bool:
    return _window_open(settings.time_open, settings.time_close, now)


def is_confirmation_open(settings: Settings, now: Optional[datetime] = None) -> bool:
    return _window_open(settings.time_open, settings.time_confirm, now)
