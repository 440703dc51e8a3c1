from typing import List

import database
from config import HACKATHON_EVENT_NAME
from schemas import Event


def get_current_event() -> dict:
    """The event this deployment runs, looked up by name and created if missing."""
    events = database.get_collection("event")
    event = events.find_one({"name": HACKATHON_EVENT_NAME})
    if event is None:
        database.create_document("event", database.build_document(Event, {"name": HACKATHON_EVENT_NAME}))
        event = events.find_one({"name": HACKATHON_EVENT_NAME})
    return event


def list_events() -> List[dict]:
    return database.get_documents("event")
