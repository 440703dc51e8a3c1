"""
MongoDB access helpers.

`db` is None when DATABASE_URL / DATABASE_NAME are not configured; every helper
looks it up at call time so it can be swapped out (tests point it at mongomock).
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, Union

from bson import ObjectId
from fastapi import HTTPException
from pydantic import BaseModel, ValidationError
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection

from config import DATABASE_NAME, DATABASE_URL
from errors import CastError, DocumentValidationError

_client: Optional[MongoClient] = None
db = None

if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]


def get_collection(name: str) -> Collection:
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return db[name]


def to_object_id(value: Any) -> ObjectId:
    """Convert a path/query/body identifier to an ObjectId or raise CastError."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise CastError(value)


def build_document(schema: Type[BaseModel], data: Dict[str, Any]) -> BaseModel:
    try:
        return schema(**data)
    except ValidationError as e:
        raise DocumentValidationError(str(e)) from e


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    """Insert a document, stamping created_at/updated_at. Returns the new id as str."""
    if isinstance(data, BaseModel):
        doc = data.model_dump()
    else:
        doc = dict(data)
    now = datetime.now(timezone.utc)
    doc["created_at"] = now
    doc["updated_at"] = now
    result = get_collection(collection_name).insert_one(doc)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[dict] = None, limit: Optional[int] = None,
                  projection: Optional[dict] = None) -> List[dict]:
    cursor = get_collection(collection_name).find(filter_dict or {}, projection)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def find_by_id(collection_name: str, doc_id: Any, projection: Optional[dict] = None) -> Optional[dict]:
    return get_collection(collection_name).find_one({"_id": to_object_id(doc_id)}, projection)


def serialize_doc(value: Any) -> Any:
    """Make a Mongo document JSON friendly (ObjectIds become strings)."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize_doc(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize_doc(v) for v in value]
    return value


def ensure_indexes() -> None:
    """Storage-level uniqueness backing the read-then-write duplicate checks."""
    get_collection("user").create_index("email", unique=True)
    get_collection("status").create_index("user", unique=True)
    get_collection("project").create_index([("team", ASCENDING), ("event", ASCENDING)], unique=True)
    get_collection("team").create_index("members")
