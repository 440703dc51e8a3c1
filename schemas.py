"""
Database Schemas

Pydantic models that represent MongoDB collections. Each class name becomes
a collection name in lowercase. Request bodies live at the bottom of the file.
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional, List
from datetime import datetime
from bson import ObjectId


class _Document(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)


class User(_Document):
    email: EmailStr
    password: str = Field(..., description="bcrypt hash of the password")
    admin: bool = False
    name: Optional[str] = None
    company: Optional[str] = None


class Status(_Document):
    user: ObjectId
    verified: bool = False
    admitted: Optional[bool] = None
    admitted_by: Optional[ObjectId] = None
    confirmed: bool = False
    declined: bool = False


class Settings(_Document):
    time_open: Optional[datetime] = Field(None, description="Registration opens")
    time_close: Optional[datetime] = Field(None, description="Registration closes")
    time_confirm: Optional[datetime] = Field(None, description="Confirmation deadline")
    enable_waitlist: bool = False
    waitlist_text: Optional[str] = None
    acceptance_text: Optional[str] = None
    confirm_text: Optional[str] = None
    allow_minors: bool = False
    max_team_size: int = Field(4, ge=1)


class Event(_Document):
    name: str
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class Team(_Document):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    event: ObjectId
    admin: ObjectId = Field(..., description="User who created the team")
    members: List[ObjectId] = Field(default_factory=list)


class Project(_Document):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    url: Optional[str] = None
    slides: Optional[str] = None
    video: Optional[str] = None
    team: ObjectId
    event: ObjectId
    prizes: List[ObjectId] = Field(default_factory=list)


class Prize(_Document):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    eligibility: Optional[str] = None
    provider: Optional[str] = None
    event: ObjectId
    winner: Optional[ObjectId] = Field(None, description="Winning team")


class CheckinItem(_Document):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    points: int = 0
    enable_self_checkin: bool = False


class CheckinHistory(_Document):
    user: ObjectId
    item: ObjectId
    checked_in_by: ObjectId


# ----------------------- Request bodies -----------------------

class _Patch(BaseModel):
    """Partial update: only listed fields may be set, unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid")


class RegisterRequest(BaseModel):
    email: EmailStr
    password: Optional[str] = None


class LoginRequest(BaseModel):
    # only validated on the credential path; a token login ignores the body
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class EmailRequest(BaseModel):
    email: Optional[EmailStr] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(_Patch):
    name: Optional[str] = None
    company: Optional[str] = None


class SettingsUpdate(_Patch):
    time_open: Optional[datetime] = None
    time_close: Optional[datetime] = None
    time_confirm: Optional[datetime] = None
    enable_waitlist: Optional[bool] = None
    waitlist_text: Optional[str] = None
    acceptance_text: Optional[str] = None
    confirm_text: Optional[str] = None
    allow_minors: Optional[bool] = None
    max_team_size: Optional[int] = Field(None, ge=1)


class TeamCreate(BaseModel):
    name: str
    description: Optional[str] = None


class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None
    url: Optional[str] = None
    slides: Optional[str] = None
    video: Optional[str] = None
    team: str


class ProjectUpdate(_Patch):
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    slides: Optional[str] = None
    video: Optional[str] = None


class PrizeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    eligibility: Optional[str] = None
    provider: Optional[str] = None


class PrizeUpdate(_Patch):
    name: Optional[str] = None
    description: Optional[str] = None
    eligibility: Optional[str] = None
    provider: Optional[str] = None
    winner: Optional[str] = Field(None, description="Winning team id")


class CheckinItemCreate(BaseModel):
    name: str
    description: Optional[str] = None
    points: int = 0
    enable_self_checkin: bool = False
