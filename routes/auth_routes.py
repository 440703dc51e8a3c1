import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Response
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

import database
import email_client
import status_service
from dependencies import get_token
from errors import bad, not_found
from schemas import (
    EmailRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    Settings,
    User,
)
from security import (
    check_password,
    decrypt_email_verification_token,
    decrypt_password_reset_token,
    generate_auth_token,
    generate_email_verification_token,
    generate_hash,
    generate_password_reset_token,
    get_by_token,
    public_user,
)
from settings_service import get_settings, is_registration_open

logger = logging.getLogger("hackathon-backend")
router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6
DUPLICATE_EMAIL = "An account with that email already exists!"


def _send_verification(email: str) -> None:
    email_client.dispatch_verification_email(email, generate_email_verification_token(email))


def _check_password_length(password: Optional[str]) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise bad(f"Password must be {MIN_PASSWORD_LENGTH} or more characters.")


@router.post("/register")
def register(payload: RegisterRequest, background_tasks: BackgroundTasks,
             settings: Settings = Depends(get_settings)):
    if not is_registration_open(settings):
        raise bad("Registration is closed.")
    _check_password_length(payload.password)

    users = database.get_collection("user")
    if users.find_one({"email": payload.email}):
        raise bad(DUPLICATE_EMAIL)

    user = database.build_document(User, {"email": payload.email, "password": generate_hash(payload.password)})
    try:
        user_id = database.create_document("user", user)
    except DuplicateKeyError:
        # lost the race against a concurrent registration
        raise bad(DUPLICATE_EMAIL)

    logger.info("Registered user %s", user_id)
    background_tasks.add_task(_send_verification, payload.email)
    doc = database.find_by_id("user", user_id)
    return {**public_user(doc), "token": generate_auth_token(user_id)}


@router.post("/login")
def login(body: Optional[Dict[str, Any]] = Body(None), token: Optional[str] = Depends(get_token)):
    """Log in with the x-access-token header, or else with email and password."""
    if token:
        user = get_by_token(token)
        if user is None:
            raise bad("Unknown account")
        return {**public_user(user), "token": token}

    try:
        payload = LoginRequest(**(body or {}))
    except ValidationError:
        raise bad("Invalid email or password")
    if not payload.email or not payload.password:
        raise bad("Missing email or password")

    user = database.get_collection("user").find_one({"email": payload.email})
    if user is None:
        raise not_found("Unknown account")
    if not check_password(payload.password, user.get("password")):
        raise bad("Incorrect password")
    return {**public_user(user), "token": generate_auth_token(user["_id"])}


@router.get("/verify/{token}")
def verify(token: str):
    email = decrypt_email_verification_token(token)
    if email is None:
        raise bad("Bad token")
    user = database.get_collection("user").find_one({"email": email})
    if user is None:
        raise not_found("User not found")
    status_service.verify_user(user["_id"])
    return {**public_user(user), "token": token}


@router.post("/resend-verification")
def resend_verification_email(payload: EmailRequest):
    if payload.email is None:
        raise bad("Missing email")
    user = database.get_collection("user").find_one({"email": payload.email})
    if user is None:
        raise not_found("User not found")
    if status_service.get_status(user["_id"]).get("verified"):
        raise bad("User is already verified!")
    email_client.send_verification_email(payload.email, generate_email_verification_token(payload.email))
    return Response(status_code=200)


@router.post("/send-reset-email")
def send_password_reset_email(payload: EmailRequest):
    if payload.email is None:
        raise bad("Missing email")
    user = database.get_collection("user").find_one({"email": payload.email})
    if user is None:
        raise not_found("Unknown user")
    email_client.send_password_reset_email(payload.email, generate_password_reset_token(payload.email))
    return Response(status_code=200)


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest):
    if payload.token is None or payload.password is None:
        raise bad("Missing token or password")
    email = decrypt_password_reset_token(payload.token)
    if email is None:
        raise bad("Bad token")
    _check_password_length(payload.password)

    user = database.get_collection("user").find_one_and_update(
        {"email": email},
        {"$set": {"password": generate_hash(payload.password)}},
        return_document=ReturnDocument.AFTER,
    )
    if user is None:
        raise not_found("User not found")
    return {**public_user(user), "token": payload.token}
