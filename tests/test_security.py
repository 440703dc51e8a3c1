import pytest
from bson import ObjectId

import security


def test_good_password_validates():
    hashed = security.generate_hash("abc123")
    assert hashed != "abc123"
    assert security.check_password("abc123", hashed) is True


def test_bad_password_does_not_validate():
    hashed = security.generate_hash("abc123")
    assert security.check_password("123abc", hashed) is False


def test_check_password_with_garbage_hash():
    assert security.check_password("abc123", "not-a-hash") is False
    assert security.check_password("abc123", None) is False


def test_auth_token_decrypts_to_user_id():
    user_id = ObjectId()
    token = security.generate_auth_token(user_id)
    assert security.decrypt_auth_token(token) == str(user_id)


def test_email_verification_token_decrypts_to_email():
    token = security.generate_email_verification_token("hacker@hackathon.dev")
    assert security.decrypt_email_verification_token(token) == "hacker@hackathon.dev"


def test_password_reset_token_decrypts_to_email():
    token = security.generate_password_reset_token("hacker@hackathon.dev")
    assert security.decrypt_password_reset_token(token) == "hacker@hackathon.dev"


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", None, "eyJhbGciOiJIUzI1NiJ9.e30.sig"])
def test_garbage_tokens_decode_to_none(garbage):
    assert security.decrypt_auth_token(garbage) is None
    assert security.decrypt_email_verification_token(garbage) is None
    assert security.decrypt_password_reset_token(garbage) is None


def test_token_kinds_are_not_interchangeable():
    email_token = security.generate_email_verification_token("hacker@hackathon.dev")
    reset_token = security.generate_password_reset_token("hacker@hackathon.dev")
    assert security.decrypt_auth_token(email_token) is None
    assert security.decrypt_password_reset_token(email_token) is None
    assert security.decrypt_email_verification_token(reset_token) is None


def test_tampered_token_is_rejected():
    token = security.generate_auth_token(ObjectId())
    head, payload, signature = token.split(".")
    tampered = ".".join([head, payload, signature[::-1]])
    assert security.decrypt_auth_token(tampered) is None


def test_public_user_strips_password():
    user = {"_id": ObjectId(), "email": "a@b.dev", "password": "hash"}
    out = security.public_user(user)
    assert "password" not in out
    assert out["_id"] == str(user["_id"])


@pytest.mark.parametrize(
    "kind, secret, decrypt",
    [
        (security.AUTH, security.JWT_SECRET, security.decrypt_auth_token),
        (security.EMAIL_VERIFICATION, security.EMAIL_TOKEN_SECRET, security.decrypt_email_verification_token),
        (security.PASSWORD_RESET, security.RESET_TOKEN_SECRET, security.decrypt_password_reset_token),
    ],
)
def test_expired_tokens_decode_to_none(kind, secret, decrypt):
    fresh = security._encode("hacker@hackathon.dev", kind, secret, 5)
    expired = security._encode("hacker@hackathon.dev", kind, secret, -1)
    assert decrypt(fresh) == "hacker@hackathon.dev"
    assert decrypt(expired) is None
