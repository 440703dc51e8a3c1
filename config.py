"""
Central configuration for the hackathon backend.

Every value comes from the environment (a `.env` at the repository root is
loaded first). Defaults are suitable for local development only.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


def _find_repo_root(start: Path) -> Path:
    markers = (".env", "pyproject.toml")
    for p in [start, *start.parents]:
        if any((p / m).exists() for m in markers):
            return p
    return start.parent


REPO_ROOT = _find_repo_root(Path(__file__).resolve().parent)
load_dotenv(dotenv_path=REPO_ROOT / ".env", override=False)

# ----------------------- Database -----------------------
DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

# ----------------------- Tokens -----------------------
# Each token kind is signed with its own secret.
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
EMAIL_TOKEN_SECRET = os.getenv("EMAIL_TOKEN_SECRET", "dev-email-secret-change-me")
RESET_TOKEN_SECRET = os.getenv("RESET_TOKEN_SECRET", "dev-reset-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MIN = int(os.getenv("JWT_EXPIRES_MIN", "10080"))  # 7 days
EMAIL_TOKEN_EXPIRES_MIN = int(os.getenv("EMAIL_TOKEN_EXPIRES_MIN", "4320"))  # 3 days
RESET_TOKEN_EXPIRES_MIN = int(os.getenv("RESET_TOKEN_EXPIRES_MIN", "60"))

# ----------------------- Email -----------------------
EMAIL_API_URL = os.getenv("EMAIL_API_URL", "https://api.sendgrid.com/v3/mail/send")
EMAIL_API_KEY = os.getenv("EMAIL_API_KEY", "").strip()
EMAIL_FROM = os.getenv("EMAIL_FROM", "hello@hackathon.local")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/")

# ----------------------- Hackathon -----------------------
HACKATHON_EVENT_NAME = os.getenv("HACKATHON_EVENT_NAME", "Hackathon")
SETTINGS_TEMPLATE = Path(os.getenv("SETTINGS_TEMPLATE", str(REPO_ROOT / "settings.json")))

PORT = int(os.getenv("PORT", "8000"))
