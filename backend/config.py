"""
Runtime settings for the readiness API, read from the environment.

Values may also be placed in a .env file in the backend root:

READINESS_MAX_CONTENT_CHARS=2000000
READINESS_CORS_ORIGINS=https://dashboard.example.com,https://admin.example.com
READINESS_REQUEST_LOG=1

The app loads environment variables automatically using python-dotenv.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

MAX_CONTENT_CHARS = int(os.getenv("READINESS_MAX_CONTENT_CHARS", "2000000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("READINESS_CORS_ORIGINS", "*").split(",")
    if origin.strip()
] or ["*"]
REQUEST_LOG = os.getenv("READINESS_REQUEST_LOG", "1").strip().lower() not in {
    "0",
    "false",
    "no",
    "off",
}
