import secrets

from fastapi import Header, HTTPException
from .config import settings


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    """Reject requests without the configured key; open access when none is set."""
    expected = settings.api_key
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=401, detail="Invalid API key")
