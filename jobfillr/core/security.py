from __future__ import annotations

from fastapi import Header, HTTPException, status

from jobfillr.core.config import settings


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please provide a valid API key.",
        )


def parse_user_id(raw: str | None) -> int:
    value = (raw or "").strip()
    if not value.isdigit() or int(value) < 1:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header must be a positive integer.",
        )
    return int(value)


def current_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> int:
    """Authenticated user for a request; identity is asserted upstream by the auth proxy."""
    check_api_key(x_api_key)
    return parse_user_id(x_user_id)


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    check_api_key(x_api_key)
