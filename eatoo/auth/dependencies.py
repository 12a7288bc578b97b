from __future__ import annotations

from fastapi import HTTPException, Request

from ..catalog.sources import IdentitySource


class SessionIdentity(IdentitySource):
    """Resolves the current user id from the signed session cookie."""

    def __init__(self, request: Request) -> None:
        self.request = request

    def current_user_id(self) -> str | None:
        user = self.request.session.get("user") or {}
        return user.get("user_id")


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not admin."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
