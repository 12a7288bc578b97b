from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed demo users on import, linked to the fixture catalog's user ids."""
    _users["user"] = {"password_hash": _hash_password("user123"), "role": "user", "user_id": "user-1"}
    _users["newbie"] = {"password_hash": _hash_password("newbie123"), "role": "user", "user_id": "user-3"}
    # The admin account has no food lists of its own
    _users["admin"] = {"password_hash": _hash_password("admin123"), "role": "admin", "user_id": None}


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{username, role, user_id}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"username": username, "role": record["role"], "user_id": record["user_id"]}
    return None


_seed_users()
