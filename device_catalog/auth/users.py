from __future__ import annotations

import logging
import os
from typing import Any

import bcrypt

from .dependencies import OPERATOR_ROLE

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_PASSWORD = "admin123"

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def add_user(username: str, password: str, role: str = "user") -> None:
    _users[username] = {"password_hash": _hash_password(password), "role": role}


def _seed_users() -> None:
    """Seed the operator account allowed to trigger ingestion."""
    username = os.getenv("DEVICE_ADMIN_USERNAME", "admin")
    password = os.getenv("DEVICE_ADMIN_PASSWORD")
    if not password:
        logger.warning(
            "DEVICE_ADMIN_PASSWORD is not set; operator %s uses the default password",
            username,
        )
        password = DEFAULT_ADMIN_PASSWORD
    add_user(username, password, role=OPERATOR_ROLE)


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{username, role}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"username": username, "role": record["role"]}
    return None


_seed_users()
