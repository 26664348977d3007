from __future__ import annotations

import logging

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

OPERATOR_ROLE = "admin"


def require_user(request: Request) -> dict:
    """Session user, or 401."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Only operators may trigger a device dataset refresh."""
    user = require_user(request)
    if user.get("role") != OPERATOR_ROLE:
        logger.warning("User %s denied access to %s", user.get("username"), request.url.path)
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
