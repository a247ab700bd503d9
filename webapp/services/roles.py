# webapp/services/roles.py
"""
Roles for authenticated users.

Sign-in is handled by the identity provider in front of the app; it passes
the user id in a request header (AUTH_USER_HEADER). The role lives in the
`users` collection: users/<uid> = {"role": "admin" | "scorekeeper"}.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import current_app, g, request

from webapp.services.errors import AuthenticationRequired, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)

ADMIN = "admin"
SCOREKEEPER = "scorekeeper"
ROLES = (ADMIN, SCOREKEEPER)


def get_role(store, uid: Optional[str]) -> Optional[str]:
    if not uid:
        return None
    doc = store.get("users", uid)
    role = (doc or {}).get("role")
    return role if role in ROLES else None


def set_role(store, uid: str, role: str) -> None:
    if not uid:
        raise ValidationError("A user id is required.")
    if role not in ROLES:
        raise ValidationError(f"Unknown role: {role}")
    store.set("users", uid, {"role": role}, merge=True)
    logger.info("set role %s for user %s", role, uid)


def current_user_id() -> Optional[str]:
    uid = request.headers.get(current_app.config["AUTH_USER_HEADER"], "").strip()
    return uid or None


def current_role() -> Optional[str]:
    return get_role(current_app.extensions["volley"]["store"], current_user_id())


def require_role(*allowed: str):
    """Route decorator: 401 without a user, 403 unless the user's role is allowed."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            uid = current_user_id()
            if uid is None:
                raise AuthenticationRequired("Sign in required.")
            role = get_role(current_app.extensions["volley"]["store"], uid)
            if role not in allowed:
                logger.warning("user %s (role %s) denied %s", uid, role, request.path)
                raise PermissionDenied("You do not have permission to do that.")
            g.user_id = uid
            g.role = role
            return fn(*args, **kwargs)

        return wrapper

    return decorator
