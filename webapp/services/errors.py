# webapp/services/errors.py
"""
Error types shared by the services and the HTTP layer.

Each carries the HTTP status the routes answer with, so blueprints can
translate any of them with one handler.
"""


class VolleyError(Exception):
    status_code = 500


class ValidationError(VolleyError, ValueError):
    status_code = 400


class NotFoundError(VolleyError, LookupError):
    status_code = 404


class PermissionDenied(VolleyError):
    status_code = 403


class AuthenticationRequired(VolleyError):
    status_code = 401
