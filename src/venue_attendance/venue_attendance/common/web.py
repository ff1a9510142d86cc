from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
)

_logger = logging.getLogger(__name__)


def ok(payload: dict | None = None, *, message: str = "", status: int = 200):
    body = {"success": True, "message": message}
    body.update(payload or {})
    return jsonify(body), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def _status_for(e: DomainError) -> int:
    if isinstance(e, AuthenticationError):
        return 401
    if isinstance(e, AuthorizationError):
        return 403
    if isinstance(e, NotFoundError):
        return 404
    return 400


def json_endpoint(view):
    """Turn domain errors into {success: false} responses and log the rest."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return fail(str(e), _status_for(e))
        except Exception:
            _logger.exception("Unhandled error in %s", view.__name__)
            return fail("Error interno del sistema", 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Debe iniciar sesión", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Debe iniciar sesión", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("No tiene permisos", 403)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))
