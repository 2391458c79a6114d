"""Shared helpers for the JSON controllers: session guards, body parsing, error mapping."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_date_arg

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
]


def login_required(view):
    """Any signed-in staff user (admin or data entry)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Authentication required")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Authentication required")
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def portal_login_required(view):
    """Signed-in teacher (teacher portal session)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "portal_teacher_id" not in session:
            raise AuthenticationError("Authentication required")
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def date_arg(name: str) -> Any:
    return parse_date_arg(request.args.get(name), name)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for error_cls, status in _STATUS_BY_ERROR:
            if isinstance(e, error_cls):
                return jsonify({"message": str(e)}), status
        return jsonify({"message": str(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Internal server error"}), 500
