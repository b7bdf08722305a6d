"""Helpers shared by the Flask controllers.

Identity is issued by the external auth service: the session carries
`member_id` and `role`. This module only reads it.
"""

from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    CodeNotIssuedError,
    DomainError,
    InvalidCodeError,
    InvalidStateError,
    NotApplicableError,
    NotFoundError,
    TooEarlyError,
    ValidationError,
    WindowClosedError,
)

_HTTP_STATUS = {
    NotFoundError: 404,
    AuthorizationError: 403,
    InvalidStateError: 409,
    ValidationError: 400,
    NotApplicableError: 422,
    TooEarlyError: 422,
    WindowClosedError: 422,
    CodeNotIssuedError: 422,
    InvalidCodeError: 422,
}


def status_for(err: DomainError) -> int:
    for cls in type(err).__mro__:
        if cls in _HTTP_STATUS:
            return _HTTP_STATUS[cls]
    return 400


def error_response(err: DomainError):
    return jsonify({"success": False, **err.to_dict()}), status_for(err)


def current_member_id() -> str:
    return str(session["member_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.MEMBER


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("member_id"):
            return jsonify({"success": False, "code": "UNAUTHENTICATED", "message": "로그인이 필요합니다"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("member_id"):
            return jsonify({"success": False, "code": "UNAUTHENTICATED", "message": "로그인이 필요합니다"}), 401
        if current_role() != Role.ADMIN:
            return error_response(AuthorizationError("관리자 권한이 필요합니다"))
        return view(*args, **kwargs)

    return wrapper


def handles_domain_errors(view):
    """Map DomainError to its JSON response; anything else is logged and answered with 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Unhandled error in %s %s", request.method, request.path)
            return jsonify({"success": False, "code": "INTERNAL_ERROR", "message": "서버 오류가 발생했습니다"}), 500

    return wrapper
