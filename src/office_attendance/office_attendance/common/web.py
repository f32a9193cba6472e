from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Callable

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DeviceConflictError,
    DomainError,
    DuplicateCheckInError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_date_or_datetime, parse_iso_date

logger = logging.getLogger(__name__)


def login_required(view):
    """Identity is established upstream; the session carries `staff_id` and `role`."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "staff_id" not in session:
            return jsonify({"message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "staff_id" not in session:
            return jsonify({"message": "Authentication required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"message": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_staff_id() -> int:
    return int(session["staff_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def date_arg(value: Any, field_name: str) -> date:
    try:
        return parse_iso_date(str(value or ""))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def date_or_datetime_arg(value: Any, field_name: str):
    try:
        return parse_date_or_datetime(str(value or ""))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date or timestamp")


def handle_errors(action: str) -> Callable:
    """Translate domain errors into JSON responses; anything else is a generic server error."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DuplicateCheckInError as e:
                return jsonify({"message": str(e), "already_checked_in": True}), 200
            except ValidationError as e:
                return jsonify({"message": str(e)}), 400
            except DeviceConflictError as e:
                return jsonify({"message": str(e), "reason": e.reason}), 403
            except AuthorizationError as e:
                return jsonify({"message": str(e)}), 403
            except NotFoundError as e:
                return jsonify({"message": str(e)}), 404
            except DomainError as e:
                return jsonify({"message": str(e)}), 400
            except Exception:
                logger.exception("Unhandled error during %s", action)
                return jsonify({"message": f"Server error during {action}"}), 500

        return wrapper

    return decorator
