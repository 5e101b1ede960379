"""JSON envelope and bearer-token helpers shared by the API controllers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import g, jsonify, request

from ..core.exceptions import AuthenticationError


def ok(data: Any = None, message: str = "OK", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message, "data": None}), status


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def make_bearer_required(resolve_token: Callable[[str], int]):
    """Build a view decorator that puts the caller's company id into ``g.company_id``."""

    def bearer_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.company_id = resolve_token(bearer_token())
            except AuthenticationError as e:
                return fail(str(e), 401)
            return view(*args, **kwargs)

        return wrapper

    return bearer_required
