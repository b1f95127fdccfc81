"""
API Key Authentication

Decorators checking the shared API key sent in the ``X-API-Key`` header
or the ``apiKey`` query parameter.
"""

import hmac
from functools import wraps
from typing import Optional

from flask import current_app, g, jsonify, make_response, request

API_KEY_HEADER = "X-API-Key"
API_KEY_QUERY_PARAM = "apiKey"


def _provided_key() -> Optional[str]:
    return request.headers.get(API_KEY_HEADER) or request.args.get(API_KEY_QUERY_PARAM)


def _key_matches(provided: str) -> bool:
    expected = current_app.config["API_KEY"]
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_api_key(f):
    """
    Decorator rejecting requests without a valid API key.

    Missing key answers 401 ``MISSING_API_KEY``; a wrong key answers
    403 ``INVALID_API_KEY``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        provided = _provided_key()

        if not provided:
            current_app.logger.warning(f"API key missing: ip={request.remote_addr} path={request.path}")
            return make_response(jsonify({
                "success": False,
                "error": "API key is required. Provide it in X-API-Key header or apiKey query parameter.",
                "code": "MISSING_API_KEY",
            }), 401)

        if not _key_matches(provided):
            current_app.logger.warning(f"Invalid API key attempt: ip={request.remote_addr} path={request.path}")
            return make_response(jsonify({
                "success": False,
                "error": "Invalid API key provided.",
                "code": "INVALID_API_KEY",
            }), 403)

        g.authenticated = True
        return f(*args, **kwargs)

    return decorated_function


def optional_api_key(f):
    """Decorator recording in ``g.authenticated`` whether a valid key was sent; never rejects."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        provided = _provided_key()
        g.authenticated = bool(provided) and _key_matches(provided)
        if provided and not g.authenticated:
            current_app.logger.warning(f"Invalid optional API key: ip={request.remote_addr} path={request.path}")
        return f(*args, **kwargs)

    return decorated_function
