"""
Request Hooks

Assigns a request id to every request and logs its outcome.
"""

import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def register_request_hooks(app: Flask) -> None:
    """
    Register before/after request hooks on the application.

    Args:
        app: Flask application
    """

    @app.before_request
    def assign_request_id():
        g.request_id = str(uuid.uuid4())
        g.request_started = time.monotonic()

    @app.after_request
    def log_request(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id

        started = getattr(g, "request_started", None)
        duration = int((time.monotonic() - started) * 1000) if started is not None else 0
        logger.info(
            f"{request.method} {request.path} {response.status_code} "
            f"{duration}ms request_id={request_id} ip={request.remote_addr}"
        )
        return response
