"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

OPTIONS on any path is a CORS preflight. The assignment route matches every
other method; the rest match one method each.
"""

from typing import Callable, Optional, Tuple

from . import agent_assignment, health_check, otp, otp_email
from utils.error_handling import json_response, preflight_response
from utils.validators import http_method, http_path


def lambda_handler(event, context):
    """Entry point invoked by API Gateway HTTP API."""
    method = http_method(event)
    path = http_path(event)

    if method == "OPTIONS":
        return preflight_response()

    # (method, path, handler); a method of None matches any verb.
    route_table: Tuple[Tuple[Optional[str], str, Callable], ...] = (
        ("GET", "/health", health_check.lambda_handler),
        (None, "/tickets/assign", agent_assignment.lambda_handler),
        ("POST", "/otp/issue", otp.issue_handler),
        ("POST", "/otp/verify", otp.verify_handler),
        ("POST", "/otp/email", otp_email.lambda_handler),
    )

    for route_method, route_path, handler in route_table:
        if path == route_path and route_method in (None, method):
            return handler(event, context)

    return json_response(404, {"message": "Route not found", "route": f"{method} {path}"})
