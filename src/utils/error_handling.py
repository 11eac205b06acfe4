"""Application exceptions and the JSON responses they map to."""

import json
from typing import Any, Dict, Optional

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class UnauthorizedError(AppError):
    """Raised when the caller has no verified identity."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class UpstreamError(AppError):
    """Raised when the database or another backing service fails."""

    def __init__(self, message: str = "Upstream service failed"):
        super().__init__(message, status_code=500)


def json_response(status: int, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Format an API Gateway HTTP API response with CORS headers."""
    return {
        "statusCode": status,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(body) if body is not None else "",
    }


def preflight_response() -> Dict[str, Any]:
    """Empty response for CORS ``OPTIONS`` requests."""
    return {"statusCode": 200, "headers": dict(CORS_HEADERS), "body": ""}


def to_response(error: AppError, /, **extra: Any) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body = {"message": str(error), "status": "error"}
    body.update(extra)
    return json_response(error.status_code, body)
