"""Request parsing helpers shared by the HTTP handlers."""

import json
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from utils.error_handling import UnauthorizedError, ValidationError

M = TypeVar("M", bound=BaseModel)


def http_method(event: Dict[str, Any]) -> str:
    """HTTP method of an API Gateway HTTP API (payload 2.0) event."""
    return event.get("requestContext", {}).get("http", {}).get("method", "").upper()


def http_path(event: Dict[str, Any]) -> str:
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    return path.rstrip("/") or "/"


def parse_body(event: Dict[str, Any], model: Type[M]) -> M:
    """Decode the JSON body and validate it, raising ValidationError (422)."""
    try:
        payload = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        raise ValidationError("Request body must be valid JSON") from exc

    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "body"
        raise ValidationError(f"{field}: {first.get('msg', 'invalid value')}") from exc


def caller_identity(event: Dict[str, Any]) -> Tuple[str, Optional[str]]:
    """
    ``(user_id, email)`` from the JWT claims API Gateway verified.

    Identity never comes from the request body. Raises UnauthorizedError (401)
    when there is no authorizer context or no ``sub`` claim.
    """
    claims = (
        event.get("requestContext", {})
        .get("authorizer", {})
        .get("jwt", {})
        .get("claims")
        or {}
    )
    user_id = str(claims.get("sub") or "").strip()
    if not user_id:
        raise UnauthorizedError()
    email = str(claims.get("email") or "").strip() or None
    return user_id, email
