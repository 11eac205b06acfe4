"""Common base for JSON API payloads."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Request/response model exchanged with the browser client.

    The client speaks camelCase (``ticketId``, ``agentName``); Python code uses
    snake_case. Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_body(self) -> Dict[str, Any]:
        """Serialize for a JSON response, camelCase and without empty fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
