"""Pydantic request models for the HTTP API."""

import re
from typing import Optional

from pydantic import AnyUrl, BaseModel, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticCustomError

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
ALIAS_MAX_LENGTH = 64

# Paths served by the app itself; an alias with one of these names could never resolve.
RESERVED_ALIASES = frozenset({"docs", "redoc", "health"})

# Absolute URL with a scheme; schemes such as http also need a non-empty, well-formed host.
_ABSOLUTE_URL = TypeAdapter(AnyUrl)


class SaveRequest(BaseModel):
    """Request payload for saving a url under an alias."""

    url: str
    alias: Optional[str] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "url is required")
        try:
            _ABSOLUTE_URL.validate_python(v)
        except ValidationError:
            raise PydanticCustomError("url", "url is not a valid URL")
        return v

    @field_validator("alias")
    @classmethod
    def validate_alias(cls, v: Optional[str]) -> Optional[str]:
        # Empty alias means "generate one"
        if not v:
            return None
        if len(v) > ALIAS_MAX_LENGTH or not ALIAS_PATTERN.match(v) or v.lower() in RESERVED_ALIASES:
            raise PydanticCustomError("alias", "alias is not valid")
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "alias": "myrepo"},
            ]
        }
    }
