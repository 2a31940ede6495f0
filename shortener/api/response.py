"""
Status envelope shared by every JSON response.

    {"status": "OK", ...extra fields}
    {"status": "Error", "message": "<reason>"}
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import BaseModel

STATUS_OK = "OK"
STATUS_ERROR = "Error"

MSG_EMPTY_REQUEST = "empty request"
MSG_DECODE_FAILED = "failed to decode request"
MSG_ALIAS_TAKEN = "url already exist"
MSG_ADD_FAILED = "failed to add url"
MSG_ALLOCATION_EXHAUSTED = "failed to generate alias"
MSG_NOT_FOUND = "not found"
MSG_INTERNAL = "internal error"
MSG_DELETE_FAILED = "failed to delete url"


class Response(BaseModel):
    status: str
    message: Optional[str] = None


class SaveResponse(Response):
    alias: Optional[str] = None


def ok(**fields: Any) -> Dict[str, Any]:
    return {"status": STATUS_OK, **fields}


def error(message: str) -> Dict[str, Any]:
    return {"status": STATUS_ERROR, "message": message}


def _field_message(err: Mapping[str, Any]) -> str:
    field = str(err["loc"][-1])
    kind = err.get("type")
    if kind in ("missing", "required"):
        return f"field {field} is a required field"
    if kind == "url":
        return f"field {field} is not a valid URL"
    return f"field {field} is not valid"


def validation_error(errors: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Map request validation errors to one envelope.

    - nothing in the body at all -> "empty request"
    - body is not a JSON object  -> "failed to decode request"
    - otherwise one message per invalid field, joined with ", "
    """
    errors = list(errors)
    messages = []
    for err in errors:
        loc = tuple(err.get("loc", ()))
        kind = err.get("type")
        if kind == "json_invalid":
            return error(MSG_DECODE_FAILED)
        if loc == ("body",):
            return error(MSG_EMPTY_REQUEST if kind == "missing" else MSG_DECODE_FAILED)
        messages.append(_field_message(err))
    return error(", ".join(messages))
