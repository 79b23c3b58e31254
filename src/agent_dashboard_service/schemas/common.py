from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiSchema(BaseModel):
    """Base for every request and response body.

    Attributes are snake_case in Python and camelCase on the wire; both
    spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""
    error: str


class ValidationIssue(BaseModel):
    path: List[Union[str, int]] = Field(default_factory=list)
    message: str
    code: str


class ValidationErrorResponse(ErrorResponse):
    details: List[ValidationIssue]


def format_validation_errors(errors: List[dict]) -> List[dict]:
    """
    Flatten pydantic error dicts into JSON-safe issues.

    The leading "body" location segment added by FastAPI is dropped so that
    paths point at fields of the submitted document.
    """
    issues = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        issues.append(
            {
                "path": [part if isinstance(part, int) else str(part) for part in loc],
                "message": str(error.get("msg", "")),
                "code": str(error.get("type", "")),
            }
        )
    return issues


def error_body(message: str, details: Any = None) -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body
