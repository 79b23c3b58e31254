"""
Field builders and a schema factory shared by the entity request bodies.

Every entity validates a ``name`` and usually a ``description`` in the same
way, differing only in limits and messages. ``EntityValidation`` captures
those per-entity settings and produces pydantic models through
``create_model`` so that routers can use them as ordinary request bodies.

Errors are raised as ``PydanticCustomError`` so that the message reaches the
client verbatim, with the message key as the error ``code``.
"""

import re
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Dict, Iterable, Optional, Sequence, Tuple, Type

from pydantic import AfterValidator, create_model
from pydantic_core import PydanticCustomError

from ..constants import (
    CONTENT_REQUIRED,
    NAME_INVALID_CHARS,
    NAME_PATTERN,
    NAME_REQUIRED,
    description_max_length_message,
    name_max_length_message,
)
from .common import ApiSchema

MessageGetter = Callable[[str], str]
FieldDefinition = Tuple[Any, Any]


def create_message_getter(messages: Dict[str, str]) -> MessageGetter:
    """Returns a lookup that falls back to a generic message for unknown keys."""

    def get_message(key: str) -> str:
        return messages.get(key) or f"Validation error for {key}"

    return get_message


def standard_messages(
    entity_name: str,
    name_max_length: int,
    description_max_length: Optional[int] = None,
) -> Dict[str, str]:
    """Default messages for the standard name, description, url and content fields."""
    messages = {
        "name_required": NAME_REQUIRED,
        "name_max_length": name_max_length_message(name_max_length),
        "name_invalid_chars": NAME_INVALID_CHARS,
        "url_required": "URL is required",
        "url_invalid": "Please enter a valid URL",
        "content_required": CONTENT_REQUIRED,
    }
    if description_max_length:
        messages["description_max_length"] = description_max_length_message(
            description_max_length
        )
        messages["description_required"] = f"{entity_name} description is required"
    return messages


def validation_error(code: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(code, message)


def required_text(message: str, code: str = "required") -> AfterValidator:
    """Rejects empty strings with the given message."""

    def check(value: str) -> str:
        if not value:
            raise validation_error(code, message)
        return value

    return AfterValidator(check)


def name_field(
    max_length: int,
    get_message: MessageGetter,
    *,
    restrict_charset: bool = True,
    required: bool = True,
    strip: bool = False,
) -> Any:
    """Builds a name type: required, bounded, optionally limited to NAME_PATTERN."""

    def check(value: str) -> str:
        if strip:
            value = value.strip()
        if required and not value:
            raise validation_error("name_required", get_message("name_required"))
        if len(value) > max_length:
            raise validation_error("name_max_length", get_message("name_max_length"))
        if restrict_charset and value and not NAME_PATTERN.match(value):
            raise validation_error("name_invalid_chars", get_message("name_invalid_chars"))
        return value

    return Annotated[str, AfterValidator(check)]


def description_field(
    max_length: int, get_message: MessageGetter, required: bool = False
) -> Any:
    """Builds a description type; optional unless ``required``."""

    def check(value: str) -> str:
        if required and not value:
            raise validation_error("description_required", get_message("description_required"))
        if len(value) > max_length:
            raise validation_error("description_max_length", get_message("description_max_length"))
        return value

    annotated = Annotated[str, AfterValidator(check)]
    return annotated if required else Optional[annotated]


def url_field(
    get_message: MessageGetter,
    *,
    allowed_protocols: Sequence[str] = ("http", "https"),
    required: bool = True,
) -> Any:
    """Builds a URL type accepting ``<protocol>://<non-space>`` for the allowed protocols."""
    protocol_pattern = "|".join(re.escape(protocol) for protocol in allowed_protocols)
    url_regex = re.compile(rf"^({protocol_pattern})://\S+$", re.IGNORECASE)

    def check(value: str) -> str:
        if required and not value:
            raise validation_error("url_required", get_message("url_required"))
        if value and not url_regex.match(value):
            raise validation_error("url_invalid", get_message("url_invalid"))
        return value

    return Annotated[str, AfterValidator(check)]


@dataclass
class EntityValidation:
    """
    Validation settings for one entity and the schemas derived from them.

    Args:
        entity_name: Display name used in messages and generated schema names
        name_max_length: Maximum length of the ``name`` field
        description_max_length: Adds an optional ``description`` field when set
        custom_fields: Callable receiving the message getter and returning
            extra ``create_model`` field definitions
        extra_messages: Messages for custom fields, merged over the defaults
        restrict_name_charset: Whether names must match NAME_PATTERN
    """

    entity_name: str
    name_max_length: int
    description_max_length: Optional[int] = None
    custom_fields: Optional[Callable[[MessageGetter], Dict[str, FieldDefinition]]] = None
    extra_messages: Dict[str, str] = field(default_factory=dict)
    restrict_name_charset: bool = True
    messages: Dict[str, str] = field(init=False)

    def __post_init__(self):
        self.messages = {
            **standard_messages(
                self.entity_name, self.name_max_length, self.description_max_length
            ),
            **self.extra_messages,
        }

    @property
    def get_message(self) -> MessageGetter:
        return create_message_getter(self.messages)

    def field_definitions(self) -> Dict[str, FieldDefinition]:
        get_message = self.get_message
        fields: Dict[str, FieldDefinition] = {
            "name": (
                name_field(
                    self.name_max_length,
                    get_message,
                    restrict_charset=self.restrict_name_charset,
                ),
                ...,
            ),
        }
        if self.description_max_length:
            fields["description"] = (
                description_field(self.description_max_length, get_message),
                None,
            )
        if self.custom_fields:
            fields.update(self.custom_fields(get_message))
        return fields

    def create_schema(self, schema_name: Optional[str] = None) -> Type[ApiSchema]:
        """Request schema with every standard and custom field."""
        return create_model(
            schema_name or f"{self.entity_name}Create",
            __base__=ApiSchema,
            **self.field_definitions(),
        )

    def create_update_schema(
        self, schema_name: Optional[str] = None, exclude: Iterable[str] = ()
    ) -> Type[ApiSchema]:
        """Same fields as ``create_schema`` minus ``exclude``."""
        excluded = set(exclude)
        fields = {
            name: definition
            for name, definition in self.field_definitions().items()
            if name not in excluded
        }
        return create_model(
            schema_name or f"{self.entity_name}Update", __base__=ApiSchema, **fields
        )
