"""
Pydantic envelopes for DTCG token and group nodes, and for resolver documents.

Only the ``$``-prefixed properties are validated here; ``$value`` payloads
are decoded per type by the codec and child entries are walked by the
importers.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .exceptions import TokenPathError
from .tokens import TokenType, validate_name

TOKEN_TYPES = {token_type.value for token_type in TokenType}


class NodeMeta(BaseModel):
    """Properties shared by tokens and groups."""

    type: Optional[StrictStr] = Field(default=None, alias="$type")
    description: Optional[StrictStr] = Field(default=None, alias="$description")
    extensions: Optional[dict[str, Any]] = Field(default=None, alias="$extensions")
    deprecated: Optional[Union[StrictBool, StrictStr]] = Field(default=None, alias="$deprecated")

    # Child names such as "type" or "description" must not match the fields
    model_config = ConfigDict(populate_by_name=False, extra="ignore")

    @field_validator("type")
    @classmethod
    def check_type(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in TOKEN_TYPES:
            raise ValueError(f"unknown token type '{value}'")
        return value

    @property
    def token_type(self) -> Optional[TokenType]:
        return TokenType(self.type) if self.type else None


class TokenNode(NodeMeta):
    """A token: any object carrying ``$value``."""

    value: Any = Field(alias="$value")


class GroupNode(NodeMeta):
    """A group: an object without ``$value``; other keys are children."""


def describe_errors(exc: ValidationError) -> list[str]:
    """One readable line per pydantic error, located by DTCG property."""
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        lines.append(f"{location}: {message}" if location else message)
    return lines


# =============================================================================
# Resolver documents (DTCG Resolver Module 2025.10)
# =============================================================================

RESOLVER_VERSION = "2025.10"

# Group extension marking a top-level group imported from a modifier
MODIFIER_EXTENSION = "tokengraph.modifier"


def _valid_name(value: str) -> str:
    try:
        validate_name(value)
    except TokenPathError as exc:
        raise ValueError(exc.reason) from exc
    return value


class ResolverSet(BaseModel):
    """A named list of token sources, merged in order."""

    type: Literal["set"]
    name: StrictStr
    sources: list[dict[str, Any]]
    description: Optional[StrictStr] = None
    extensions: Optional[dict[str, Any]] = Field(default=None, alias="$extensions")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _valid_name(value)


class ResolverModifier(BaseModel):
    """Alternative sources for the same tokens, one list per context."""

    type: Literal["modifier"]
    name: StrictStr
    contexts: dict[str, list[dict[str, Any]]]
    description: Optional[StrictStr] = None
    default: Optional[StrictStr] = None
    extensions: Optional[dict[str, Any]] = Field(default=None, alias="$extensions")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _valid_name(value)

    @field_validator("contexts")
    @classmethod
    def check_contexts(cls, value: dict) -> dict:
        for context in value:
            _valid_name(context)
        return value

    @model_validator(mode="after")
    def check_default(self) -> "ResolverModifier":
        if self.default is not None and self.default not in self.contexts:
            raise ValueError(f"default context '{self.default}' is not one of the contexts")
        return self


class ResolverDocument(BaseModel):
    """
    A resolver document: sets and modifiers listed inline in ``resolutionOrder``.

    Root-level ``sets`` and ``modifiers`` maps (referenced through
    ``#/sets/...`` pointers) are not supported and must be absent or empty.
    """

    version: Literal["2025.10"]
    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    sets: Optional[dict[str, Any]] = None
    modifiers: Optional[dict[str, Any]] = None
    resolution_order: list[
        Annotated[Union[ResolverSet, ResolverModifier], Field(discriminator="type")]
    ] = Field(alias="resolutionOrder")

    @field_validator("sets", "modifiers")
    @classmethod
    def check_unsupported(cls, value: Optional[dict], info: ValidationInfo) -> Optional[dict]:
        if value:
            raise ValueError(f"root-level {info.field_name} are not supported, declare them in resolutionOrder")
        return value

    @model_validator(mode="after")
    def check_unique_names(self) -> "ResolverDocument":
        seen = set()
        for item in self.resolution_order:
            if item.name in seen:
                raise ValueError(f"duplicate name '{item.name}' in resolutionOrder")
            seen.add(item.name)
        return self


def is_resolver_document(document: Any) -> bool:
    """True for a mapping shaped like a resolver document."""
    return (
        isinstance(document, dict)
        and document.get("version") == RESOLVER_VERSION
        and isinstance(document.get("resolutionOrder"), list)
    )
