"""Domain error codes for the community module."""

from dataclasses import dataclass
from enum import Enum
from types import UnionType
from typing import get_args
from uuid import UUID

from community.domain.models import Report
from community.domain.value_objects import EntityId


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_STATE = "INVALID_STATE"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


def kind_name(kind: type | UnionType) -> str:
    """Human readable name of an entity kind, e.g. ``Event`` or ``Report``."""
    if kind == Report:
        return "Report"
    if isinstance(kind, UnionType):
        return " | ".join(arg.__name__ for arg in get_args(kind))
    return kind.__name__


class EntityNotFoundError(DomainError):
    """Raised when an id does not resolve to an entity of the expected kind."""

    def __init__(self, kind: type | UnionType, entity_id: EntityId | UUID) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{kind_name(kind)} not found",
        )
        self.kind = kind
        self.entity_id = entity_id


class UserUnauthorizedError(DomainError):
    """Raised when the acting user lacks the role or ownership required."""

    def __init__(self, reason: str = "Operation not permitted") -> None:
        super().__init__(code=ErrorCode.UNAUTHORIZED, message=reason)


class InvalidStateError(DomainError):
    """Raised when the entity's current state forbids the operation."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)


class InvalidArgumentError(DomainError):
    """Raised when a discriminator or argument matches no recognised case."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ARGUMENT, message=message)
