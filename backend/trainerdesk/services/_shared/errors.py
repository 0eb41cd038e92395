"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
The translation to RFC 7807 responses is handled by
``trainerdesk/core/errors.py`` through
:func:`trainerdesk.services._shared.base.translate_service_error`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` instances.
    """

    pass


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is absent **or** owned by someone else.

    Both cases produce the same error so callers cannot probe for the
    existence of other accounts' data.

    :param entity: Entity name (e.g., "Routine").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Folder").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


@dataclass(slots=True)
class ValidationError(ServiceError):
    """
    Raised when input breaks a domain rule (enum, conditional field, position).

    :param fields: Offending field path -> messages, e.g.
        ``{"days[1].day_label": ["must not be empty"]}``.
    :type fields: Mapping[str, Sequence[str]]
    """

    fields: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover
        names = ", ".join(sorted(self.fields)) or "input"
        return f"Invalid fields: {names}"


class AuthorizationError(ServiceError):
    """Raised when the authenticated actor may not perform the operation."""

    def __init__(self, message: str = "Not allowed") -> None:
        super().__init__(message)


class FieldErrors:
    """Accumulate validation messages and raise them all at once."""

    def __init__(self) -> None:
        self._fields: dict[str, list[str]] = {}

    def add(self, name: str, message: str) -> None:
        self._fields.setdefault(name, []).append(message)

    def __bool__(self) -> bool:
        return bool(self._fields)

    def raise_if_any(self) -> None:
        if self._fields:
            raise ValidationError(fields=dict(self._fields))
