# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error taxonomy shared by all services.

Each service defines its own concrete exceptions (``ClassNotFoundError``,
``SectionHasStudentsError`` ...) deriving from one of the categories below.
The API layer maps categories to HTTP status codes, so services never
know about HTTP.

Categories:
- NotFoundError: the addressed entity does not exist (404).
- ConflictError: a unique name or tuple is already taken (400).
- HasDependentsError: students still exist underneath the entity (400).
- InvalidReferenceError: the request names entities that do not exist (400).
"""

from collections.abc import Iterable, Sequence


class SchoolDeskError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(SchoolDeskError):
    """Raised when an addressed entity does not exist."""

    pass


class ConflictError(SchoolDeskError):
    """Raised when a uniqueness rule would be violated."""

    pass


class HasDependentsError(SchoolDeskError):
    """Raised when deleting an entity that still has students under it."""

    pass


class InvalidReferenceError(SchoolDeskError):
    """Raised when a request refers to entities that do not exist."""

    pass


class MissingIdsError(InvalidReferenceError):
    """Raised when a batch request contains unknown ids.

    Attributes:
        missing_ids: Unknown ids, in the order they were requested.
    """

    entity_label = "Entities"

    def __init__(self, missing_ids: Sequence[str]) -> None:
        self.missing_ids = list(missing_ids)
        super().__init__(
            f"{self.entity_label} not found: {', '.join(self.missing_ids)}"
        )


def find_missing_ids(requested: Iterable[str], found: Iterable[str]) -> list[str]:
    """Return requested ids absent from ``found``.

    Duplicates are reported once; request order is kept.

    Args:
        requested: Ids named by the caller.
        found: Ids that exist in storage.

    Returns:
        Missing ids in request order.
    """
    found_set = set(found)
    missing: list[str] = []
    for id_ in requested:
        if id_ not in found_set and id_ not in missing:
            missing.append(id_)
    return missing
