"""Typed engine failures with RFC 7807 Problem Detail rendering."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

BASE_ERROR_URI = "https://leave-engine.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all engine exceptions → RFC 7807 dict via ``to_problem_detail``."""

    def __init__(
        self,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        super().__init__(detail)

    def to_problem_detail(self, instance: Optional[str] = None) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": f"{BASE_ERROR_URI}/{self.error_type}",
            "title": self.title,
            "detail": self.detail,
        }
        if instance:
            body["instance"] = instance
        if self.errors:
            body["errors"] = self.errors
        return body


# Engine-level alias used by callers that only care about "the engine failed"
EngineError = AppException


class InvalidInputError(AppException):
    """Malformed argument the engine refuses to repair."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            error_type="invalid-input",
            title="Invalid Input",
            detail=f"{field}: {message}",
            errors={field: [message]},
        )


class InvalidDateRangeError(AppException):
    """start > end on an inclusive date range."""

    def __init__(self, start: date, end: date) -> None:
        self.start = start
        self.end = end
        super().__init__(
            error_type="invalid-date-range",
            title="Invalid Date Range",
            detail=f"Start date {start.isoformat()} is after end date {end.isoformat()}.",
            errors={"start": [f"must be on or before {end.isoformat()}"]},
        )


class EmptyCollectionError(AppException):
    """A collection that must contain at least one item was empty."""

    def __init__(self, field: str) -> None:
        super().__init__(
            error_type="empty-collection",
            title="Empty Collection",
            detail=f"'{field}' must contain at least one item.",
            errors={field: ["must not be empty"]},
        )


class NotFoundException(AppException):
    """Referenced entity does not exist."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type} with id '{entity_id}' does not exist.",
        )


class ValidationException(AppException):
    """Business-rule validation failures."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(
            error_type="validation-error",
            title="Validation Error",
            detail="One or more fields failed validation.",
            errors=errors,
        )
