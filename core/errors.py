"""Domain errors raised by the timeline services."""
from __future__ import annotations


class PlannerError(Exception):
    """Base class for every failure a timeline operation can report."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class InvalidRequest(PlannerError):
    """Missing or malformed required input."""

    status_code = 400


class InvalidCutTime(InvalidRequest):
    """Cut offset outside the open interval ``(0, estimated_time)``."""


class NotFound(PlannerError):
    status_code = 404


class StorageError(PlannerError):
    """The record store failed; nothing from the operation was applied."""

    status_code = 500


__all__ = [
    "PlannerError",
    "InvalidRequest",
    "InvalidCutTime",
    "NotFound",
    "StorageError",
]
