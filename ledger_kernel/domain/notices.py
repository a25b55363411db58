"""
User-facing notices emitted by a report run.

A notice is the non-exceptional channel for things the user should see
(a category that could not be loaded, an empty result) without aborting the
run.  Codes mirror the exception codes where an exception was the cause.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """A single notification for the user."""

    level: NoticeLevel
    code: str
    message: str

    @classmethod
    def info(cls, code: str, message: str) -> Notice:
        return cls(NoticeLevel.INFO, code, message)

    @classmethod
    def warning(cls, code: str, message: str) -> Notice:
        return cls(NoticeLevel.WARNING, code, message)

    @classmethod
    def error(cls, code: str, message: str) -> Notice:
        return cls(NoticeLevel.ERROR, code, message)
