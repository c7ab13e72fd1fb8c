"""
User-facing notices for admin views.

Three kinds:
- validation: caught before any request is sent (nothing to submit, missing id)
- error: a read or write failed; carries the server's message when available
- success: confirmation after a write

Absence of data ("not yet submitted", "no issues found") is an empty state
rendered by the view, never a notice.
"""

from dataclasses import dataclass
from typing import Literal

NoticeKind = Literal["validation", "error", "success"]

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class Notice:
    """A dismissible message shown to the operator."""

    kind: NoticeKind
    title: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.kind in ("validation", "error")


def validation_notice(message: str) -> Notice:
    return Notice(kind="validation", title="Check your input", message=message)


def error_notice(message: str | None) -> Notice:
    """Error notice with the server's message, or a generic fallback."""
    return Notice(kind="error", title="Error", message=message or GENERIC_ERROR_MESSAGE)


def success_notice(message: str) -> Notice:
    return Notice(kind="success", title="Saved", message=message)
