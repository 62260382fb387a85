"""Jira-specific data models."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class Comment:
    """A comment on a Jira issue."""

    body: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON payload expected by the comment endpoint."""
        return {"body": self.body}

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Comment":
        """Create a Comment from Jira API response."""
        body = data.get("body")
        return cls(body=body if isinstance(body, str) else "")


@dataclass(frozen=True)
class JiraResponse(Generic[T]):
    """Status code of a Jira call paired with its parsed body.

    ``body`` is only populated on 2xx responses; the raw text of any other
    response is kept in ``error_body``.
    """

    status_code: int
    body: T | None = None
    error_body: str | None = None

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300
