"""Commit model for GitLab push events."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CommitAuthor:
    """Author of a commit."""

    name: str
    email: str | None = None


@dataclass
class Commit:
    """A commit as sent by GitLab in a push event."""

    id: str
    message: str
    url: str | None = None
    author: CommitAuthor = field(default_factory=lambda: CommitAuthor(name="unknown"))

    @property
    def short_id(self) -> str:
        return self.id[:8]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Commit":
        """Create a Commit from a push event commit entry."""
        author = data.get("author") or {}
        return cls(
            id=data["id"],
            message=data.get("message", ""),
            url=data.get("url"),
            author=CommitAuthor(
                name=author.get("name", "unknown"),
                email=author.get("email"),
            ),
        )
