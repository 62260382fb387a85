"""Jira integration module for gitlab-jira."""

from .client import (
    JiraClient,
    JiraClientError,
    JiraConnectionError,
    extract_issues_from_message,
)
from .models import Comment, JiraResponse

__all__ = [
    "JiraClient",
    "JiraClientError",
    "JiraConnectionError",
    "extract_issues_from_message",
    "Comment",
    "JiraResponse",
]
