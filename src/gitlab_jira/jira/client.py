"""Jira REST API client wrapper."""

import logging
import re
from typing import Any, Callable, TypeVar

import httpx

from ..models import JiraConfig
from .models import Comment, JiraResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

# "#" followed by a project code, a hyphen and the issue number, e.g. #PROJ-42
ISSUE_PATTERN = re.compile(r"#([A-Z][A-Z0-9_]*-\d+)")


class JiraClientError(Exception):
    """Base exception for Jira client errors."""

    pass


class JiraConnectionError(JiraClientError):
    """No response was received from Jira."""

    pass


def extract_issues_from_message(message: str) -> list[str]:
    """Return the issue keys referenced in a commit message.

    Keys are returned without their leading ``#``, in the order they appear.
    Repeated references are kept.
    """
    return ISSUE_PATTERN.findall(message)


class JiraClient:
    """Async Jira REST API v2 client using httpx."""

    def __init__(self, config: JiraConfig):
        """Initialize the client.

        Args:
            config: Jira URL and basic auth credentials

        Raises:
            JiraClientError: If the URL or credentials are missing
        """
        if not config.is_configured():
            raise JiraClientError("Jira URL, username and password are required.")
        self.config = config
        self.base_url = config.url.rstrip("/")
        self.auth = (config.username, config.password)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "JiraClient":
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/api/2",
            auth=self.auth,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=30.0,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _send(
        self,
        method: str,
        endpoint: str,
        parse: Callable[[Any], T],
        **kwargs,
    ) -> JiraResponse[T]:
        """Make an API request and wrap the outcome in a JiraResponse.

        Non-2xx statuses are returned as-is. Transport faults raise
        JiraConnectionError, malformed 2xx bodies raise ValueError.
        """
        if not self._client:
            raise JiraClientError("Client not initialized. Use async with context.")

        logger.debug("%s %s", method, endpoint)
        try:
            response = await self._client.request(method, endpoint, **kwargs)
        except httpx.TransportError as e:
            raise JiraConnectionError(
                f"{method} {endpoint} failed: {type(e).__name__}: {e}"
            ) from e

        logger.debug("%s %s -> %d", method, endpoint, response.status_code)
        if not response.is_success:
            return JiraResponse(
                status_code=response.status_code, error_body=response.text
            )

        data = response.json() if response.content else {}
        try:
            body = parse(data)
        except (AttributeError, TypeError) as e:
            raise ValueError(f"Unexpected response from {method} {endpoint}: {e}") from e
        return JiraResponse(status_code=response.status_code, body=body)

    async def get_issue(self, issue_key: str) -> JiraResponse[dict[str, Any]]:
        """Fetch an issue by key.

        Args:
            issue_key: Issue key (e.g., PROJ-123)

        Returns:
            Response envelope holding the raw issue JSON
        """
        return await self._send("GET", f"/issue/{issue_key}", dict)

    async def comment_issue(
        self, issue_key: str, comment: Comment
    ) -> JiraResponse[Comment]:
        """Add a comment to an issue.

        Args:
            issue_key: Issue key (e.g., PROJ-123)
            comment: Comment to post

        Returns:
            Response envelope holding the comment as created by Jira
        """
        return await self._send(
            "POST",
            f"/issue/{issue_key}/comment",
            Comment.from_api_response,
            json=comment.to_dict(),
        )

    async def get_comments(self, issue_key: str) -> JiraResponse[list[Comment]]:
        """List the comments of an issue."""
        return await self._send(
            "GET",
            f"/issue/{issue_key}/comment",
            lambda data: [
                Comment.from_api_response(c) for c in data.get("comments", [])
            ],
        )

    async def server_info(self) -> JiraResponse[dict[str, Any]]:
        """Fetch server information, mostly useful to check credentials."""
        return await self._send("GET", "/serverInfo", dict)

    async def is_existing_issue(self, issue_key: str) -> bool:
        """Check whether an issue exists.

        Any failure, including a transport fault, counts as "does not exist".
        """
        try:
            response = await self.get_issue(issue_key)
        except Exception as e:
            logger.warning(
                "Could not check issue %s, assuming it does not exist: %s",
                issue_key,
                e,
            )
            return False
        return response.status_code == 200

    async def is_issue_already_commented(self, issue_key: str, commit_id: str) -> bool:
        """Check whether a comment on the issue already mentions the commit.

        Any failure counts as "already commented" so that no duplicate
        comment gets posted.
        """
        try:
            response = await self.get_comments(issue_key)
        except Exception as e:
            logger.warning(
                "Could not list comments of %s, assuming already commented: %s",
                issue_key,
                e,
            )
            return True

        if not response.is_successful or response.body is None:
            logger.warning(
                "Listing comments of %s returned %d, assuming already commented",
                issue_key,
                response.status_code,
            )
            return True

        return any(commit_id in comment.body for comment in response.body)

    def extract_issues_from_message(self, message: str) -> list[str]:
        """Return the issue keys referenced in a commit message."""
        return extract_issues_from_message(message)
