"""Posting commit references as Jira comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from ..jira.client import JiraClientError
from ..jira.models import Comment
from ..models import Commit
from ..models.config import DEFAULT_COMMENT_TEMPLATE, validate_comment_template

if TYPE_CHECKING:
    from ..jira import JiraClient

logger = logging.getLogger(__name__)


class NotifyOutcome(Enum):
    """What happened to an issue referenced by a commit."""

    COMMENTED = "commented"
    ALREADY_COMMENTED = "already_commented"
    ISSUE_NOT_FOUND = "issue_not_found"
    FAILED = "failed"


@dataclass
class CommentResult:
    """Outcome of processing one issue reference of one commit."""

    issue_key: str
    commit_id: str
    outcome: NotifyOutcome
    status_code: int | None = None

    def format_display(self) -> str:
        """Format the result for display."""
        line = f"{self.issue_key}: {self.outcome.value} ({self.commit_id})"
        if self.status_code is not None:
            line += f" [{self.status_code}]"
        return line


class CommitNotifier:
    """Comments on the Jira issues referenced by commit messages."""

    def __init__(
        self,
        client: JiraClient,
        comment_template: str = DEFAULT_COMMENT_TEMPLATE,
    ):
        """Initialize the notifier.

        Args:
            client: An open JiraClient.
            comment_template: str.format template receiving author, repository,
                commit_id, url and message.
        """
        self.client = client
        self.comment_template = validate_comment_template(comment_template)

    def build_comment(self, commit: Commit, repository: str) -> Comment:
        """Render the comment posted for a commit."""
        body = self.comment_template.format(
            author=commit.author.name,
            repository=repository,
            commit_id=commit.id,
            url=commit.url or commit.id,
            message=commit.message.strip(),
        )
        # The commit id is what makes re-delivery of a push a no-op
        if commit.id not in body:
            body = f"{body}\n{commit.id}"
        return Comment(body=body)

    async def notify_commit(self, commit: Commit, repository: str) -> list[CommentResult]:
        """Comment on every existing issue referenced by a commit.

        Issues that do not exist or already mention the commit are skipped.
        """
        results = []
        seen: set[str] = set()

        for issue_key in self.client.extract_issues_from_message(commit.message):
            if issue_key in seen:
                continue
            seen.add(issue_key)
            results.append(await self._notify_issue(issue_key, commit, repository))

        if not seen:
            logger.debug("No issue referenced by commit %s", commit.short_id)
        return results

    async def notify_commits(
        self, commits: Iterable[Commit], repository: str
    ) -> list[CommentResult]:
        """Run notify_commit for each commit, in order."""
        results = []
        for commit in commits:
            results.extend(await self.notify_commit(commit, repository))
        return results

    async def _notify_issue(
        self, issue_key: str, commit: Commit, repository: str
    ) -> CommentResult:
        if not await self.client.is_existing_issue(issue_key):
            logger.info("Issue %s not found, skipping commit %s", issue_key, commit.short_id)
            return CommentResult(issue_key, commit.id, NotifyOutcome.ISSUE_NOT_FOUND)

        if await self.client.is_issue_already_commented(issue_key, commit.id):
            logger.info("Issue %s already mentions commit %s", issue_key, commit.short_id)
            return CommentResult(issue_key, commit.id, NotifyOutcome.ALREADY_COMMENTED)

        try:
            response = await self.client.comment_issue(
                issue_key, self.build_comment(commit, repository)
            )
        except (JiraClientError, ValueError) as e:
            # ValueError: 2xx whose echo is not JSON, the comment may exist
            logger.error("Failed to comment %s for commit %s: %s", issue_key, commit.short_id, e)
            return CommentResult(issue_key, commit.id, NotifyOutcome.FAILED)

        if not response.is_successful:
            logger.error(
                "Failed to comment %s for commit %s: %d - %s",
                issue_key,
                commit.short_id,
                response.status_code,
                response.error_body,
            )
            return CommentResult(
                issue_key, commit.id, NotifyOutcome.FAILED, response.status_code
            )

        logger.info("Commented %s with commit %s", issue_key, commit.short_id)
        return CommentResult(
            issue_key, commit.id, NotifyOutcome.COMMENTED, response.status_code
        )
