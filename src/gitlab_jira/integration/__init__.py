"""Commit to Jira comment propagation."""

from .notifier import CommentResult, CommitNotifier, NotifyOutcome

__all__ = ["CommentResult", "CommitNotifier", "NotifyOutcome"]
