"""Data models for gitlab-jira."""

from .commit import Commit, CommitAuthor
from .config import AppConfig, ConfigError, JiraConfig, load_config

__all__ = [
    "Commit",
    "CommitAuthor",
    "AppConfig",
    "ConfigError",
    "JiraConfig",
    "load_config",
]
