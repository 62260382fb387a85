"""Configuration model for gitlab-jira."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

CONFIG_PATH_ENV = "GITLAB_JIRA_CONFIG"

DEFAULT_COMMENT_TEMPLATE = (
    "{author} mentioned this issue in a commit of {repository}: "
    "[{commit_id}|{url}]\n{message}"
)


class ConfigError(ValueError):
    """Configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class JiraConfig:
    """Jira connection settings and basic auth credentials."""

    url: str | None = None
    username: str | None = None
    password: str | None = None

    def is_configured(self) -> bool:
        """Check if Jira is fully configured."""
        return all([self.url, self.username, self.password])

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "url": self.url,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JiraConfig":
        """Create a JiraConfig from a dictionary.

        ``baseUrl`` is accepted as an alias of ``url``.
        """
        url = data.get("url") or data.get("baseUrl")
        if url is not None and not isinstance(url, str):
            raise ConfigError("Jira url must be a string")
        return cls(
            url=url.rstrip("/") if url else None,
            username=data.get("username"),
            password=data.get("password"),
        )


def validate_comment_template(template: str) -> str:
    """Check that a comment template only uses the known placeholders.

    Returns the template unchanged.
    """
    if not isinstance(template, str):
        raise ConfigError("comment_template must be a string")
    try:
        template.format(author="", repository="", commit_id="", url="", message="")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Invalid comment_template {template!r}: {e!r}") from e
    return template


@dataclass
class AppConfig:
    """gitlab-jira configuration."""

    jira: JiraConfig = field(default_factory=JiraConfig)
    comment_template: str = DEFAULT_COMMENT_TEMPLATE

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "jira": self.jira.to_dict(),
            "comment_template": self.comment_template,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        """Create an AppConfig from a dictionary.

        Raises:
            ConfigError: If a section has the wrong shape or the comment
                template uses unknown placeholders
        """
        if not isinstance(data, Mapping):
            raise ConfigError("Configuration must be a JSON object")
        jira_data = data.get("jira") or {}
        if not isinstance(jira_data, Mapping):
            raise ConfigError("'jira' must be a JSON object")
        return cls(
            jira=JiraConfig.from_dict(jira_data) if jira_data else JiraConfig(),
            comment_template=validate_comment_template(
                data.get("comment_template", DEFAULT_COMMENT_TEMPLATE)
            ),
        )


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> AppConfig:
    """Load configuration from a JSON file and the environment.

    Args:
        path: JSON config file. Defaults to $GITLAB_JIRA_CONFIG when set.
        environ: Environment to read overrides from. Defaults to os.environ.

    Returns:
        A fully configured AppConfig

    Raises:
        ConfigError: If the file is unreadable or credentials are missing
    """
    if environ is None:
        environ = os.environ
    if path is None:
        path = environ.get(CONFIG_PATH_ENV)

    data: dict[str, Any] = {}
    if path:
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

    config = AppConfig.from_dict(data)

    # Environment wins over the file
    jira_data = config.jira.to_dict()
    for key, env_name in (
        ("url", "JIRA_URL"),
        ("username", "JIRA_USERNAME"),
        ("password", "JIRA_PASSWORD"),
    ):
        if environ.get(env_name):
            jira_data[key] = environ[env_name]
    config.jira = JiraConfig.from_dict(jira_data)

    if not config.jira.is_configured():
        raise ConfigError(
            "Jira URL, username and password are required "
            "(config file or JIRA_URL / JIRA_USERNAME / JIRA_PASSWORD)."
        )
    return config
