"""Tests for data models."""

import json

import pytest

from gitlab_jira.models import (
    AppConfig,
    Commit,
    ConfigError,
    JiraConfig,
    load_config,
)
from gitlab_jira.models.config import DEFAULT_COMMENT_TEMPLATE


class TestJiraConfig:
    """Tests for the JiraConfig model."""

    def test_is_configured(self):
        """Test that url, username and password are all required."""
        assert JiraConfig(url="http://jira", username="u", password="p").is_configured()
        assert not JiraConfig(url="http://jira", username="u").is_configured()
        assert not JiraConfig().is_configured()

    def test_from_dict_base_url_alias(self):
        """Test that baseUrl is accepted and trailing slashes are dropped."""
        config = JiraConfig.from_dict(
            {"baseUrl": "http://jira.local/", "username": "u", "password": "p"}
        )
        assert config.url == "http://jira.local"

    def test_frozen(self):
        """Test that credentials cannot be changed after construction."""
        config = JiraConfig(url="http://jira", username="u", password="p")
        with pytest.raises(AttributeError):
            config.password = "other"


class TestAppConfig:
    """Tests for the AppConfig model."""

    def test_defaults(self):
        """Test default values."""
        config = AppConfig()
        assert config.comment_template == DEFAULT_COMMENT_TEMPLATE
        assert not config.jira.is_configured()

    def test_to_dict_and_back(self):
        """Test serialization round-trip."""
        config = AppConfig(
            jira=JiraConfig(url="http://jira", username="u", password="p"),
            comment_template="{commit_id}",
        )
        restored = AppConfig.from_dict(config.to_dict())
        assert restored == config


class TestLoadConfig:
    """Tests for load_config."""

    def test_from_file(self, tmp_path):
        """Test loading credentials from a JSON file."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {"jira": {"url": "http://jira", "username": "u", "password": "p"}}
            )
        )

        config = load_config(path, environ={})

        assert config.jira == JiraConfig(url="http://jira", username="u", password="p")

    def test_path_from_environment(self, tmp_path):
        """Test that GITLAB_JIRA_CONFIG points to the file."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"jira": {"url": "http://jira", "username": "u", "password": "p"}})
        )

        config = load_config(environ={"GITLAB_JIRA_CONFIG": str(path)})

        assert config.jira.url == "http://jira"

    def test_environment_overrides_file(self, tmp_path):
        """Test that JIRA_* variables win over the file."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"jira": {"url": "http://jira", "username": "u", "password": "p"}})
        )

        config = load_config(path, environ={"JIRA_PASSWORD": "secret"})

        assert config.jira.password == "secret"
        assert config.jira.username == "u"

    def test_environment_only(self):
        """Test configuration entirely from the environment."""
        config = load_config(
            environ={
                "JIRA_URL": "http://jira/",
                "JIRA_USERNAME": "u",
                "JIRA_PASSWORD": "p",
            }
        )
        assert config.jira.url == "http://jira"

    def test_missing_credentials(self):
        """Test that incomplete configuration is rejected."""
        with pytest.raises(ConfigError):
            load_config(environ={"JIRA_URL": "http://jira"})

    def test_missing_file(self, tmp_path):
        """Test that a missing file is reported as ConfigError."""
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.json", environ={})

    def test_invalid_json(self, tmp_path):
        """Test that a malformed file is reported as ConfigError."""
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_not_an_object(self, tmp_path):
        """Test that a JSON file that is not an object is rejected."""
        path = tmp_path / "config.json"
        path.write_text('["http://jira", "u", "p"]')

        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_jira_section_not_an_object(self, tmp_path):
        """Test that a 'jira' entry of the wrong type is rejected."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"jira": "http://jira"}))

        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_path_is_a_directory(self, tmp_path):
        """Test that an unreadable config path is reported as ConfigError."""
        with pytest.raises(ConfigError):
            load_config(tmp_path, environ={})

    def test_unknown_template_placeholder(self, tmp_path):
        """Test that the comment template is validated on load."""
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "jira": {"url": "http://jira", "username": "u", "password": "p"},
                    "comment_template": "{commit_id} on {branch}",
                }
            )
        )

        with pytest.raises(ConfigError):
            load_config(path, environ={})


class TestCommit:
    """Tests for the Commit model."""

    def test_from_dict(self):
        """Test parsing a push event commit entry."""
        commit = Commit.from_dict(
            {
                "id": "b6568db1bc1dcd7f8b4d5a946b0b91f9dacd7327",
                "message": "fix(#TEST-1): update catalan translation",
                "timestamp": "2011-12-12T14:27:31+02:00",
                "url": "http://example.com/mike/diaspora/commit/b6568db1",
                "author": {"name": "Jordi Mallach", "email": "jordi@softcatala.org"},
            }
        )

        assert commit.id == "b6568db1bc1dcd7f8b4d5a946b0b91f9dacd7327"
        assert commit.short_id == "b6568db1"
        assert commit.author.name == "Jordi Mallach"
        assert commit.author.email == "jordi@softcatala.org"

    def test_from_dict_without_author(self):
        """Test defaults for a minimal commit entry."""
        commit = Commit.from_dict({"id": "abc"})
        assert commit.message == ""
        assert commit.url is None
        assert commit.author.name == "unknown"
