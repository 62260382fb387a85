"""gitlab-jira - link GitLab commits to Jira issues."""

__version__ = "0.1.0"
