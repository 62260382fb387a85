"""gitlab-jira CLI interface."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .integration import CommitNotifier
from .jira import JiraClient, JiraClientError, extract_issues_from_message
from .models import AppConfig, Commit, CommitAuthor, ConfigError, load_config


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def cmd_check(args: argparse.Namespace) -> int:
    """Check the connection and credentials against Jira."""
    config = load_config(args.config)

    async def server_info():
        async with JiraClient(config.jira) as client:
            return await client.server_info()

    response = asyncio.run(server_info())
    if response.status_code != 200:
        print(
            f"Connection failed ({response.status_code}): {response.error_body or ''}",
            file=sys.stderr,
        )
        return 1

    info = response.body or {}
    title = info.get("serverTitle", config.jira.url)
    version = info.get("version", "unknown version")
    print(f"Connected to {title} ({version})")
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    """Print the issue keys referenced in a message."""
    for issue_key in extract_issues_from_message(args.message):
        print(issue_key)
    return 0


def load_push_event(path: str | Path) -> tuple[str, list[Commit]]:
    """Read a GitLab push event file.

    Returns:
        Tuple of (repository name, commits)

    Raises:
        ValueError: If the file is not a push event shaped JSON object
    """
    with open(path) as f:
        event = json.load(f)

    if not isinstance(event, dict):
        raise ValueError("push event must be a JSON object")

    repository = "unknown"
    for section in ("repository", "project"):
        value = event.get(section)
        if isinstance(value, dict) and value.get("name"):
            repository = str(value["name"])
            break

    entries = event.get("commits") or []
    if not isinstance(entries, list):
        raise ValueError("'commits' must be a list")
    commits = []
    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("author") or {}, dict):
            raise ValueError(f"malformed commit entry: {entry!r}")
        commits.append(Commit.from_dict(entry))
    return repository, commits


def cmd_notify(args: argparse.Namespace) -> int:
    """Comment on the Jira issues referenced by one or more commits."""
    config: AppConfig = load_config(args.config)

    if args.event:
        try:
            repository, commits = load_push_event(args.event)
        except (OSError, ValueError, KeyError) as e:
            print(f"Error: cannot read push event {args.event}: {e}", file=sys.stderr)
            return 1
    else:
        if not args.commit_id or args.message is None:
            print("Error: --commit-id and --message are required without --event.", file=sys.stderr)
            return 1
        repository = args.repository
        commits = [
            Commit(
                id=args.commit_id,
                message=args.message,
                url=args.url,
                author=CommitAuthor(name=args.author),
            )
        ]

    async def notify():
        async with JiraClient(config.jira) as client:
            notifier = CommitNotifier(client, config.comment_template)
            return await notifier.notify_commits(commits, repository)

    results = asyncio.run(notify())

    if not results:
        print("No issue referenced.")
        return 0

    for result in results:
        print(result.format_display())
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gitlab-jira",
        description="Comment on Jira issues referenced by GitLab commits",
    )
    parser.add_argument(
        "--config", "-c", help="JSON config file (default: $GITLAB_JIRA_CONFIG)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check
    subparsers.add_parser("check", help="Check Jira connection and credentials")

    # extract
    extract_parser = subparsers.add_parser(
        "extract", help="List issue keys referenced in a message"
    )
    extract_parser.add_argument("message", help="Commit message")

    # notify
    notify_parser = subparsers.add_parser(
        "notify", help="Comment on issues referenced by commits"
    )
    notify_parser.add_argument("--event", "-e", help="GitLab push event JSON file")
    notify_parser.add_argument("--commit-id", help="Commit SHA")
    notify_parser.add_argument("--message", "-m", help="Commit message")
    notify_parser.add_argument("--url", help="Commit URL")
    notify_parser.add_argument("--author", default="unknown", help="Commit author name")
    notify_parser.add_argument(
        "--repository", "-r", default="unknown", help="Repository name"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    # Dispatch to command handlers
    handlers = {
        "check": cmd_check,
        "extract": cmd_extract,
        "notify": cmd_notify,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except JiraClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: unexpected response from Jira: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
