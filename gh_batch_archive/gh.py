"""GitHub CLI wrapper: dependency and auth checks, listing, archive/unarchive."""

import json
import subprocess

from gh_batch_archive.errors import AuthenticationError, DependencyMissingError, UpstreamError
from gh_batch_archive.ui import check_tool

GH = "gh"
LIST_LIMIT = 1000
INSTALL_URL = "https://cli.github.com/"


def gh_run(*args):
    """Run a gh command with captured text output.

    stdin is closed so parallel workers never read from the terminal.
    """
    cmd = [GH, *args]
    try:
        return subprocess.run(
            cmd, capture_output=True, text=True,
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        raise DependencyMissingError(
            f"The GitHub CLI ('{GH}') is required. Please install it from {INSTALL_URL}"
        )


def _first_line(text):
    for line in (text or "").splitlines():
        if line.strip():
            return line.strip()
    return ""


def require_gh():
    if not check_tool(GH):
        raise DependencyMissingError(
            f"The GitHub CLI ('{GH}') is required. Please install it from {INSTALL_URL}"
        )


def require_auth():
    result = gh_run("auth", "status")
    if result.returncode != 0:
        reason = _first_line(result.stderr) or "not logged in"
        raise AuthenticationError(
            f"GitHub CLI is not authenticated ({reason}). Run 'gh auth login' first."
        )


def current_login():
    """Return the login of the authenticated user."""
    result = gh_run("api", "user", "--jq", ".login")
    login = result.stdout.strip()
    if result.returncode != 0 or not login:
        reason = _first_line(result.stderr) or "empty response"
        raise AuthenticationError(f"Could not determine your GitHub username: {reason}")
    return login


def list_repos(owner, limit=LIST_LIMIT):
    """Return 'owner/name' for every non-archived repo of owner, in listing order."""
    result = gh_run(
        "repo", "list", owner,
        "--no-archived",
        "--limit", str(limit),
        "--json", "nameWithOwner",
    )
    if result.returncode != 0:
        reason = _first_line(result.stderr) or f"exit status {result.returncode}"
        raise UpstreamError(f"Could not list repositories for '{owner}': {reason}")
    if not result.stdout.strip():
        return []
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError:
        raise UpstreamError(f"Unexpected output from 'gh repo list' for '{owner}'")

    repos = []
    seen = set()
    for item in data:
        name = item.get("nameWithOwner") if isinstance(item, dict) else None
        if name and name not in seen:
            seen.add(name)
            repos.append(name)
    return repos


def set_archived(repo, archived):
    """Archive or unarchive one repository. Raises UpstreamError on failure."""
    if archived:
        result = gh_run("repo", "archive", repo, "--yes")
    else:
        result = gh_run("api", "-X", "PATCH", f"repos/{repo}", "-f", "archived=false")
    if result.returncode != 0:
        reason = _first_line(result.stderr) or f"exit status {result.returncode}"
        raise UpstreamError(reason)
