"""Apply archive/unarchive to the selected repos on a bounded worker pool."""

import enum
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List

from gh_batch_archive import gh
from gh_batch_archive.errors import BatchArchiveError
from gh_batch_archive.summary import action_label
from gh_batch_archive.ui import C, error, info, say, success


class Outcome(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass
class RepoResult:
    repo: str
    outcome: Outcome
    message: str = ""


@dataclass
class BatchReport:
    results: List[RepoResult] = field(default_factory=list)

    def _count(self, outcome):
        return sum(1 for r in self.results if r.outcome is outcome)

    @property
    def succeeded(self):
        return self._count(Outcome.SUCCESS)

    @property
    def failed(self):
        return self._count(Outcome.FAILURE)

    @property
    def skipped(self):
        return self._count(Outcome.SKIPPED)


def _record(log, repo, message):
    """Append to the log; a failed write is reported but never stops the worker."""
    try:
        log.write(message)
    except OSError as e:
        error(f"Could not log result for {repo}: {e}")


def process_repo(repo, options, log):
    """Handle one repo start to finish. Never raises for a failed gh call or log write."""
    action = action_label(options.unarchive)

    if options.dry_run:
        say(f"  {C.YELLOW}[DRY RUN] Would {action}: {repo}{C.RESET}")
        _record(log, repo, f"[DRY RUN] Would {action} {repo}")
        return RepoResult(repo, Outcome.SKIPPED)

    if options.unarchive:
        info(f"Unarchiving: {repo}...")
    else:
        info(f"Archiving: {repo}...")
    try:
        gh.set_archived(repo, archived=not options.unarchive)
    except (BatchArchiveError, OSError) as e:
        error(f"Failed to {action}: {repo} ({e})")
        _record(log, repo, f"Failed to {action} {repo}: {e}")
        return RepoResult(repo, Outcome.FAILURE, str(e))

    success(f"Successfully {action}d: {repo}")
    _record(log, repo, f"{action.capitalize()}d {repo}")
    return RepoResult(repo, Outcome.SUCCESS)


def run_batch(repos, options, log):
    """Attempt every repo exactly once, at most options.parallel at a time."""
    workers = max(1, int(options.parallel))
    report = BatchReport()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(process_repo, repo, options, log) for repo in repos]
        for future in as_completed(futures):
            report.results.append(future.result())
    return report
