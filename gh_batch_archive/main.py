"""Entry point, CLI args, and the list → filter → select → confirm → execute pipeline."""

import argparse
import dataclasses
import sys

from gh_batch_archive import gh
from gh_batch_archive.auditlog import AuditLog, tail
from gh_batch_archive.config import CFG, CONFIG_PATH, RunOptions, save_config
from gh_batch_archive.errors import BatchArchiveError, NothingToDoError, UserCancelledError
from gh_batch_archive.executor import run_batch
from gh_batch_archive.repos import compile_pattern, filter_repos
from gh_batch_archive.selector import make_selector
from gh_batch_archive.summary import confirm_run
from gh_batch_archive.ui import C, error, info, say, success, warn

EXAMPLES = """\
Examples:
  gh-batch-archive --pattern test myorg
  gh-batch-archive --unarchive --interactive
  gh-batch-archive --dry-run --parallel 8
"""


def _positive_int(value):
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got '{value}'")
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def build_parser(cfg=None):
    cfg = CFG if cfg is None else cfg
    parser = argparse.ArgumentParser(
        prog="gh-batch-archive",
        description="Batch archive or unarchive GitHub repositories with the GitHub CLI.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("owner", nargs="?", default="",
                        help="user or organization (default: your GitHub username)")
    parser.add_argument("--unarchive", action="store_true",
                        help="unarchive instead of archive")
    parser.add_argument("--dry-run", action="store_true",
                        help="show what would be done, but don't change anything")
    parser.add_argument("--pattern", default="", metavar="PATTERN",
                        help="filter repos by substring or regex")
    parser.add_argument("--interactive", action="store_true",
                        help="pick repos interactively (fzf if available, fallback to menu)")
    parser.add_argument("--parallel", type=_positive_int, default=cfg["parallel"], metavar="N",
                        help="process up to N repos in parallel (default: %(default)s)")
    parser.add_argument("--log", dest="log_path", default=cfg["log_path"], metavar="FILE",
                        help="log actions to FILE (default: %(default)s)")
    parser.add_argument("--fail-on-error", action="store_true", default=cfg["fail_on_error"],
                        help="exit with status 1 if any repository fails")
    parser.add_argument("--show-log", action="store_true",
                        help="print the last entries of the log and exit")
    parser.add_argument("--init-config", action="store_true",
                        help=f"write the current defaults to {CONFIG_PATH} and exit")
    return parser


def options_from_args(args, cfg=None):
    cfg = CFG if cfg is None else cfg
    return RunOptions(
        owner=args.owner,
        unarchive=args.unarchive,
        dry_run=args.dry_run,
        pattern=args.pattern,
        interactive=args.interactive,
        parallel=args.parallel,
        log_path=args.log_path,
        fail_on_error=args.fail_on_error,
        fzf_height=cfg["fzf_height"],
    )


def resolve_owner(options):
    if options.owner:
        info(f"Using specified owner/organization: '{options.owner}'.")
        return options.owner
    owner = gh.current_login()
    info(f"No owner or organization specified. Using your GitHub username: '{owner}'.")
    return owner


def run(options):
    """Run the whole pipeline. Returns the process exit status."""
    gh.require_gh()
    gh.require_auth()

    owner = resolve_owner(options)
    options = dataclasses.replace(options, owner=owner)

    info(f"Searching for non-archived repositories owned by '{owner}'...")
    repos = gh.list_repos(owner)
    if not repos:
        raise NothingToDoError(f"No non-archived repositories found for '{owner}'. Nothing to do.")

    if options.pattern:
        info(f"Filtering repositories by pattern: '{options.pattern}'...")
        _, is_regex = compile_pattern(options.pattern)
        if not is_regex:
            warn("Pattern is not a valid regular expression; matching it as plain text.")
        repos = filter_repos(repos, options.pattern)
        if not repos:
            raise NothingToDoError(f"No repositories match the pattern '{options.pattern}'. Exiting.")

    selector = make_selector(options.interactive, options.fzf_height)
    selected = selector.select(repos)
    if not selected:
        raise NothingToDoError("No repositories selected. Exiting without making any changes.")

    confirm_run(selected, options)

    log = AuditLog(options.log_path)
    log.ensure_writable()
    say()
    info(f"Processing repositories ({options.parallel} at a time)...")
    say()
    report = run_batch(selected, options, log)

    say()
    if report.failed:
        warn(f"Finished with {report.failed} failure(s): "
             f"{report.succeeded} succeeded, {report.failed} failed.")
    elif options.dry_run:
        success(f"Dry run complete: {report.skipped} repositories previewed.")
    else:
        success(f"{report.succeeded} repositories processed successfully.")
    success(f"All done! {log.count} entries written. You can review the log at: {C.BOLD}{log.path}")

    if report.failed and options.fail_on_error:
        return 1
    return 0


def show_log(path):
    lines = tail(path)
    if not lines:
        warn(f"No log entries in {path}.")
        return
    say(f"\n  {C.BOLD}Log{C.RESET}  {C.DIM}{path}{C.RESET}\n")
    for line in lines:
        say(f"  {line}")
    say()


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.init_config:
        save_config(dict(CFG))
        success(f"Wrote defaults to {CONFIG_PATH}")
        return 0
    if args.show_log:
        show_log(args.log_path)
        return 0

    options = options_from_args(args)
    try:
        return run(options)
    except (NothingToDoError, UserCancelledError) as e:
        warn(str(e))
        return e.exit_code
    except BatchArchiveError as e:
        error(f"Error: {e}")
        return e.exit_code
    except KeyboardInterrupt:
        say()
        warn("Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
