"""Action summary and the confirmation gate before any change is made."""

from gh_batch_archive.errors import UserCancelledError
from gh_batch_archive import ui
from gh_batch_archive.ui import C

DRY_RUN_MODE = "DRY-RUN (no changes will be made)"


def action_label(unarchive):
    return "unarchive" if unarchive else "archive"


def mode_label(dry_run):
    return DRY_RUN_MODE if dry_run else "ACTUAL"


def render_summary(repos, options):
    action = action_label(options.unarchive)
    lines = [
        f"{C.CYAN}{'=' * 30}{C.RESET}",
        f"{C.BOLD}{C.CYAN}SUMMARY:{C.RESET}",
        f"You are about to {C.BOLD}{action}{C.RESET} {C.BOLD}{len(repos)}{C.RESET} "
        f"repositories owned by {C.BOLD}{options.owner}{C.RESET}.",
        f"Mode: {C.YELLOW}{mode_label(options.dry_run)}{C.RESET}",
        "The following repositories will be affected:",
    ]
    for i, repo in enumerate(repos, 1):
        lines.append(f"{i:>2}. {repo}")
    lines.append(f"{C.CYAN}{'=' * 30}{C.RESET}")
    return "\n".join(lines)


def confirm_run(repos, options):
    """Show the summary; raise UserCancelledError unless the run is approved.

    Dry runs are never asked about since they change nothing.
    """
    ui.say()
    ui.say(render_summary(repos, options))
    ui.say()
    if options.dry_run:
        ui.warn("This is a dry-run. No changes will be made.")
        return
    action = action_label(options.unarchive)
    if not ui.confirm(f"Do you want to proceed and {action} these repositories?"):
        raise UserCancelledError("Operation cancelled by user. No changes made.")
