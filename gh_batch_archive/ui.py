"""Colors, prompt helpers, and UI utilities."""

import re
import shutil
import sys
import threading

import questionary
from prompt_toolkit.key_binding import KeyBindings, merge_key_bindings
from prompt_toolkit.keys import Keys
from questionary import Style

from gh_batch_archive.config import CFG


def hex_to_ansi(hex_color):
    """Convert a hex color like '#5f9ea0' to a truecolor ANSI escape."""
    h = hex_color.lstrip("#")
    if len(h) != 6:
        return "\033[36m"
    try:
        r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        return "\033[36m"
    return f"\033[38;2;{r};{g};{b}m"


class C:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    ACCENT = hex_to_ansi(CFG.get("accent_color", "#5f9ea0"))


def _build_style():
    accent = CFG.get("accent_color", "#5f9ea0")
    return Style([
        ("qmark", f"fg:{accent} bold"),
        ("question", "fg:white bold"),
        ("pointer", f"fg:{accent} bold"),
        ("highlighted", f"fg:{accent} bold"),
        ("selected", "fg:green"),
        ("answer", "fg:green bold"),
        ("instruction", "fg:#888888"),
    ])


STYLE = _build_style()

ANSI_RE = re.compile(r"\033\[[0-9;]*m")

# Workers print concurrently; one lock keeps each message on its own line.
_PRINT_LOCK = threading.Lock()


def strip_ansi(text):
    return ANSI_RE.sub("", text)


def say(msg=""):
    with _PRINT_LOCK:
        print(msg, flush=True)


def info(msg):
    say(f"  {C.ACCENT}{msg}{C.RESET}")


def success(msg):
    say(f"  {C.GREEN}{msg}{C.RESET}")


def error(msg):
    say(f"  {C.RED}{msg}{C.RESET}")


def warn(msg):
    say(f"  {C.YELLOW}{msg}{C.RESET}")


def is_interactive():
    """True when stdin is a terminal questionary can drive."""
    return sys.stdin is not None and sys.stdin.isatty()


def pick_multi(prompt, options):
    """Multi-select with checkboxes. Returns list of selected indices."""
    clean_prompt = strip_ansi(prompt).strip() if prompt else "Select (Space to toggle):"
    clean_options = [strip_ansi(o) for o in options]
    if not clean_options:
        return []
    question = questionary.checkbox(
        clean_prompt, choices=clean_options, style=STYLE,
        use_jk_keys=False,
        instruction="(↑↓ navigate, Space toggle, Enter confirm, Ctrl-G cancel)",
    )
    back_kb = KeyBindings()

    @back_kb.add(Keys.ControlG, eager=True)
    def _go_back(event):
        event.app.exit(exception=KeyboardInterrupt, style="class:aborting")

    app = question.application
    app.key_bindings = merge_key_bindings([app.key_bindings, back_kb])
    try:
        selected = question.unsafe_ask()
    except KeyboardInterrupt:
        return []
    if selected is None:
        return []
    return [clean_options.index(s) for s in selected]


def is_yes(answer):
    return (answer or "").strip().lower() in ("y", "yes")


def confirm(msg, default_yes=False):
    """Yes/no question. Falls back to a plain [y/N] line read without a TTY."""
    clean = strip_ansi(msg)
    if not is_interactive():
        try:
            answer = input(f"  {C.BOLD}{msg} [y/N] {C.RESET}")
        except (EOFError, KeyboardInterrupt):
            say()
            return False
        return is_yes(answer)
    result = questionary.confirm(clean, default=default_yes, style=STYLE).ask()
    if result is None:
        return False
    return result


def read_line(msg):
    """Print msg and read one line from stdin; empty on EOF."""
    say(f"  {C.ACCENT}{msg}{C.RESET}")
    try:
        return input()
    except EOFError:
        return ""


def check_tool(tool_name):
    return shutil.which(tool_name) is not None
