"""Repository selection: pass-through, fzf, checkbox, or numbered menu."""

import subprocess

from gh_batch_archive.ui import C, check_tool, info, is_interactive, pick_multi, read_line, say, warn


def parse_choices(text, repos):
    """Map whitespace-separated 1-based indices back to repos.

    Malformed and out-of-range tokens are dropped; repeats are kept once.
    """
    chosen = []
    for token in (text or "").split():
        if not (token.isascii() and token.isdigit()):
            continue
        n = int(token)
        if 1 <= n <= len(repos) and repos[n - 1] not in chosen:
            chosen.append(repos[n - 1])
    return chosen


class Selector:
    """Base class for selectors. select() returns a subset of repos."""
    name = ""

    def select(self, repos):
        raise NotImplementedError


class PassThroughSelector(Selector):
    name = "all"

    def select(self, repos):
        return list(repos)


class FzfSelector(Selector):
    name = "fzf"

    def __init__(self, height=20):
        self.height = height

    def select(self, repos):
        info("Interactive selection enabled. Use TAB to select multiple repositories, "
             "then press ENTER to confirm your choices.")
        # fzf draws on /dev/tty itself; only stdin/stdout carry the list
        result = subprocess.run(
            ["fzf", "--multi", "--prompt=Select repos> ", f"--height={self.height}"],
            input="\n".join(repos) + "\n", stdout=subprocess.PIPE, text=True,
        )
        if result.returncode != 0:
            return []
        known = set(repos)
        chosen = []
        for line in result.stdout.splitlines():
            if line in known and line not in chosen:
                chosen.append(line)
        return chosen


class CheckboxSelector(Selector):
    """questionary checkbox list.

    Unlike fzf, questionary reports ticked entries in list order, not in the
    order they were toggled.
    """
    name = "checkbox"

    def select(self, repos):
        indices = pick_multi("Select repositories:", repos)
        return [repos[i] for i in indices]


class NumberedMenuSelector(Selector):
    name = "menu"

    def select(self, repos):
        for i, repo in enumerate(repos, 1):
            say(f"  [{i}] {repo}")
        say()
        text = read_line("Please enter the numbers of the repositories you want to select, "
                         "separated by spaces (e.g. 1 3 5):")
        return parse_choices(text, repos)


def make_selector(interactive, fzf_height=20):
    """Probe the environment once and pick the best available selector."""
    if not interactive:
        return PassThroughSelector()
    if check_tool("fzf"):
        return FzfSelector(height=fzf_height)
    if is_interactive():
        warn(f"'fzf' not found. Falling back to a checkbox list {C.DIM}(Space to toggle){C.RESET}.")
        return CheckboxSelector()
    warn("'fzf' not found. Falling back to a simple numbered menu.")
    return NumberedMenuSelector()
