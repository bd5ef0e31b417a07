"""Repository list filtering."""

import re


def compile_pattern(pattern):
    """Return (predicate, is_regex) for pattern.

    A pattern that is not a valid regular expression is matched as a
    literal substring instead.
    """
    try:
        rx = re.compile(pattern)
    except re.error:
        return (lambda name: pattern in name), False
    return (lambda name: rx.search(name) is not None), True


def filter_repos(repos, pattern):
    """Keep the repos whose reference matches pattern, preserving order."""
    if not pattern:
        return list(repos)
    matches, _ = compile_pattern(pattern)
    return [r for r in repos if matches(r)]
