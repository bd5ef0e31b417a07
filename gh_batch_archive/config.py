"""Configuration loading, saving, defaults, and per-run options."""

import json
import os
from dataclasses import dataclass

CONFIG_PATH = os.path.expanduser(
    os.environ.get("GH_BATCH_ARCHIVE_CONFIG", "~/.gh-batch-archiverc")
)

DEFAULT_CONFIG = {
    "parallel": 4,
    "log_path": "gh-batch-archive.log",
    "fail_on_error": False,
    # Interactive selection
    "fzf_height": 20,
    "accent_color": "#5f9ea0",
}


def load_config(path=None):
    """Read the rc file, filling any missing keys from DEFAULT_CONFIG."""
    path = path or CONFIG_PATH
    cfg = {}
    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                cfg = json.load(f)
        except (json.JSONDecodeError, OSError):
            print(f"  Ignoring unreadable config file: {path}")
            cfg = {}
        if not isinstance(cfg, dict):
            cfg = {}
    for k, v in DEFAULT_CONFIG.items():
        cfg.setdefault(k, v)
    _validate(cfg, path)
    return cfg


def _validate(cfg, path):
    """Reset values of the wrong type or range to their defaults."""
    for key in ("parallel", "fzf_height"):
        value = cfg[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            print(f"  Ignoring invalid '{key}' in {path}: {value!r}")
            cfg[key] = DEFAULT_CONFIG[key]
    if not isinstance(cfg["fail_on_error"], bool):
        print(f"  Ignoring invalid 'fail_on_error' in {path}: {cfg['fail_on_error']!r}")
        cfg["fail_on_error"] = DEFAULT_CONFIG["fail_on_error"]
    for key in ("log_path", "accent_color"):
        if not isinstance(cfg[key], str) or not cfg[key]:
            print(f"  Ignoring invalid '{key}' in {path}: {cfg[key]!r}")
            cfg[key] = DEFAULT_CONFIG[key]


def save_config(cfg, path=None):
    path = path or CONFIG_PATH
    with open(path, "w") as f:
        json.dump(cfg, f, indent=2)


@dataclass(frozen=True)
class RunOptions:
    """Everything a run needs, captured once before any work starts."""

    owner: str = ""
    unarchive: bool = False
    dry_run: bool = False
    pattern: str = ""
    interactive: bool = False
    parallel: int = DEFAULT_CONFIG["parallel"]
    log_path: str = DEFAULT_CONFIG["log_path"]
    fail_on_error: bool = False
    fzf_height: int = DEFAULT_CONFIG["fzf_height"]


CFG = load_config()
