"""Audit Log — append one timestamped line per attempted action."""

import os
import threading
import time

from gh_batch_archive.errors import LogUnavailableError

# Shared by every AuditLog so two sinks on the same path cannot interleave.
_WRITE_LOCK = threading.Lock()


def _timestamp():
    return time.strftime("%Y-%m-%d %H:%M:%S")


class AuditLog:
    """Append-only text log. Nothing touches the file before ensure_writable() or write()."""

    def __init__(self, path):
        self.path = os.path.expanduser(path)
        self.count = 0

    def ensure_writable(self):
        """Make sure the log can be appended to, creating it if needed."""
        try:
            with _WRITE_LOCK:
                with open(self.path, "a", encoding="utf-8"):
                    pass
        except OSError as e:
            raise LogUnavailableError(f"Cannot write to log file {self.path}: {e.strerror or e}")

    def write(self, message):
        line = f"{_timestamp()}: {message}\n"
        with _WRITE_LOCK:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
            self.count += 1


def tail(path, count=50):
    """Return the last count lines of the log at path."""
    path = os.path.expanduser(path)
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.read().splitlines()
    return lines[-count:] if count > 0 else []
