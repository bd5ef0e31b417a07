import os
import subprocess

import pytest

# Keep a developer's real rc file out of the tests; must run before the package is imported.
os.environ["GH_BATCH_ARCHIVE_CONFIG"] = os.path.join(
    os.path.dirname(__file__), "_no_such_config.json"
)


class FakeGh:
    """Stands in for subprocess.run, answering gh invocations by argument prefix."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def on(self, *prefix, returncode=0, stdout="", stderr=""):
        self.responses.append((list(prefix), returncode, stdout, stderr))

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        args = list(cmd[1:])
        for prefix, returncode, stdout, stderr in self.responses:
            if args[:len(prefix)] == prefix:
                return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)
        raise AssertionError(f"unexpected gh call: {cmd}")


@pytest.fixture
def fake_gh(monkeypatch):
    fake = FakeGh()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake
