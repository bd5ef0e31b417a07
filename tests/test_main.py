import pytest

import gh_batch_archive.gh as gh_mod
import gh_batch_archive.main as main_mod
import gh_batch_archive.ui as ui_mod
from gh_batch_archive.config import load_config
from gh_batch_archive.errors import AuthenticationError, DependencyMissingError, UpstreamError


class FakeGitHub:
    def __init__(self, monkeypatch, repos, failing=(), login="me"):
        self.repos = list(repos)
        self.failing = set(failing)
        self.login = login
        self.mutations = []
        self.listed = []
        monkeypatch.setattr(gh_mod, "require_gh", lambda: None)
        monkeypatch.setattr(gh_mod, "require_auth", lambda: None)
        monkeypatch.setattr(gh_mod, "current_login", lambda: self.login)
        monkeypatch.setattr(gh_mod, "list_repos", self.list_repos)
        monkeypatch.setattr(gh_mod, "set_archived", self.set_archived)

    def list_repos(self, owner):
        self.listed.append(owner)
        return list(self.repos)

    def set_archived(self, repo, archived):
        self.mutations.append((repo, archived))
        if repo in self.failing:
            raise UpstreamError("HTTP 500")


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "gh-batch-archive.log"


@pytest.fixture
def never_confirm(monkeypatch):
    def fail(*a, **kw):
        raise AssertionError("confirmation prompt should not be shown")

    monkeypatch.setattr(ui_mod, "confirm", fail)


def _log_lines(path):
    if not path.exists():
        return []
    return path.read_text(encoding="utf-8").splitlines()


def test_dry_run_pattern_scenario(monkeypatch, log_path, never_confirm):
    fake = FakeGitHub(monkeypatch, ["a/x", "a/y", "a/z"])

    code = main_mod.main(["a", "--pattern", "y", "--dry-run", "--log", str(log_path)])

    assert code == 0
    assert fake.mutations == []
    lines = _log_lines(log_path)
    assert len(lines) == 1
    assert "[DRY RUN]" in lines[0]
    assert lines[0].endswith("a/y")


def test_empty_listing_exits_early(monkeypatch, log_path, capsys):
    FakeGitHub(monkeypatch, [])

    def no_select(*a, **kw):
        raise AssertionError("selection should not run")

    monkeypatch.setattr(main_mod, "make_selector", no_select)

    code = main_mod.main(["a", "--log", str(log_path)])

    assert code == 0
    assert not log_path.exists()
    assert "Nothing to do" in capsys.readouterr().out


def test_no_pattern_match_exits_early(monkeypatch, log_path, capsys):
    fake = FakeGitHub(monkeypatch, ["a/x"])

    code = main_mod.main(["a", "--pattern", "nomatch", "--log", str(log_path)])

    assert code == 0
    assert fake.mutations == []
    assert "No repositories match" in capsys.readouterr().out


def test_cancel_makes_no_changes_and_no_log(monkeypatch, log_path):
    fake = FakeGitHub(monkeypatch, ["a/x", "a/y"])
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: False)

    code = main_mod.main(["a", "--log", str(log_path)])

    assert code == 0
    assert fake.mutations == []
    assert not log_path.exists()


def test_partial_failure_still_exits_zero(monkeypatch, log_path):
    repos = [f"a/r{i}" for i in range(5)]
    fake = FakeGitHub(monkeypatch, repos, failing={"a/r2"})
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: True)

    code = main_mod.main(["a", "--parallel", "2", "--log", str(log_path)])

    assert code == 0
    assert sorted(r for r, _ in fake.mutations) == repos
    lines = _log_lines(log_path)
    assert len(lines) == 5
    assert sum("Failed to archive a/r2" in line for line in lines) == 1
    assert sum(": Archived " in line for line in lines) == 4


def test_fail_on_error_flag(monkeypatch, log_path):
    FakeGitHub(monkeypatch, ["a/x", "a/y"], failing={"a/y"})
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: True)

    code = main_mod.main(["a", "--fail-on-error", "--log", str(log_path)])

    assert code == 1


def test_unarchive_direction(monkeypatch, log_path):
    fake = FakeGitHub(monkeypatch, ["a/x"])
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: True)

    main_mod.main(["a", "--unarchive", "--log", str(log_path)])

    assert fake.mutations == [("a/x", False)]
    assert _log_lines(log_path)[0].endswith("Unarchived a/x")


def test_owner_defaults_to_login(monkeypatch, log_path, capsys):
    fake = FakeGitHub(monkeypatch, ["octo/x"], login="octo")

    main_mod.main(["--dry-run", "--log", str(log_path)])

    assert fake.listed == ["octo"]
    assert "Using your GitHub username: 'octo'" in capsys.readouterr().out


def test_interactive_selection_is_subset(monkeypatch, log_path):
    fake = FakeGitHub(monkeypatch, ["a/x", "a/y", "a/z"])
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: True)

    class PickLast:
        def select(self, repos):
            return repos[-1:]

    monkeypatch.setattr(main_mod, "make_selector", lambda interactive, height: PickLast())

    main_mod.main(["a", "--interactive", "--log", str(log_path)])

    assert fake.mutations == [("a/z", True)]


def test_empty_selection_exits_early(monkeypatch, log_path, never_confirm):
    fake = FakeGitHub(monkeypatch, ["a/x"])

    class PickNothing:
        def select(self, repos):
            return []

    monkeypatch.setattr(main_mod, "make_selector", lambda interactive, height: PickNothing())

    assert main_mod.main(["a", "--interactive", "--log", str(log_path)]) == 0
    assert fake.mutations == []


@pytest.mark.parametrize("exc", [
    DependencyMissingError("gh missing"),
    AuthenticationError("not logged in"),
])
def test_fatal_setup_errors_exit_nonzero(monkeypatch, log_path, exc):
    def boom():
        raise exc

    monkeypatch.setattr(gh_mod, "require_gh", boom)
    monkeypatch.setattr(gh_mod, "require_auth", boom)

    assert main_mod.main(["a", "--log", str(log_path)]) == 1


def test_listing_failure_is_fatal(monkeypatch, log_path):
    fake = FakeGitHub(monkeypatch, [])

    def broken(owner):
        raise UpstreamError("could not list")

    monkeypatch.setattr(gh_mod, "list_repos", broken)

    assert main_mod.main(["a", "--log", str(log_path)]) == 1
    assert fake.mutations == []


def test_parallel_must_be_positive():
    with pytest.raises(SystemExit):
        main_mod.build_parser().parse_args(["--parallel", "0"])


def test_config_supplies_defaults():
    cfg = {"parallel": 7, "log_path": "custom.log", "fail_on_error": True, "fzf_height": 10}
    args = main_mod.build_parser(cfg).parse_args(["org"])
    opts = main_mod.options_from_args(args, cfg)

    assert opts.owner == "org"
    assert opts.parallel == 7
    assert opts.log_path == "custom.log"
    assert opts.fail_on_error is True
    assert opts.fzf_height == 10


def test_show_log(log_path, capsys):
    log_path.write_text("2024-01-01 00:00:00: Archived a/x\n", encoding="utf-8")

    assert main_mod.main(["--show-log", "--log", str(log_path)]) == 0
    assert "Archived a/x" in capsys.readouterr().out


def test_init_config(monkeypatch, tmp_path):
    saved = {}
    monkeypatch.setattr(main_mod, "save_config", lambda cfg: saved.update(cfg))

    assert main_mod.main(["--init-config"]) == 0
    assert saved["parallel"] == 4


def test_unwritable_log_stops_before_any_change(monkeypatch, tmp_path, capsys):
    fake = FakeGitHub(monkeypatch, [f"a/r{i}" for i in range(5)])
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: True)
    log_path = tmp_path / "no-such-dir" / "x.log"

    code = main_mod.main(["a", "--parallel", "2", "--log", str(log_path)])

    assert code == 1
    assert fake.mutations == []
    assert not log_path.exists()
    assert "Cannot write to log file" in capsys.readouterr().out


def test_final_report_counts_log_entries(monkeypatch, log_path, capsys):
    FakeGitHub(monkeypatch, ["a/x", "a/y", "a/z"])

    main_mod.main(["a", "--dry-run", "--log", str(log_path)])

    assert "All done! 3 entries written." in capsys.readouterr().out


def test_invalid_parallel_in_config_falls_back(monkeypatch, tmp_path, log_path):
    rc = tmp_path / "rc.json"
    rc.write_text('{"parallel": "abc"}', encoding="utf-8")
    cfg = load_config(str(rc))
    fake = FakeGitHub(monkeypatch, ["a/x", "a/y"])
    monkeypatch.setattr(ui_mod, "confirm", lambda msg, **kw: True)

    args = main_mod.build_parser(cfg).parse_args(["a", "--log", str(log_path)])
    options = main_mod.options_from_args(args, cfg)

    assert options.parallel == 4
    assert main_mod.run(options) == 0
    assert len(fake.mutations) == 2
