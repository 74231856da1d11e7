"""Tests for the reposync CLI."""

import json
from pathlib import Path

import pytest

from reposync.cli import build_parser, main


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run the CLI from an empty directory with locks under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("REPOSYNC_LOCK_DIR", str(tmp_path / "locks"))
    monkeypatch.setenv("REPOSYNC_LOCK_TIMEOUT", "5")
    clones = tmp_path / "clones"
    listing = tmp_path / "repos.json"
    listing.write_text(json.dumps([
        {"name": "demo", "clone_url": "https://example/demo.git"},
        {"name": "tools", "clone_url": "https://example/tools.git"},
    ]))
    return clones, listing


class TestParser:

    def test_push_message_default(self):
        args = build_parser().parse_args(["push", "demo"])
        assert args.message == "Update"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:

    def test_list_from_listing(self, cli_env, capsys):
        clones, listing = cli_env
        (clones / "demo").mkdir(parents=True)
        rc = main(["-d", str(clones), "-r", str(listing), "list"])
        out = capsys.readouterr().out
        assert rc == 0
        assert "demo" in out and "local" in out
        assert "tools" in out and "missing" in out

    def test_clone_unknown_name(self, cli_env, fake_git, capsys):
        clones, listing = cli_env
        rc = main(["-d", str(clones), "-r", str(listing), "clone", "nope"])
        assert rc == 2
        assert "not in repository listing" in capsys.readouterr().out
        assert fake_git.calls == []

    def test_clone_many(self, cli_env, fake_git, capsys):
        clones, listing = cli_env
        (clones / "demo").mkdir(parents=True)
        rc = main(["-d", str(clones), "-r", str(listing), "clone", "demo", "tools"])
        out = capsys.readouterr().out
        assert rc == 0
        assert "Already exists" in out
        assert "Cloned tools" in out
        assert fake_git.subcommands == ["clone"]

    def test_relative_base_dir(self, cli_env, fake_git, capsys):
        _, listing = cli_env
        rc = main(["-d", "clones", "-r", str(listing), "clone", "demo"])
        assert rc == 0
        assert fake_git.calls[0][-1] == str(Path.cwd() / "clones" / "demo")

    def test_unrelated_prefixed_variable_ignored(self, cli_env, monkeypatch, capsys):
        clones, listing = cli_env
        monkeypatch.setenv("REPOSYNC_TOKEN", "abc")
        assert main(["-d", str(clones), "-r", str(listing), "list"]) == 0

    def test_refresh_reports_clean(self, cli_env, fake_git, capsys):
        clones, _ = cli_env
        (clones / "demo").mkdir(parents=True)
        rc = main(["-d", str(clones), "refresh", "demo"])
        assert rc == 0
        assert "Working tree clean" in capsys.readouterr().out

    def test_check_prints_counts(self, cli_env, fake_git, capsys):
        clones, _ = cli_env
        (clones / "demo").mkdir(parents=True)
        fake_git.responses["rev-parse"] = (0, "main\n", "")
        fake_git.responses["rev-list"] = (0, "2\t1\n", "")
        rc = main(["-d", str(clones), "check", "demo"])
        assert rc == 0
        assert "Behind: 2 Ahead: 1" in capsys.readouterr().out

    def test_check_up_to_date_and_stale_fetch(self, cli_env, fake_git, capsys):
        clones, _ = cli_env
        (clones / "demo").mkdir(parents=True)
        fake_git.responses["fetch"] = (128, "", "fatal: unable to access remote\n")
        fake_git.responses["rev-list"] = (0, "0\t0\n", "")
        rc = main(["-d", str(clones), "check", "demo"])
        out = capsys.readouterr().out
        assert rc == 0
        assert "(up to date)" in out
        assert "remote refs may be stale" in out

    def test_diff_accepts_rename_listing_path(self, cli_env, fake_git, capsys):
        clones, _ = cli_env
        (clones / "demo").mkdir(parents=True)
        fake_git.responses["diff"] = (0, "+new line\n", "")
        rc = main(["-d", str(clones), "diff", "demo", "old.txt -> new.txt"])
        assert rc == 0
        assert fake_git.calls == [["diff", "--", "new.txt"]]
        assert "+new line" in capsys.readouterr().out

    def test_push_failure_exit_code(self, cli_env, fake_git, capsys):
        clones, _ = cli_env
        (clones / "demo").mkdir(parents=True)
        fake_git.responses["status --porcelain"] = (0, " M a.txt\n", "")
        fake_git.responses["push"] = (1, "", "! [rejected]\n")
        rc = main(["-d", str(clones), "push", "demo", "-m", "msg"])
        out = capsys.readouterr().out
        assert rc == 1
        assert "push_failed" in out

    def test_missing_copy_exit_code(self, cli_env, fake_git, capsys):
        clones, _ = cli_env
        rc = main(["-d", str(clones), "pull", "demo"])
        assert rc == 1
        assert "Local copy missing" in capsys.readouterr().out

    def test_bad_config(self, cli_env, tmp_path, capsys):
        bad = tmp_path / "bad.env"
        bad.write_text("FETCH_TIMEOUT=soon\n")
        rc = main(["-c", str(bad), "list"])
        assert rc == 2
        assert "ERROR" in capsys.readouterr().out

    def test_bad_listing(self, cli_env, tmp_path, capsys):
        bad = tmp_path / "repos.json"
        bad.write_text("{not json")
        rc = main(["-r", str(bad), "list"])
        assert rc == 2
