"""Shared fixtures for reposync tests."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from reposync.lib.config import SyncConfig
from reposync.lib.types import RepositoryRef


class FakeGit:
    """Scripted stand-in for subprocess.run.

    Responses are keyed by the git arguments after "-C <path>", matched by
    prefix (longest key wins): "status --porcelain" beats "status". A response
    is a (returncode, stdout, stderr) tuple, an exception to raise, a list of
    tuples consumed in order, or a callable taking the full command.
    Unscripted commands succeed with empty output.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []
        self.kwargs: list[dict] = []
        self._lock = threading.Lock()

    def _lookup(self, args: list[str]):
        joined = " ".join(args)
        matches = [k for k in self.responses if joined == k or joined.startswith(k + " ")]
        if not matches:
            return (0, "", "")
        return self.responses[max(matches, key=len)]

    def __call__(self, cmd, **kwargs):
        args = cmd[3:]  # strip "git -C <path>"
        with self._lock:
            self.calls.append(args)
            self.kwargs.append(kwargs)
            response = self._lookup(args)
            if isinstance(response, list):
                response = response.pop(0)
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = response(cmd)
        returncode, stdout, stderr = response
        return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)

    @property
    def subcommands(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_git():
    fake = FakeGit()
    with patch("reposync.git.runner.subprocess.run", side_effect=fake):
        yield fake


@pytest.fixture
def config(tmp_path):
    return SyncConfig(
        base_dir=tmp_path / "clones",
        default_branch="master",
        lock_dir=tmp_path / "locks",
        lock_timeout=5,
    )


@pytest.fixture
def ref():
    return RepositoryRef(name="demo", remote_url="https://example/demo.git")


@pytest.fixture
def local_repo(config, ref):
    """A present working copy for ref."""
    path = config.base_dir / ref.name
    path.mkdir(parents=True)
    return path
