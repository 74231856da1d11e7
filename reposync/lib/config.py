"""
Configuration loader for reposync.

Loads sync settings from a reposync.env file plus REPOSYNC_* environment
overrides. The resulting SyncConfig is passed explicitly to every
orchestrator call; nothing reads configuration from module state.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from . import envparse
from . import validate

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "reposync.env"
ENV_PREFIX = "REPOSYNC_"

DEFAULTS = {
    "BASE_DIR": "~/reposync-clones",
    "DEFAULT_BRANCH": "master",
    "GIT_BINARY": "git",
    "STATUS_TIMEOUT": "20",
    "FETCH_TIMEOUT": "60",
    "PULL_TIMEOUT": "120",
    "PUSH_TIMEOUT": "120",
    "CLONE_TIMEOUT": "0",  # 0 = unbounded
    "LOCK_TIMEOUT": "60",
    "LOCK_DIR": "~/.reposync/locks",
    "MAX_WORKERS": "4",
}


@dataclass(frozen=True)
class SyncConfig:
    """Settings threaded through every sync operation."""
    base_dir: Path
    default_branch: str = "master"  # used when the branch query fails
    git_binary: str = "git"
    status_timeout: int = 20  # status, diff, add, commit, rev-parse, rev-list
    fetch_timeout: int = 60
    pull_timeout: int = 120
    push_timeout: int = 120
    clone_timeout: int = 0
    lock_timeout: int = 60
    lock_dir: Path | None = None  # defaults to ~/.reposync/locks
    max_workers: int = 4

    def __post_init__(self):
        # git runs with -C <path>, so relative paths are pinned to the current directory now
        object.__setattr__(self, "base_dir", Path(self.base_dir).expanduser().absolute())
        if self.lock_dir is not None:
            object.__setattr__(self, "lock_dir", Path(self.lock_dir).expanduser().absolute())

    @property
    def locks_path(self) -> Path:
        if self.lock_dir is not None:
            return self.lock_dir
        return Path(DEFAULTS["LOCK_DIR"]).expanduser()


def config_from_env(env: Mapping[str, str]) -> SyncConfig:
    """Build SyncConfig from a validated KEY=value mapping (missing keys use defaults)."""
    merged = {**DEFAULTS, **env}
    return SyncConfig(
        base_dir=Path(merged["BASE_DIR"]).expanduser(),
        default_branch=merged["DEFAULT_BRANCH"],
        git_binary=merged["GIT_BINARY"],
        status_timeout=int(merged["STATUS_TIMEOUT"]),
        fetch_timeout=int(merged["FETCH_TIMEOUT"]),
        pull_timeout=int(merged["PULL_TIMEOUT"]),
        push_timeout=int(merged["PUSH_TIMEOUT"]),
        clone_timeout=int(merged["CLONE_TIMEOUT"]),
        lock_timeout=int(merged["LOCK_TIMEOUT"]),
        lock_dir=Path(merged["LOCK_DIR"]).expanduser(),
        max_workers=int(merged["MAX_WORKERS"]),
    )


def load_sync_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> SyncConfig:
    """
    Load reposync.env (if given) and REPOSYNC_* overrides, validate, return SyncConfig.

    Raises:
        FileNotFoundError: if config_path is given but missing
        ValueError: if the env file has invalid syntax
        ValidationError: if a value does not match the config schema
    """
    env: dict = {}
    if config_path is not None:
        env.update(envparse.load_env(str(config_path)))
        logger.debug(f"[CONFIG] loaded {config_path}")

    if environ is None:
        environ = os.environ
    overrides = envparse.overrides_from_environ(environ, ENV_PREFIX)
    # The prefix is shared with whatever else the user exports; only known keys apply
    for key in sorted(set(overrides) - set(DEFAULTS)):
        logger.warning(f"[CONFIG] ignoring unknown setting {ENV_PREFIX}{key}")
        del overrides[key]
    if overrides:
        logger.debug(f"[CONFIG] environment overrides: {sorted(overrides)}")
    env.update(overrides)

    validate.validate(env, "config")
    return config_from_env(env)


def find_config_file(start: Path) -> Path | None:
    """Return start/reposync.env if it exists."""
    candidate = start / CONFIG_FILENAME
    if candidate.exists():
        return candidate
    return None
