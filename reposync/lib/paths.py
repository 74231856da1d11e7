"""
Repository path resolution.

Maps a repository name to its working copy directly under the base
directory. The name is the only local uniqueness key.
"""

from dataclasses import dataclass
from pathlib import Path

from reposync.lib.types import PreconditionFailure, RepositoryRef


def validate_name(name: str) -> None:
    """Reject names that would escape or alias the base directory."""
    if not name or not name.strip():
        raise PreconditionFailure("Repository name is empty")
    if name in (".", ".."):
        raise PreconditionFailure(f"Invalid repository name: {name!r}")
    if "/" in name or "\\" in name or "\0" in name:
        raise PreconditionFailure(f"Repository name must not contain path separators: {name!r}")


def resolve(base_dir: Path, name: str) -> Path:
    """Join base_dir and name. Pure; does not touch the filesystem."""
    validate_name(name)
    return Path(base_dir) / name


def exists(local_path: Path) -> bool:
    """Whether a working copy directory is present. Never cached."""
    return Path(local_path).is_dir()


@dataclass(frozen=True)
class LocalRepository:
    """Transient view of a repository's local working copy."""
    ref: RepositoryRef
    local_path: Path

    @property
    def name(self) -> str:
        return self.ref.name

    @property
    def present(self) -> bool:
        return exists(self.local_path)


def local_repository(base_dir: Path, ref: RepositoryRef) -> LocalRepository:
    """Build the LocalRepository for ref under base_dir."""
    return LocalRepository(ref=ref, local_path=resolve(base_dir, ref.name))
