"""
Repository listing input.

Reads a saved repository listing (the JSON array returned by the remote
listing endpoint, or a hand-written YAML list) into RepositoryRefs.
"""

import logging
from pathlib import Path

import yaml

from reposync.lib import validate
from reposync.lib.types import RepositoryRef

logger = logging.getLogger(__name__)

# Preferred clone endpoint first
URL_KEYS = ("ssh_url", "clone_url", "remote_url")


def refs_from_listing(data: list) -> list[RepositoryRef]:
    """Convert validated listing entries into RepositoryRefs, order preserved."""
    refs = []
    seen = set()
    for entry in data:
        name = entry["name"]
        if name in seen:
            logger.warning(f"[LISTING] duplicate repository name '{name}', keeping first")
            continue
        seen.add(name)
        url = next((entry[k] for k in URL_KEYS if entry.get(k)), None)
        if url is None:
            logger.warning(f"[LISTING] no clone URL for '{name}', skipping")
            continue
        refs.append(RepositoryRef(name=name, remote_url=url))
    return refs


def load_repository_refs(path: Path) -> list[RepositoryRef]:
    """
    Load and validate a listing file.

    Raises:
        ValidationError: If the file is unreadable or doesn't match the repos schema
    """
    if not path.exists():
        raise validate.ValidationError("repos", f"File not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise validate.ValidationError("repos", f"Invalid listing in {path}: {e}") from None

    if data is None:
        data = []
    validate.validate(data, "repos")
    refs = refs_from_listing(data)
    logger.info(f"[LISTING] loaded {len(refs)} repositories from {path}")
    return refs


def find_ref(refs: list[RepositoryRef], name: str) -> RepositoryRef | None:
    """Look up a repository by name."""
    for ref in refs:
        if ref.name == name:
            return ref
    return None
