"""Tests for reposync.lib.listing module."""

import json

import pytest

from reposync.lib.listing import find_ref, load_repository_refs
from reposync.lib.types import RepositoryRef
from reposync.lib.validate import ValidationError


class TestLoadRepositoryRefs:
    """Test load_repository_refs()."""

    def test_api_shaped_json(self, tmp_path):
        listing = tmp_path / "repos.json"
        listing.write_text(json.dumps([
            {
                "name": "demo",
                "ssh_url": "git@github.com:alice/demo.git",
                "clone_url": "https://github.com/alice/demo.git",
                "private": False,
            },
            {"name": "tools", "clone_url": "https://github.com/alice/tools.git"},
        ]))
        refs = load_repository_refs(listing)
        assert refs == [
            RepositoryRef("demo", "git@github.com:alice/demo.git"),
            RepositoryRef("tools", "https://github.com/alice/tools.git"),
        ]

    def test_yaml_listing(self, tmp_path):
        listing = tmp_path / "repos.yaml"
        listing.write_text(
            "- name: demo\n"
            "  remote_url: /srv/git/demo.git\n"
        )
        assert load_repository_refs(listing) == [RepositoryRef("demo", "/srv/git/demo.git")]

    def test_empty_file(self, tmp_path):
        listing = tmp_path / "repos.yaml"
        listing.write_text("")
        assert load_repository_refs(listing) == []

    def test_missing_url_rejected(self, tmp_path):
        listing = tmp_path / "repos.json"
        listing.write_text(json.dumps([{"name": "demo"}]))
        with pytest.raises(ValidationError):
            load_repository_refs(listing)

    def test_not_a_list_rejected(self, tmp_path):
        listing = tmp_path / "repos.json"
        listing.write_text(json.dumps({"message": "API rate limit exceeded"}))
        with pytest.raises(ValidationError):
            load_repository_refs(listing)

    def test_malformed_rejected(self, tmp_path):
        listing = tmp_path / "repos.json"
        listing.write_text("[{unclosed")
        with pytest.raises(ValidationError):
            load_repository_refs(listing)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="File not found"):
            load_repository_refs(tmp_path / "nope.json")

    def test_duplicate_names_keep_first(self, tmp_path):
        listing = tmp_path / "repos.json"
        listing.write_text(json.dumps([
            {"name": "demo", "remote_url": "first"},
            {"name": "demo", "remote_url": "second"},
        ]))
        assert load_repository_refs(listing) == [RepositoryRef("demo", "first")]

    def test_empty_url_skipped(self, tmp_path):
        listing = tmp_path / "repos.json"
        listing.write_text(json.dumps([
            {"name": "demo", "ssh_url": "", "clone_url": "https://x/demo.git"},
            {"name": "blank", "ssh_url": ""},
        ]))
        assert load_repository_refs(listing) == [RepositoryRef("demo", "https://x/demo.git")]


class TestFindRef:

    def test_found_and_missing(self):
        refs = [RepositoryRef("a", "u1"), RepositoryRef("b", "u2")]
        assert find_ref(refs, "b") == RepositoryRef("b", "u2")
        assert find_ref(refs, "c") is None
