"""Tests for status parsing and ahead/behind computation."""

import pytest

from reposync.git.branch import compute_divergence
from reposync.git.status import parse_status, parse_status_line
from reposync.lib.types import ChangeKind, ParseFailure, classify_status_code


class TestParseStatusLine:
    """Path extraction heuristic: tab first, then fixed width, then whole line."""

    def test_tab_separated(self):
        entry = parse_status_line("M\tsrc/main.py")
        assert entry.path == "src/main.py"
        assert entry.status_code == "M"

    def test_tab_takes_precedence_over_fixed_width(self):
        entry = parse_status_line("XY\tpath with spaces.txt")
        assert entry.path == "path with spaces.txt"

    def test_tab_keeps_everything_after_first_tab(self):
        entry = parse_status_line("R100\told.txt\tnew.txt")
        assert entry.path == "old.txt\tnew.txt"

    def test_fixed_width_porcelain(self):
        entry = parse_status_line(" M README.md")
        assert entry.path == "README.md"
        assert entry.status_code == " M"

    def test_fixed_width_trims(self):
        assert parse_status_line("?? notes.txt  ").path == "notes.txt"

    def test_fixed_width_exactly_four_chars(self):
        assert parse_status_line("A  x").path == "x"

    def test_short_line_is_degenerate_entry(self):
        entry = parse_status_line(" ab")
        assert entry.path == "ab"
        assert entry.status_code == ""
        assert entry.kind == ChangeKind.UNKNOWN

    def test_rename_keeps_raw_tail(self):
        entry = parse_status_line("R  old.txt -> new.txt")
        assert entry.path == "old.txt -> new.txt"
        assert entry.target_path == "new.txt"
        assert entry.kind == ChangeKind.RENAMED


class TestParseStatus:
    """Test parse_status over whole outputs."""

    def test_empty_input(self):
        assert parse_status("") == []

    def test_n_lines_n_entries_in_order(self):
        raw = " M a.txt\n?? b.txt\nD  c.txt\n"
        entries = parse_status(raw)
        assert [e.path for e in entries] == ["a.txt", "b.txt", "c.txt"]

    def test_skips_empty_lines(self):
        assert len(parse_status(" M a.txt\n\n\n?? b.txt")) == 2

    def test_garbage_never_raises(self):
        entries = parse_status("x\n\x00\x01\n")
        assert len(entries) == 2

    def test_returns_new_list_each_call(self):
        first = parse_status(" M a.txt")
        second = parse_status(" M a.txt")
        assert first == second
        assert first is not second

    def test_crlf_line_endings(self):
        entries = parse_status(" M a.txt\r\n?? b.txt\r\n")
        assert [e.path for e in entries] == ["a.txt", "b.txt"]


class TestClassifyStatusCode:
    """Test ChangeKind derivation."""

    @pytest.mark.parametrize("code,kind", [
        (" M", ChangeKind.MODIFIED),
        ("M ", ChangeKind.MODIFIED),
        ("A ", ChangeKind.ADDED),
        (" D", ChangeKind.DELETED),
        ("??", ChangeKind.UNTRACKED),
        ("R ", ChangeKind.RENAMED),
        ("C ", ChangeKind.COPIED),
        ("UU", ChangeKind.UNMERGED),
        ("AA", ChangeKind.UNMERGED),
        ("DD", ChangeKind.UNMERGED),
        (" T", ChangeKind.TYPE_CHANGED),
        ("!!", ChangeKind.IGNORED),
        ("M", ChangeKind.MODIFIED),
        ("", ChangeKind.UNKNOWN),
        ("ZZ", ChangeKind.UNKNOWN),
    ])
    def test_codes(self, code, kind):
        assert classify_status_code(code) == kind


class TestComputeDivergence:
    """Test compute_divergence parsing."""

    def test_tab_separated(self):
        result = compute_divergence("main", "3\t5\n")
        assert result.behind == 3
        assert result.ahead == 5
        assert result.branch == "main"

    def test_space_separated(self):
        result = compute_divergence("dev", "0 12")
        assert (result.behind, result.ahead) == (0, 12)

    def test_up_to_date(self):
        assert compute_divergence("main", "0\t0").up_to_date

    @pytest.mark.parametrize("raw", [
        "",
        "3",
        "3\t5\t7",
        "a\tb",
        "-1\t2",
        "fatal: no upstream configured",
        "3.5\t1",
    ])
    def test_unparseable_raises(self, raw):
        with pytest.raises(ParseFailure):
            compute_divergence("main", raw)

    def test_parse_failure_keeps_raw(self):
        with pytest.raises(ParseFailure) as exc_info:
            compute_divergence("main", "garbage")
        assert exc_info.value.raw == "garbage"
