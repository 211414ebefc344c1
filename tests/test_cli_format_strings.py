"""Tests for the strings catalog formatter CLI."""

from __future__ import annotations

import json

from cli import format_strings


def test_format_cli_orders_locales(repo, capsys):
    repo.catalog({"b": {"fr": "B", "en-US": "B"}, "a": {"de": "A", "en-US": "A", "cs": ""}})
    code = format_strings.main(["--strings", str(repo.strings)])
    assert code == 0
    assert "Formatted 2 keys" in capsys.readouterr().out
    data = json.loads(repo.strings.read_text(encoding="utf-8"))
    assert list(data) == ["b", "a"]
    assert list(data["a"]) == ["en-US", "cs", "de"]
    assert data["a"]["cs"] == ""


def test_format_cli_sort_keys(repo, capsys):
    repo.catalog({"b": {"en-US": "B"}, "a": {"en-US": "A"}})
    assert format_strings.main(["--strings", str(repo.strings), "--sort"]) == 0
    data = json.loads(repo.strings.read_text(encoding="utf-8"))
    assert list(data) == ["a", "b"]


def test_format_cli_warns_on_duplicates(repo, capsys):
    repo.catalog('{"a": {"en-US": "old"}, "a": {"en-US": "new"}}')
    assert format_strings.main(["--strings", str(repo.strings)]) == 0
    assert "duplicate keys" in capsys.readouterr().err
    assert json.loads(repo.strings.read_text(encoding="utf-8")) == {"a": {"en-US": "new"}}


def test_format_cli_missing_file(tmp_path, capsys):
    code = format_strings.main(["--strings", str(tmp_path / "none.json")])
    assert code == 2
    assert "not found" in capsys.readouterr().err


def test_format_cli_refuses_unparsable_catalog(repo, capsys):
    repo.catalog("{ broken")
    code = format_strings.main(["--strings", str(repo.strings)])
    assert code == 1
    assert repo.strings.read_text(encoding="utf-8") == "{ broken"
