"""Unit tests for the command-line entry point."""

import json

import pytest

from apocaliptyx.cli import build_parser, main

pytestmark = [pytest.mark.unit, pytest.mark.api]


@pytest.fixture
def fixtures_file(tmp_path, monkeypatch):
    # main() writes these through os.environ; registering them restores them afterwards.
    monkeypatch.setenv("SCENARIO_BACKEND", "memory")
    monkeypatch.setenv("SCENARIO_FIXTURE_FILE", "")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    path = tmp_path / "scenarios.json"
    path.write_text(json.dumps([
        {"id": "sc-1", "title": "Bitcoin reaches 100k", "description": "", "status": "ACTIVE",
         "content_hash": "49040bdf"},
        {"id": "sc-2", "title": "Bitcoin hits ATH", "description": "New all time high this year",
         "status": "ACTIVE"},
        {"id": "sc-3", "title": "Soccer match today", "description": "Real Madrid vs Barcelona",
         "status": "ACTIVE"},
    ]), encoding="utf-8")
    return path


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_check_arguments(self):
        args = build_parser().parse_args(["check", "Bitcoin", "--description", "d", "--exclude-id", "sc-1"])
        assert (args.command, args.title, args.description, args.exclude_id) == ("check", "Bitcoin", "d", "sc-1")


class TestMain:
    def test_hash(self, capsys):
        assert main(["hash", "Bitcoin reaches 100k"]) == 0
        assert json.loads(capsys.readouterr().out) == {"contentHash": "49040bdf"}

    def test_check_exact_duplicate(self, fixtures_file, capsys):
        assert main(["--fixtures", str(fixtures_file), "check", "Bitcoin Reaches 100k"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["isDuplicate"] is True
        assert output["exactMatch"] is True
        assert output["similarScenarios"][0]["id"] == "sc-1"

    def test_check_unrelated(self, fixtures_file, capsys):
        assert main(["--fixtures", str(fixtures_file), "check", "Will it rain tomorrow"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["isDuplicate"] is False
        assert output["similarScenarios"] == []

    def test_suggest(self, fixtures_file, capsys):
        assert main(["--fixtures", str(fixtures_file), "suggest", "Soccer match"]) == 0
        assert [s["id"] for s in json.loads(capsys.readouterr().out)] == ["sc-3"]

    def test_backfill(self, fixtures_file, capsys):
        assert main(["--fixtures", str(fixtures_file), "backfill"]) == 0
        assert json.loads(capsys.readouterr().out) == {"updated": 2}

    def test_mark_duplicate_unknown_id(self, fixtures_file, capsys):
        assert main(["--fixtures", str(fixtures_file), "mark-duplicate", "missing", "sc-1"]) == 0
        assert json.loads(capsys.readouterr().out) == {"success": False}

    def test_configuration_issues(self, monkeypatch, capsys):
        monkeypatch.setenv("SCENARIO_BACKEND", "supabase")
        monkeypatch.setenv("SUPABASE_URL", "")
        monkeypatch.setenv("SUPABASE_KEY", "")

        assert main(["check", "Bitcoin"]) == 1
        assert "SUPABASE_URL" in capsys.readouterr().err

    def test_unreadable_fixtures(self, fixtures_file, tmp_path, capsys):
        assert main(["--fixtures", str(tmp_path / "missing.json"), "check", "Bitcoin"]) == 1
        assert "Cannot load scenario fixtures" in capsys.readouterr().err
