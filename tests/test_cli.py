"""Tests for the command line entry point."""

from pathlib import Path
from typing import Any, List

import orjson
import pytest

from rmmz_index.__main__ import main, options_from_json, parse_where
from rmmz_index.settings import AppSettings


@pytest.fixture
def run(settings_file: Path, project: Path, capsys: pytest.CaptureFixture[str]):
    """Run the CLI against the synthetic project; returns (status, stdout, stderr)."""

    def _run(*args: str, with_project: bool = True):
        argv: List[str] = ["--settings", str(settings_file)]
        if with_project:
            argv += ["--project", str(project)]
        status = main(argv + list(args))
        captured = capsys.readouterr()
        return status, captured.out, captured.err

    return _run


def as_json(out: str) -> Any:
    return orjson.loads(out)


class TestArgumentHelpers:
    """Test parsing helpers."""

    def test_parse_where(self) -> None:
        """Test key=value pairs are parsed, values as JSON when possible."""
        assert parse_where(["classId=2", "name=Hero", "flag=true"]) == {
            "classId": 2,
            "name": "Hero",
            "flag": True,
        }
        assert parse_where(None) == {}

    def test_parse_where_invalid(self) -> None:
        """Test a pair without '=' is rejected."""
        with pytest.raises(ValueError):
            parse_where(["classId"])

    def test_options_from_json(self) -> None:
        """Test the JSON predicate maps onto SearchOptions."""
        options = options_from_json('{"types": ["enemy"], "idRange": {"min": 5}, "limit": 3}')
        assert options.types == ["enemy"]
        assert options.id_min == 5
        assert options.id_max is None
        assert options.limit == 3
        assert options.where == {}

    def test_options_from_json_rejects_arrays(self) -> None:
        """Test a non-object query is rejected."""
        with pytest.raises(ValueError):
            options_from_json("[1, 2]")

    @pytest.mark.parametrize(
        "query",
        [
            '{"types": "enemy"}',
            '{"types": ["enemy", 3]}',
            '{"idRange": [5]}',
            '{"idRange": {"min": "5"}}',
            '{"where": ["classId", 2]}',
            '{"limit": true}',
        ],
    )
    def test_options_from_json_rejects_wrong_shapes(self, query: str) -> None:
        """Test malformed predicate fields raise ValueError instead of misbehaving."""
        with pytest.raises(ValueError):
            options_from_json(query)


class TestDatabaseCommands:
    """Test database subcommands."""

    def test_stats(self, run) -> None:
        """Test stats prints per-collection counts."""
        status, out, _ = run("stats")
        assert status == 0
        stats = as_json(out)
        assert stats["total"] == 13
        assert stats["enemies"] == 3

    def test_search(self, run) -> None:
        """Test search with type and id range flags."""
        status, out, _ = run("search", "--types", "enemy", "--id-min", "5", "--id-max", "10")
        assert status == 0
        assert [(r["type"], r["id"], r["name"]) for r in as_json(out)] == [("enemy", 6, "Bat")]

    def test_search_where(self, run) -> None:
        """Test search with a --where equality filter."""
        status, out, _ = run("search", "--where", "classId=2")
        assert status == 0
        assert [(r["type"], r["id"]) for r in as_json(out)] == [("actor", 2)]

    def test_search_negative_limit(self, run) -> None:
        """Test a negative limit is reported as an error."""
        status, _, err = run("search", "--limit", "-1")
        assert status == 1
        assert "limit" in err

    def test_query(self, run) -> None:
        """Test query with a JSON predicate."""
        status, out, _ = run("query", '{"types": ["enemy"], "idRange": {"min": 5, "max": 10}}')
        assert status == 0
        assert [r["id"] for r in as_json(out)] == [6]

    def test_query_invalid_json(self, run) -> None:
        """Test a query that is not JSON exits with status 1."""
        status, _, err = run("query", "{types")
        assert status == 1
        assert err.startswith("Error:")

    def test_query_bad_id_range(self, run) -> None:
        """Test a non-object idRange is a usage error, not an unexpected one."""
        status, _, err = run("query", '{"idRange": [5]}')
        assert status == 1
        assert "idRange" in err
        assert "unexpected" not in err

    def test_get(self, run) -> None:
        """Test get prints the record."""
        status, out, _ = run("get", "enemy", "6")
        assert status == 0
        assert as_json(out)["name"] == "Bat"

    def test_get_missing(self, run) -> None:
        """Test get on a missing id exits with status 1."""
        status, out, err = run("get", "enemy", "99")
        assert status == 1
        assert out == ""
        assert "No enemy with id 99" in err

    def test_get_unknown_type(self, run) -> None:
        """Test get on an unknown type exits with status 1."""
        status, _, err = run("get", "spell", "1")
        assert status == 1
        assert "Unknown database type: spell" in err

    def test_find(self, run) -> None:
        """Test find matches names case-insensitively."""
        status, out, _ = run("find", "potion")
        assert status == 0
        assert [r["name"] for r in as_json(out)] == ["Potion", "Hi-Potion"]

    def test_db_context(self, run) -> None:
        """Test db-context prints the Markdown report."""
        status, out, _ = run("db-context")
        assert status == 0
        assert out.startswith("# Database Context Report")


class TestAssetCommands:
    """Test asset subcommands."""

    def test_assets_summary(self, run) -> None:
        """Test assets --summary omits the per-asset list."""
        status, out, _ = run("assets", "--summary")
        assert status == 0
        report = as_json(out)
        assert report["totalAssets"] == 7
        assert report["assetsByUsage"] == {"used": 5, "unused": 2}
        assert "assets" not in report

    def test_assets_full(self, run) -> None:
        """Test assets includes usage and image sizes."""
        status, out, _ = run("assets")
        assert status == 0
        assets = {a["filename"]: a for a in as_json(out)["assets"]}
        assert assets["Hero1.png"]["usedBy"] == {"actor": [1]}
        assert assets["Hero1.png"]["width"] == 144

    def test_asset_context(self, run) -> None:
        """Test asset-context prints the Markdown report."""
        status, out, _ = run("asset-context")
        assert status == 0
        assert out.startswith("# Asset Context Report")

    def test_asset_mapping(self, run) -> None:
        """Test asset-mapping lists consumers per file."""
        status, out, _ = run("asset-mapping")
        assert status == 0
        mapping = as_json(out)
        assert mapping["Hero1.png"] == ["Actor 1"]
        assert mapping["Orphan.png"] == []

    def test_remove_unused_dry_run(self, run, project: Path) -> None:
        """Test remove-unused lists files without deleting them."""
        status, out, _ = run("remove-unused")
        assert status == 0
        result = as_json(out)
        assert result["dryRun"] is True
        assert sorted(result["removed"]) == ["Cursor.ogg", "Orphan.png"]
        assert (project / "audio" / "se" / "Cursor.ogg").exists()

    def test_remove_unused_apply(self, run, project: Path) -> None:
        """Test remove-unused --apply deletes the unused files."""
        status, out, _ = run("remove-unused", "--apply")
        assert status == 0
        assert as_json(out)["dryRun"] is False
        assert not (project / "audio" / "se" / "Cursor.ogg").exists()

    def test_project_size(self, run) -> None:
        """Test project-size reports bytes and formatted sizes."""
        status, out, _ = run("project-size")
        assert status == 0
        sizes = as_json(out)
        assert sizes["bytes"]["audio"] == 2560
        assert sizes["formatted"]["audio"] == "2.5 KB"


class TestProjectSelection:
    """Test project resolution and exit codes."""

    def test_invalid_project(self, settings_file: Path, tmp_path: Path, capsys) -> None:
        """Test an invalid project exits with status 2."""
        status = main(["--settings", str(settings_file), "--project", str(tmp_path), "stats"])
        assert status == 2
        assert "Game.rpgproject" in capsys.readouterr().err

    def test_no_project(self, run) -> None:
        """Test running without any project exits with status 2."""
        status, _, err = run("stats", with_project=False)
        assert status == 2
        assert "No project path" in err

    def test_remembers_last_project(self, run, settings_file: Path, project: Path) -> None:
        """Test the last project is reused and added to recent projects."""
        assert run("stats")[0] == 0
        status, out, _ = run("stats", with_project=False)
        assert status == 0
        assert as_json(out)["total"] == 13

        settings = AppSettings(settings_file=settings_file)
        assert settings.recent_projects == [str(project)]
