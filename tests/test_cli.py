import json
import sqlite3

import pytest

from depthchart.cli import main
from depthchart.persistence import DepthChartStore


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cli.sqlite"


@pytest.fixture
def team_id(db_path) -> str:
    return DepthChartStore(db_path).create_team(name="Buccaneers", sport="NFL", team_id="tb").id


def _run(db_path, *args: str) -> int:
    return main(["--db", str(db_path), *args])


def test_create_team_and_list(db_path, capsys):
    assert _run(db_path, "create-team", "--name", "Buccaneers", "--sport", "nfl", "--id", "tb") == 0
    assert _run(db_path, "teams") == 0

    out = capsys.readouterr().out
    assert "Created team tb (Buccaneers, NFL)" in out
    assert "tb\tBuccaneers\tNFL" in out


def test_add_remove_and_backups(db_path, team_id, capsys):
    assert _run(db_path, "add", team_id, "qb", "Tom Brady", "12") == 0
    assert _run(db_path, "add", team_id, "QB", "Blaine Gabbert", "11") == 0
    assert _run(db_path, "add", team_id, "QB", "Jimmy Garoppolo", "10", "--depth", "1") == 0
    capsys.readouterr()

    assert _run(db_path, "backups", team_id, "QB", "Tom Brady", "12") == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["0: Jimmy Garoppolo #10", "1: Blaine Gabbert #11"]

    assert _run(db_path, "remove", team_id, "QB", "Jimmy Garoppolo", "10") == 0
    assert _run(db_path, "remove", team_id, "QB", "Josh Rosen", "3") == 0
    out = capsys.readouterr().out
    assert "Removed Jimmy Garoppolo #10 from QB" in out
    assert "Josh Rosen #3 is not listed at QB" in out

    assert _run(db_path, "chart", team_id) == 0
    chart = json.loads(capsys.readouterr().out)
    assert chart == {
        "QB": [
            {"name": "Tom Brady", "number": 12},
            {"name": "Blaine Gabbert", "number": 11},
        ]
    }


def test_domain_errors_exit_with_status_one(db_path, team_id, capsys):
    assert _run(db_path, "add", team_id, "PG", "Tom Brady", "12") == 1
    assert "error: Position PG is not valid for NFL." in capsys.readouterr().err

    assert _run(db_path, "add", "missing", "QB", "Tom Brady", "12") == 1
    assert "does not exist" in capsys.readouterr().err


def test_positions_file_extends_allow_list(db_path, tmp_path, capsys):
    positions = tmp_path / "positions.json"
    positions.write_text(json.dumps({"sports": {"XFL": ["QB", "RB"]}}), encoding="utf-8")
    DepthChartStore(db_path).create_team(name="Renegades", sport="XFL", team_id="ren")

    assert _run(db_path, "--positions-file", str(positions), "add", "ren", "RB", "Cameron Artis-Payne", "34") == 0
    assert _run(db_path, "add", "ren", "RB", "Cameron Artis-Payne", "34") == 1


def test_rejects_non_positive_number(db_path, team_id):
    with pytest.raises(SystemExit):
        _run(db_path, "add", team_id, "QB", "Tom Brady", "0")


def test_db_accepts_file_uri(tmp_path, capsys):
    uri = f"file:{tmp_path / 'uri.sqlite'}"
    assert main(["--db", uri, "create-team", "--name", "Buccaneers", "--sport", "NFL", "--id", "tb"]) == 0

    assert [team.id for team in DepthChartStore(tmp_path / "uri.sqlite").list_teams()] == ["tb"]


def test_store_errors_exit_with_status_one(db_path, team_id, monkeypatch, capsys):
    def broken(self):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(DepthChartStore, "list_teams", broken)
    assert _run(db_path, "teams") == 1
    assert "error: database failure: database is locked" in capsys.readouterr().err

    def broken_create(self, **kwargs):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(DepthChartStore, "create_team", broken_create)
    assert _run(db_path, "create-team", "--name", "Saints", "--sport", "NFL") == 1
    assert "error: database failure: disk I/O error" in capsys.readouterr().err
