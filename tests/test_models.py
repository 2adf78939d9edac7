import pytest
from pydantic import ValidationError

from depthchart.models import DepthChart, Player, Team


def test_player_identity_ignores_name_case():
    assert Player("Tom Brady", 12) == Player("TOM BRADY", 12)
    assert hash(Player("Tom Brady", 12)) == hash(Player("tom brady", 12))
    assert Player("Tom Brady", 12) != Player("Tom Brady", 11)
    assert len({Player("Tom Brady", 12), Player("tom brady", 12)}) == 1


def test_player_is_frozen():
    player = Player(name="Tom Brady", number=12)

    with pytest.raises((TypeError, ValidationError)):
        player.number = 10  # type: ignore[misc]


def test_player_requires_name():
    with pytest.raises(ValidationError):
        Player(name="", number=12)


def test_player_serialises_name_and_number():
    assert Player("Tom Brady", 12).model_dump() == {"name": "Tom Brady", "number": 12}
    assert str(Player("Tom Brady", 12)) == "Tom Brady #12"


def test_team_model():
    team = Team(id="t1", name="Buccaneers", sport="NFL")
    assert team.sport == "NFL"


def test_depth_chart_keys_are_case_insensitive_and_sorted():
    chart = DepthChart({"rb": [Player("Leonard Fournette", 7)], "QB": [Player("Tom Brady", 12)]})

    assert list(chart) == ["QB", "RB"]
    assert "qb" in chart
    assert chart["Rb"] == [Player("Leonard Fournette", 7)]
    assert chart.to_dict() == {
        "QB": [{"name": "Tom Brady", "number": 12}],
        "RB": [{"name": "Leonard Fournette", "number": 7}],
    }


def test_depth_chart_returns_copies():
    chart = DepthChart({"QB": [Player("Tom Brady", 12)]})
    chart["QB"].append(Player("Blaine Gabbert", 11))

    assert len(chart["QB"]) == 1
    assert len(DepthChart()) == 0
