"""Tests for champ-select session handling."""
import pytest

from draft_compass.exceptions import DraftSessionError, InvalidRosterConfig
from draft_compass.services.draft_service import DraftService
from draft_compass.services.pick_recommendation_engine import PickRecommendationEngine


@pytest.fixture
def service(provider, repository, settings):
    return DraftService(PickRecommendationEngine(provider, repository, settings=settings))


@pytest.fixture
def session():
    """Local player in mid, Lulu locked for support, Zed on the enemy team."""
    return {
        "localPlayerCellId": 0,
        "timer": {"phase": "BAN_PICK"},
        "myTeam": [
            {"cellId": 0, "assignedPosition": "middle", "championId": 0, "summonerName": "Me"},
            {"cellId": 1, "assignedPosition": "utility", "championId": 7, "summonerName": "Duo"},
        ],
        "theirTeam": [
            {"cellId": 5, "assignedPosition": "", "championId": 8},
            {"cellId": 6, "assignedPosition": "", "championId": 0},
        ],
        "bans": {"myTeamBans": [5, 0], "theirTeamBans": [-1]},
        "actions": [[
            {"type": "ban", "championId": 6, "completed": True},
            {"type": "ban", "championId": 5, "completed": True},
            {"type": "ban", "championId": 1, "completed": False},
            {"type": "pick", "championId": 7, "completed": True},
        ]],
    }


def test_session_update(service, session):
    update = service.handle_session_update(session)

    assert update.phase == "BAN_PICK"
    assert update.local_player == {"cell_id": 0, "role": "middle", "champion_id": 0}
    assert update.bans == [5, 6]
    assert len(update.allies) == 2
    assert update.allies[0]["is_local_player"]
    assert update.enemies[0]["champion_id"] == 8

    names = [r.name for r in update.recommendations]
    assert set(names) == {"Annie", "Malphite", "Gragas"}
    assert names[0] == "Annie"
    assert update.composition_analysis.champion_count == 1


def test_session_reasons_reflect_picks(service, session):
    annie = service.handle_session_update(session).recommendations[0]
    assert "Synergy with Lulu (54% WR)" in annie.reasons
    assert "Countered by Zed (45% WR)" in annie.reasons


def test_list_form_bans_and_flat_actions():
    session = {
        "bans": [{"championId": 3}, {"championId": 0}],
        "actions": [{"type": "ban", "championId": 3, "completed": True}, {"type": "ban", "championId": 4, "completed": True}],
    }
    assert DraftService.extract_bans(session) == [3, 4]


def test_missing_local_player(service, session):
    session["localPlayerCellId"] = 42
    update = service.handle_session_update(session)
    assert update.local_player["role"] == "unknown"
    # Without a position every available champion is a candidate
    assert len(update.recommendations) == 5


def test_missing_phase(service):
    update = service.handle_session_update({"myTeam": [], "theirTeam": []})
    assert update.phase == "UNKNOWN"
    assert update.bans == []


def test_update_preferences_reruns_session(service, session):
    service.handle_session_update(session)

    update = service.update_preferences(override_role="top")
    assert update is not None
    assert update.recommendations
    assert all("top" in r.roles for r in update.recommendations)


def test_update_preferences_without_session(service):
    assert service.update_preferences(target_archetype="poke") is None
    assert service.preferences.target_archetype == "poke"


def test_roster_config_applied(service, session):
    service.set_roster_config({"myRole": "mid", "roster": {"mid": {"favorites": ["Gragas"]}}})
    gragas = service.handle_session_update(session).recommendations[0]
    assert gragas.name == "Gragas"
    assert "Your Main" in gragas.reasons


def test_invalid_roster_config(service):
    with pytest.raises(InvalidRosterConfig):
        service.set_roster_config({"roster": {"nowhere": {"favorites": []}}})
    assert service.roster_config is None


def test_malformed_session_raises(service):
    with pytest.raises(DraftSessionError):
        service.handle_session_update({"myTeam": ["not a player"]})


def test_malformed_session_not_replayed(service, session):
    """A rejected session does not replace the last good one."""
    with pytest.raises(DraftSessionError):
        service.handle_session_update({"myTeam": ["not a player"]})
    assert service.update_preferences(override_role="top") is None

    service.handle_session_update(session)
    with pytest.raises(DraftSessionError):
        service.handle_session_update({"theirTeam": [{"championId": None}]})
    update = service.update_preferences(override_role="top")
    assert update.phase == "BAN_PICK"
