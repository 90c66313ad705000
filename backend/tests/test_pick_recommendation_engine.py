"""Tests for pick recommendation engine."""
import pytest

from draft_compass.config import Settings
from draft_compass.models.draft import AllySlot, DraftContext
from draft_compass.models.roster import RosterConfig
from draft_compass.repositories.knowledge_repository import KnowledgeRepository
from draft_compass.services.archetype_service import ArchetypeService, archetype_from_payload
from draft_compass.services.pick_recommendation_engine import PickRecommendationEngine
from draft_compass.services.win_rate_provider import ImportedWinRateProvider


@pytest.fixture
def engine(provider, repository, settings):
    return PickRecommendationEngine(provider, repository, settings=settings)


@pytest.fixture
def wombo():
    """Custom archetype planning Gragas as a flex jungler."""
    return archetype_from_payload({"key": "wombo", "name": "Wombo", "typical_comp": {"jungle": "Gragas*"}})


def _by_name(response):
    return {r.name: r for r in response.recommendations}


def test_uninitialized_engine_returns_empty(provider, settings):
    """No snapshot means no candidates, not an error."""
    engine = PickRecommendationEngine(provider, KnowledgeRepository(), settings=settings)
    assert not engine.is_initialized

    response = engine.get_recommendations(DraftContext(role="mid"))
    assert response.recommendations == []
    assert response.composition_analysis.archetype == "unknown"
    assert response.composition_analysis.tier == "D"


def test_initialize_installs_snapshot(provider, catalog, counters, settings):
    engine = PickRecommendationEngine(provider, settings=settings)
    engine.initialize(catalog, counters)
    assert engine.is_initialized
    assert engine.get_recommendations(DraftContext(role="mid")).recommendations


def test_recommendations_sorted_and_limited(engine):
    """Scores descend and at most recommendation_limit results come back."""
    response = engine.get_recommendations(DraftContext(role="mid"))
    names = [r.name for r in response.recommendations]
    scores = [r.score for r in response.recommendations]

    assert len(names) <= 5
    assert scores == sorted(scores, reverse=True)
    assert names == ["Zed", "Lux", "Annie", "Gragas", "Malphite"]


def test_recommendation_limit_from_settings(provider, repository):
    engine = PickRecommendationEngine(provider, repository, settings=Settings(recommendation_limit=3))
    response = engine.get_recommendations(DraftContext(role="mid"))
    assert [r.name for r in response.recommendations] == ["Zed", "Lux", "Annie"]


def test_base_score_components(engine):
    """Win rate, tier, pick rate and role match add up independently."""
    lux = _by_name(engine.get_recommendations(DraftContext(role="mid")))["Lux"]
    # (0.53 - 0.5) * 50 + 5 (tier A) + 0.10 * 10 + 1 (role)
    assert lux.score == pytest.approx(8.5)
    assert lux.tier == "A"
    assert "High Win Rate (53.0%)" in lux.reasons
    assert "High Tier (A)" in lux.reasons
    assert lux.id == 5
    assert lux.roles == ["mid", "support"]
    assert lux.comp_roles == ["poke", "teamfight", "protect", "anti-engage"]


def test_unavailable_champions_excluded(engine):
    """Banned, ally and enemy picks are never recommended."""
    context = DraftContext(role="mid", ally_picks=["Lux"], enemy_picks=["1"], banned=[8])
    names = [r.name for r in engine.get_recommendations(context).recommendations]
    assert "Lux" not in names
    assert "Annie" not in names
    assert "Zed" not in names
    assert set(names) == {"Gragas", "Malphite"}


def test_role_filter_uses_normalized_position(engine):
    """Client positions are normalized before filtering."""
    response = engine.get_recommendations(DraftContext(role="UTILITY"))
    assert {r.name for r in response.recommendations} == {"Lulu", "Lux", "Annie"}


def test_role_requires_imported_data(repository, settings):
    """With a position set, champions without data for it are skipped."""
    provider = ImportedWinRateProvider({"soloq": {"mid": {"Annie": {"winRate": 0.51, "matches": 10}}}})
    engine = PickRecommendationEngine(provider, repository, settings=settings)
    response = engine.get_recommendations(DraftContext(role="mid"))
    assert [r.name for r in response.recommendations] == ["Annie"]


def test_no_role_uses_every_champion_with_neutral_stats(repository, settings):
    engine = PickRecommendationEngine(ImportedWinRateProvider(), repository, settings=Settings(recommendation_limit=20))
    response = engine.get_recommendations(DraftContext())
    assert len(response.recommendations) == 10
    assert all(r.win_rate == 0.5 for r in response.recommendations)


def test_equal_scores_keep_catalog_order(repository, settings):
    """Ties are broken by catalog order."""
    engine = PickRecommendationEngine(ImportedWinRateProvider(), repository, settings=settings)
    response = engine.get_recommendations(DraftContext())
    assert {r.score for r in response.recommendations} == {0.0}
    assert [r.name for r in response.recommendations] == ["Annie", "Garen", "Darius", "Malphite", "Lux"]


def test_malformed_imported_entries_do_not_raise(repository, settings):
    provider = ImportedWinRateProvider({
        "soloq": {"mid": {"Annie": "0.52", "Lux": {"winRate": "0.53", "matches": "n/a"}}}
    })
    engine = PickRecommendationEngine(provider, repository, settings=settings)
    response = engine.get_recommendations(DraftContext(role="mid"))
    assert [r.name for r in response.recommendations] == ["Lux"]
    assert response.recommendations[0].win_rate == 0.53


def test_counter_bonus_and_reason(repository, settings):
    """A 55% matchup is worth five points."""
    engine = PickRecommendationEngine(ImportedWinRateProvider(), repository, settings=settings)
    response = engine.get_recommendations(DraftContext(enemy_picks=[8]))
    lux = _by_name(response)["Lux"]

    assert lux.analysis["counter"] == pytest.approx(5.0)
    assert lux.score == pytest.approx(5.0)
    assert "Counters Zed (55% WR)" in lux.reasons
    assert response.recommendations[0].name == "Lux"


def test_countered_reason(repository, settings):
    engine = PickRecommendationEngine(ImportedWinRateProvider(), repository, settings=Settings(recommendation_limit=20))
    annie = _by_name(engine.get_recommendations(DraftContext(enemy_picks=["Zed"])))["Annie"]
    assert annie.analysis["counter"] == pytest.approx(-5.0)
    assert "Countered by Zed (45% WR)" in annie.reasons


def test_dynamic_counters_override_static(repository, settings):
    """Scraped matchup data wins over the curated table."""
    provider = ImportedWinRateProvider({
        "soloq": {"mid": {"Annie": {"winRate": 0.5, "matches": 500, "counters": {"Zed": 0.58}}}}
    })
    engine = PickRecommendationEngine(provider, repository, settings=settings)
    annie = _by_name(engine.get_recommendations(DraftContext(role="mid", enemy_picks=[8])))["Annie"]
    assert annie.analysis["counter"] == pytest.approx(8.0)
    assert "Counters Zed (58% WR)" in annie.reasons


def test_synergy_bonus_and_reason(engine):
    lulu = _by_name(engine.get_recommendations(DraftContext(role="support", ally_picks=["Jinx"])))["Lulu"]
    assert lulu.analysis["synergy"] == pytest.approx(5.0)
    assert "Synergy with Jinx (55% WR)" in lulu.reasons


def test_fit_with_detected_composition(engine):
    """Allies Malphite + Ornn read as hard engage; Garen fits it."""
    response = engine.get_recommendations(DraftContext(role="top", ally_picks=["Malphite", "Ornn"]))
    assert response.composition_analysis.archetype == "hardEngage"
    assert response.composition_analysis.champion_count == 2

    garen = _by_name(response)["Garen"]
    assert garen.analysis["archetype"] == 5.0
    assert "Fits Hard Engage comp" in garen.reasons


def test_composition_tier_uses_aggregate_win_rates(engine):
    analysis = engine.analyze_team_composition(["Malphite", "Ornn"])
    assert analysis.archetype == "hardEngage"
    assert analysis.tier == "S"


def test_target_archetype_overrides_detection(engine):
    """A requested archetype is used even when allies suggest another."""
    response = engine.get_recommendations(
        DraftContext(role="top", ally_picks=["Malphite", "Ornn"], target_archetype="poke")
    )
    garen = _by_name(response)["Garen"]
    assert garen.analysis["archetype"] == 0.0
    assert not any("Fits" in reason for reason in garen.reasons)


def test_target_archetype_fit_reason(engine):
    garen = _by_name(engine.get_recommendations(DraftContext(role="top", target_archetype="hardEngage")))["Garen"]
    assert garen.analysis["archetype"] == 5.0
    assert "Fits target Hard Engage comp" in garen.reasons


def test_unknown_target_gives_no_fit(engine):
    response = engine.get_recommendations(
        DraftContext(role="top", ally_picks=["Malphite", "Ornn"], target_archetype="nonexistent")
    )
    assert all(r.analysis["archetype"] == 0.0 for r in response.recommendations)


def test_auto_target_uses_detection(engine):
    response = engine.get_recommendations(
        DraftContext(role="top", ally_picks=["Malphite", "Ornn"], target_archetype="auto")
    )
    assert "Fits Hard Engage comp" in _by_name(response)["Garen"].reasons


@pytest.mark.parametrize("ally_picks", [[], ["Annie"], ["Annie", "Lux"]])
def test_flex_priority_early_in_draft(engine, wombo, ally_picks):
    """Planned flex picks get +70 while at most two allies have picked."""
    context = DraftContext(role="jungle", ally_picks=ally_picks, target_archetype_def=wombo)
    gragas = _by_name(engine.get_recommendations(context))["Gragas"]
    # 0.04 * 10 pick rate + 1 role + 20 planned + 50 flex
    assert gragas.score == pytest.approx(71.4)
    assert "Planned Pick" in gragas.reasons
    assert "★ FLEX PRIORITY" in gragas.reasons


def test_flex_priority_expires(engine, wombo):
    """With three allies locked in only the planned pick bonus remains."""
    context = DraftContext(role="jungle", ally_picks=["Annie", "Lux", "Jinx"], target_archetype_def=wombo)
    gragas = _by_name(engine.get_recommendations(context))["Gragas"]
    assert gragas.score == pytest.approx(21.4)
    assert "Planned Pick" in gragas.reasons
    assert "★ FLEX PRIORITY" not in gragas.reasons


def test_planned_pick_by_archetype_name(provider, repository, settings, wombo):
    """A custom archetype named in the context supplies its planned lineup."""
    engine = PickRecommendationEngine(provider, repository, ArchetypeService([wombo]), settings=settings)
    gragas = _by_name(engine.get_recommendations(DraftContext(role="jungle", target_archetype="Wombo")))["Gragas"]
    assert gragas.score == pytest.approx(71.4)


def test_planned_pick_other_role_ignored(engine, wombo):
    gragas = _by_name(engine.get_recommendations(DraftContext(role="mid", target_archetype_def=wombo)))["Gragas"]
    assert "Planned Pick" not in gragas.reasons


def test_roster_main_favorite(engine):
    roster = RosterConfig.from_payload({"myRole": "mid", "roster": {"mid": {"favorites": ["Annie"]}}})
    response = engine.get_recommendations(DraftContext(role="middle", roster_config=roster))
    annie = response.recommendations[0]
    assert annie.name == "Annie"
    assert annie.score == pytest.approx(19.0)
    assert "Your Main" in annie.reasons


def test_roster_teammate_favorite(engine):
    roster = RosterConfig.from_payload({"myRole": "top", "roster": {"mid": {"favorites": ["Annie"]}}})
    annie = _by_name(engine.get_recommendations(DraftContext(role="mid", roster_config=roster)))["Annie"]
    assert annie.score == pytest.approx(9.0)
    assert "Teammate Favorite" in annie.reasons


def test_flex_mode_pool_synergy(engine):
    """Favorites of teammates who have not picked yet add synergy value."""
    roster = RosterConfig.from_payload({
        "myRole": "mid",
        "gameMode": "flex",
        "roster": {"mid": {"favorites": []}, "support": {"favorites": ["Lulu"]}},
    })
    allies = [AllySlot(role="MIDDLE", is_local_player=True), AllySlot(role="UTILITY")]
    annie = _by_name(engine.get_recommendations(DraftContext(role="mid", roster_config=roster, allies=allies)))["Annie"]
    # 4.0 base + (0.54 - 0.5) * 20
    assert annie.score == pytest.approx(4.8)
    assert "Synergy with team pool" in annie.reasons


def test_flex_mode_pool_ignores_locked_roles(engine):
    roster = RosterConfig.from_payload({
        "myRole": "mid",
        "gameMode": "flex",
        "roster": {"mid": {"favorites": []}, "support": {"favorites": ["Lulu"]}},
    })
    allies = [AllySlot(role="MIDDLE", is_local_player=True), AllySlot(role="UTILITY", champion_id=5)]
    annie = _by_name(engine.get_recommendations(DraftContext(role="mid", roster_config=roster, allies=allies)))["Annie"]
    assert annie.score == pytest.approx(4.0)
    assert "Synergy with team pool" not in annie.reasons


def test_synthetic_tier_when_provider_has_none(engine):
    gragas = _by_name(engine.get_recommendations(DraftContext(role="mid")))["Gragas"]
    assert gragas.tier == "D"


@pytest.mark.parametrize("score,tier", [(25, "S+"), (20, "S"), (15, "A"), (10, "B"), (5, "C"), (4.9, "D"), (-3, "D")])
def test_calculate_tier(score, tier):
    assert PickRecommendationEngine.calculate_tier(score) == tier


def test_response_serializes(engine):
    data = engine.get_recommendations(DraftContext(role="mid")).to_dict()
    assert len(data["recommendations"]) == 5
    assert data["recommendations"][0]["name"] == "Zed"
    assert data["composition_analysis"]["archetype"] == "unknown"
