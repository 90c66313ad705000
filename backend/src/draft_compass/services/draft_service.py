"""Champ-select session handling on top of the recommendation engine."""
import logging
from dataclasses import dataclass, replace
from typing import Optional

from draft_compass.exceptions import DraftSessionError
from draft_compass.models.draft import AllySlot, DraftContext, DraftUpdate
from draft_compass.models.roster import RosterConfig
from draft_compass.services.pick_recommendation_engine import PickRecommendationEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraftPreferences:
    """User choices that shape recommendations."""

    override_role: Optional[str] = None
    target_archetype: Optional[str] = None
    queue: Optional[str] = None


class DraftService:
    """Turns champ-select session payloads into recommendation updates."""

    def __init__(
        self,
        engine: PickRecommendationEngine,
        roster_config: Optional[RosterConfig] = None,
        preferences: Optional[DraftPreferences] = None,
    ):
        self.engine = engine
        self.roster_config = roster_config
        self.preferences = preferences or DraftPreferences()
        self._current_session: Optional[dict] = None

    def set_roster_config(self, payload: Optional[dict]) -> Optional[RosterConfig]:
        """Validate and install a roster payload (None clears it).

        Raises:
            InvalidRosterConfig: If the payload is malformed.
        """
        self.roster_config = RosterConfig.from_payload(payload) if payload is not None else None
        return self.roster_config

    def update_preferences(self, **prefs) -> Optional[DraftUpdate]:
        """Merge preference changes and re-run the active session if any."""
        self.preferences = replace(self.preferences, **prefs)
        logger.info(f"Updated draft preferences: {self.preferences}")
        if self._current_session is not None:
            return self.handle_session_update(self._current_session)
        return None

    def handle_session_update(self, session: dict) -> DraftUpdate:
        """Process a champ-select session snapshot.

        Raises:
            DraftSessionError: If the payload cannot be interpreted.
        """
        try:
            update = self._process(session)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error processing champ select update: {e}")
            raise DraftSessionError(str(e)) from e

        # Only sessions that processed cleanly are replayed on preference changes
        self._current_session = session
        return update

    def _process(self, session: dict) -> DraftUpdate:
        my_team = session.get("myTeam") or []
        their_team = session.get("theirTeam") or []
        local_cell_id = session.get("localPlayerCellId")

        local_player = next((p for p in my_team if p.get("cellId") == local_cell_id), None)
        assigned_role = (local_player or {}).get("assignedPosition") or "unknown"

        ally_picks = [p["championId"] for p in my_team if p.get("championId", 0) > 0]
        enemy_picks = [p["championId"] for p in their_team if p.get("championId", 0) > 0]
        bans = self.extract_bans(session)
        if bans:
            logger.info(f"Bans detected: {', '.join(str(b) for b in bans)}")

        allies = [
            AllySlot(
                role=p.get("assignedPosition") or "",
                champion_id=p.get("championId", 0),
                cell_id=p.get("cellId"),
                summoner_name=p.get("summonerName") or "",
                is_local_player=p.get("cellId") == local_cell_id,
            )
            for p in my_team
        ]

        context = DraftContext(
            role=self.preferences.override_role or assigned_role,
            ally_picks=ally_picks,
            enemy_picks=enemy_picks,
            banned=bans,
            target_archetype=self.preferences.target_archetype,
            roster_config=self.roster_config,
            allies=allies,
            queue=self.preferences.queue,
        )
        response = self.engine.get_recommendations(context)

        return DraftUpdate(
            phase=(session.get("timer") or {}).get("phase") or "UNKNOWN",
            local_player={
                "cell_id": local_cell_id,
                "role": assigned_role,
                "champion_id": (local_player or {}).get("championId", 0),
            },
            allies=[
                {
                    "cell_id": a.cell_id,
                    "champion_id": a.champion_id,
                    "role": a.role,
                    "summoner_name": a.summoner_name,
                    "is_local_player": a.is_local_player,
                }
                for a in allies
            ],
            enemies=[
                {
                    "cell_id": p.get("cellId"),
                    "champion_id": p.get("championId", 0),
                    "role": p.get("assignedPosition") or "",
                }
                for p in their_team
            ],
            bans=bans,
            recommendations=response.recommendations,
            composition_analysis=response.composition_analysis,
        )

    @staticmethod
    def extract_bans(session: dict) -> list[int]:
        """Collect banned champion ids from every place the client reports them.

        Bans appear as ``{myTeamBans, theirTeamBans}``, as a list of
        ``{championId}`` entries, or as completed "ban" actions.
        """
        bans: list[int] = []

        raw_bans = session.get("bans")
        if isinstance(raw_bans, dict):
            bans.extend(i for i in raw_bans.get("myTeamBans") or [] if i > 0)
            bans.extend(i for i in raw_bans.get("theirTeamBans") or [] if i > 0)
        elif isinstance(raw_bans, list):
            bans.extend(b["championId"] for b in raw_bans if b.get("championId", 0) > 0)

        for group in session.get("actions") or []:
            actions = group if isinstance(group, list) else [group]
            for action in actions:
                champion_id = action.get("championId", 0)
                if (
                    action.get("type") == "ban"
                    and champion_id > 0
                    and action.get("completed")
                    and champion_id not in bans
                ):
                    bans.append(champion_id)
        return bans
