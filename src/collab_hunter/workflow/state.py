from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from collab_hunter.models.missions import MatchConfig, MissionKind
from collab_hunter.models.provenance import GroundingMetadata
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.ip_profile_outputs import IPProfile
from collab_hunter.structured_outputs.match_outputs import MatchRecommendation
from collab_hunter.structured_outputs.trend_outputs import TrendItem


class Phase(str, Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    REVIEWING = "REVIEWING"
    TREND_RESULTS_READY = "TREND_RESULTS_READY"
    IP_PROFILE_READY = "IP_PROFILE_READY"
    MATCH_RESULTS_READY = "MATCH_RESULTS_READY"
    COLLECTION_LIST = "COLLECTION_LIST"
    COLLECTION_DETAIL = "COLLECTION_DETAIL"
    ERROR = "ERROR"


@dataclass(frozen=True)
class SessionState:
    """
    The whole transient session. Never mutated: every transition builds a new
    value with `evolve` (or a fresh SessionState) and swaps it in.
    """

    phase: Phase = Phase.IDLE
    mission_kind: Optional[MissionKind] = None
    generation: int = 0

    review_cases: List[Case] = field(default_factory=list)
    trend_topic: str = ""
    trend_results: List[TrendItem] = field(default_factory=list)
    current_ip_profile: Optional[IPProfile] = None
    current_match_config: Optional[MatchConfig] = None
    match_recommendations: List[MatchRecommendation] = field(default_factory=list)
    current_metadata: Optional[GroundingMetadata] = None
    error: Optional[str] = None

    def evolve(self, **changes) -> "SessionState":
        return replace(self, **changes)

    def cleared(self, phase: Phase) -> "SessionState":
        """Same generation, all ephemeral mission data dropped."""
        return SessionState(phase=phase, generation=self.generation)

    @property
    def is_fetching(self) -> bool:
        return self.phase == Phase.FETCHING
