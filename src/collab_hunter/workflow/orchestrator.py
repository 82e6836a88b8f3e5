"""
The session state machine: fetch -> review -> commit.

The orchestrator is the only writer of SessionState. Each named operation
checks the current phase, builds a new SessionState and swaps it in. A mission
result is applied only if the generation it was started under is still current:
`reset()` or a newer `start_mission()` bump the generation, and the older
result is then dropped when it arrives.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from collab_hunter.common.errors import InvalidTransitionError, MissionFailed
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.extraction.pipeline import ExtractionPipeline, MissionResult
from collab_hunter.models.missions import MissionKind
from collab_hunter.models.notebooks import Collection, CollectionType
from collab_hunter.notebooks.dedupe import ReviewCandidate, flag_duplicates
from collab_hunter.notebooks.store import CollectionStore
from collab_hunter.prompts.query_builders import MissionQuery, build_query
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.trend_outputs import TrendItem
from collab_hunter.workflow.state import Phase, SessionState

logger = get_logger(__name__)

FAILURE_MESSAGES: Dict[MissionKind, str] = {
    MissionKind.BRAND_SEARCH: "Failed to fetch cases. Please try again.",
    MissionKind.TREND: "Failed to analyze trends.",
    MissionKind.IP_SCOUT: "Failed to scout IP.",
    MissionKind.MATCHMAKING: "Failed to find matches.",
}

RESULT_PHASES: Dict[MissionKind, Phase] = {
    MissionKind.BRAND_SEARCH: Phase.REVIEWING,
    MissionKind.TREND: Phase.TREND_RESULTS_READY,
    MissionKind.IP_SCOUT: Phase.IP_PROFILE_READY,
    MissionKind.MATCHMAKING: Phase.MATCH_RESULTS_READY,
}


def describe_failure(kind: MissionKind, error: MissionFailed) -> str:
    cause = error.cause
    return f"{FAILURE_MESSAGES[kind]} ({type(cause).__name__}: {cause})"


class WorkflowOrchestrator:
    def __init__(self, pipeline: ExtractionPipeline, store: CollectionStore) -> None:
        self.pipeline = pipeline
        self.store = store
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def has_unsaved_work(self) -> bool:
        """True while a mission is in flight or reviewed cases are waiting to be committed."""
        return self._state.phase in (Phase.FETCHING, Phase.REVIEWING)

    def _require(self, operation: str, *phases: Phase) -> None:
        if self._state.phase not in phases:
            raise InvalidTransitionError(operation, self._state.phase.value)

    def _require_not_fetching(self, operation: str) -> None:
        if self._state.phase == Phase.FETCHING:
            raise InvalidTransitionError(operation, self._state.phase.value)

    # ------------------------------------------------------------------
    # Missions
    # ------------------------------------------------------------------

    def preview_query(self, config: Any) -> MissionQuery:
        return build_query(config)

    def _result_state(self, config: Any, result: MissionResult, generation: int) -> SessionState:
        kind = config.mission_kind
        state = SessionState(
            phase=RESULT_PHASES[kind],
            mission_kind=kind,
            generation=generation,
            current_metadata=result.metadata,
        )
        if kind == MissionKind.BRAND_SEARCH:
            return state.evolve(review_cases=list(result.cases))
        if kind == MissionKind.TREND:
            return state.evolve(trend_topic=config.topic, trend_results=list(result.trends))
        if kind == MissionKind.IP_SCOUT:
            return state.evolve(current_ip_profile=result.ip_profile)
        return state.evolve(current_match_config=config, match_recommendations=list(result.recommendations))

    async def start_mission(self, config: Any, instruction_text: Optional[str] = None) -> SessionState:
        """
        Run a mission and move to its result phase (or ERROR).

        Incomplete configs raise ConfigError before anything changes. Allowed
        from any phase; a newer start supersedes an in-flight one.
        """
        config.require_complete()
        kind = config.mission_kind
        generation = self._state.generation + 1

        fetching = SessionState(phase=Phase.FETCHING, mission_kind=kind, generation=generation)
        if kind == MissionKind.TREND:
            fetching = fetching.evolve(trend_topic=config.topic)
        elif kind == MissionKind.MATCHMAKING:
            fetching = fetching.evolve(current_match_config=config)
        self._state = fetching

        try:
            result = await self.pipeline.run_mission(config, instruction_text)
        except MissionFailed as e:
            return self._failed(fetching, e)
        except Exception as e:
            # errors the retry policy does not handle (client bugs, SDK misuse)
            logger.exception(f"{kind.value} mission raised an unexpected {type(e).__name__}")
            return self._failed(fetching, MissionFailed(e))

        if self._state.generation != generation:
            logger.info(f"Discarding stale {kind.value} result (generation {generation}, current {self._state.generation})")
            return self._state

        self._state = self._result_state(config, result, generation)
        return self._state

    def _failed(self, fetching: SessionState, error: MissionFailed) -> SessionState:
        kind = fetching.mission_kind
        if self._state.generation != fetching.generation:
            logger.info(f"Discarding failure of superseded {kind.value} mission (generation {fetching.generation})")
            return self._state
        logger.error(f"{kind.value} mission failed: {error.cause}")
        self._state = fetching.evolve(phase=Phase.ERROR, error=describe_failure(kind, error))
        return self._state

    def reset(self) -> SessionState:
        """Back to IDLE from anywhere. An in-flight mission's result will be dropped."""
        self._state = SessionState(phase=Phase.IDLE, generation=self._state.generation + 1)
        return self._state

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def review_candidates(self) -> List[ReviewCandidate]:
        """Pending review cases with duplicate flags against the notebook a confirm would target."""
        target = self.store.resolve_case_target()
        existing: Sequence[Case] = [] if target.create else self.store.get(target.collection_id).cases
        return flag_duplicates(self._state.review_cases, existing)

    async def confirm_review(self, selected: Sequence[Case]) -> Collection:
        self._require("confirm_review", Phase.REVIEWING)
        notebook = await self.store.commit_review(selected)
        self._state = self._state.cleared(Phase.COLLECTION_DETAIL)
        return notebook

    def discard_review(self) -> SessionState:
        self._require("discard_review", Phase.REVIEWING)
        phase = Phase.COLLECTION_DETAIL if self.store.active_collection is not None else Phase.COLLECTION_LIST
        self._state = self._state.cleared(phase)
        return self._state

    async def save_selected_trends(self, selected: Sequence[TrendItem]) -> Collection:
        self._require("save_selected_trends", Phase.TREND_RESULTS_READY)
        report = await self.store.add_report(self._state.trend_topic, selected)
        self._state = self._state.cleared(Phase.COLLECTION_DETAIL)
        return report

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def open_collection_list(self) -> SessionState:
        self._require_not_fetching("open_collection_list")
        self._state = self._state.evolve(phase=Phase.COLLECTION_LIST, error=None)
        return self._state

    async def open_collection(self, collection_id: str) -> Collection:
        self._require_not_fetching("open_collection")
        collection = await self.store.set_active(collection_id)
        self._state = self._state.evolve(phase=Phase.COLLECTION_DETAIL, error=None)
        return collection

    async def create_collection(self, kind: CollectionType = "notebook", name: Optional[str] = None) -> Collection:
        self._require_not_fetching("create_collection")
        collection = await self.store.create(kind, name)
        self._state = self._state.evolve(phase=Phase.COLLECTION_DETAIL, error=None)
        return collection

    def back(self) -> SessionState:
        """From a collection: back to the pending review if there is one, else to the list."""
        self._require("back", Phase.COLLECTION_DETAIL)
        phase = Phase.REVIEWING if self._state.review_cases else Phase.COLLECTION_LIST
        self._state = self._state.evolve(phase=phase)
        return self._state
