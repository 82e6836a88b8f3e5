"""
The structured-extraction pipeline.

One attempt = generate -> tolerant_deserialize -> validate. The RetryPolicy wraps
the whole attempt, so a retried call also re-runs deserialization and
validation. Post-validation finalizing (date ordering) happens once, after the
attempt succeeded.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from collab_hunter.common.config import Settings, get_settings
from collab_hunter.common.errors import MissionFailed
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.extraction.retry_policy import RetryPolicy
from collab_hunter.extraction.schema_validator import validate
from collab_hunter.extraction.tolerant_json import tolerant_deserialize
from collab_hunter.infrastructure.llm.generative_client import GenerationRequest, GenerativeClient
from collab_hunter.models.missions import (
    BrandSearchConfig,
    MatchConfig,
    MissionKind,
    ScoutConfig,
    TrendConfig,
)
from collab_hunter.models.notebooks import Collection
from collab_hunter.models.provenance import GroundingMetadata
from collab_hunter.notebooks.exports import to_markdown
from collab_hunter.prompts.query_builders import (
    MissionQuery,
    build_autocomplete_query,
    build_freeform_match_query,
    build_idea_query,
    build_query,
    build_social_post_query,
)
from collab_hunter.structured_outputs.assist_outputs import AutoCompleteResult, SocialPost, SourceCitation
from collab_hunter.structured_outputs.case_outputs import Case, sort_cases_newest_first
from collab_hunter.structured_outputs.ip_profile_outputs import IPProfile
from collab_hunter.structured_outputs.match_outputs import MatchRecommendation
from collab_hunter.structured_outputs.trend_outputs import TrendItem
from collab_hunter.utils.dedupe import dedupe_keep_order

logger = get_logger(__name__)


@dataclass(frozen=True)
class MissionResult:
    """
    Typed output of one mission.

    `value` is List[Case], List[TrendItem], IPProfile or List[MatchRecommendation]
    depending on `kind`. `instruction_text` is exactly what was sent.
    """

    kind: MissionKind
    value: Any
    instruction_text: str
    metadata: Optional[GroundingMetadata] = None

    @property
    def cases(self) -> List[Case]:
        return self.value if self.kind == MissionKind.BRAND_SEARCH else []

    @property
    def trends(self) -> List[TrendItem]:
        return self.value if self.kind == MissionKind.TREND else []

    @property
    def ip_profile(self) -> Optional[IPProfile]:
        return self.value if self.kind == MissionKind.IP_SCOUT else None

    @property
    def recommendations(self) -> List[MatchRecommendation]:
        return self.value if self.kind == MissionKind.MATCHMAKING else []


def finalize(value: Any) -> Any:
    """Ordering applied once to a validated value: cases and collab history newest first."""
    if isinstance(value, IPProfile):
        return value.with_sorted_history()
    if isinstance(value, list) and value and all(isinstance(v, Case) for v in value):
        return sort_cases_newest_first(value)
    return value


class ExtractionPipeline:
    def __init__(
        self,
        client: GenerativeClient,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.retry_policy = retry_policy or RetryPolicy.from_settings(self.settings)

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def _request_for(self, query: MissionQuery, *, web_search: bool = True) -> GenerationRequest:
        return GenerationRequest(
            instruction_text=query.instruction_text,
            system_instruction=query.system_instruction,
            output_schema=query.output_shape.json_schema(),
            web_search=web_search,
            temperature=self.settings.temperature,
        )

    async def extract(
        self,
        query: MissionQuery,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        web_search: bool = True,
    ) -> Tuple[Any, Optional[GroundingMetadata]]:
        """
        Run `query` to a validated value under the retry policy.

        Raises MissionFailed once the policy gives up; the last underlying
        error is its `cause`.
        """
        policy = retry_policy or self.retry_policy
        request = self._request_for(query, web_search=web_search)
        shape = query.output_shape

        async def attempt() -> Tuple[Any, Optional[GroundingMetadata]]:
            response = await self.client.generate(request)
            candidate = tolerant_deserialize(response.text, expect_list=shape.is_list)
            return validate(candidate, shape), response.grounding_metadata

        try:
            value, metadata = await policy.run(attempt, label=f"{query.kind} extraction")
        except policy.retry_on as e:
            raise MissionFailed(e) from e

        return finalize(value), metadata

    # ------------------------------------------------------------------
    # Missions
    # ------------------------------------------------------------------

    async def run_mission(self, config: Any, instruction_text: Optional[str] = None) -> MissionResult:
        """
        Dispatch a mission config. `instruction_text` (the user-edited preview)
        replaces the generated instruction when given.
        """
        config.require_complete()
        query = build_query(config).with_instruction(instruction_text)
        logger.info(f"Running {query.kind} mission")

        value, metadata = await self.extract(query)
        count = len(value) if isinstance(value, list) else 1
        logger.info(f"{query.kind} mission finished with {count} result(s)")
        return MissionResult(
            kind=config.mission_kind,
            value=value,
            instruction_text=query.instruction_text,
            metadata=metadata,
        )

    async def search_cases(self, config: BrandSearchConfig, instruction_text: Optional[str] = None) -> MissionResult:
        return await self.run_mission(config, instruction_text)

    async def analyze_trends(self, config: TrendConfig, instruction_text: Optional[str] = None) -> MissionResult:
        return await self.run_mission(config, instruction_text)

    async def scout_ip(self, config: ScoutConfig, instruction_text: Optional[str] = None) -> MissionResult:
        return await self.run_mission(config, instruction_text)

    async def matchmake(self, config: MatchConfig, instruction_text: Optional[str] = None) -> MissionResult:
        return await self.run_mission(config, instruction_text)

    async def matchmake_from_prompt(self, prompt: str) -> MissionResult:
        query = build_freeform_match_query(prompt)
        value, metadata = await self.extract(query)
        return MissionResult(
            kind=MissionKind.MATCHMAKING,
            value=value,
            instruction_text=query.instruction_text,
            metadata=metadata,
        )

    # ------------------------------------------------------------------
    # Secondary pipelines
    # ------------------------------------------------------------------

    async def autocomplete_case(self, keyword: str, current: Optional[Mapping[str, Any]] = None) -> AutoCompleteResult:
        """
        Suggest case fields for the manual-entry form.

        Citations the search attached to the response are merged into
        `sources` after the ones the model listed itself, deduped by URL.
        """
        query = build_autocomplete_query(keyword, current)
        result, metadata = await self.extract(query)

        urls = [s.url for s in result.sources]
        titles = {s.url: s.title for s in result.sources}
        if metadata is not None:
            for chunk in metadata.groundingChunks:
                if chunk.web and chunk.web.uri:
                    urls.append(chunk.web.uri)
                    titles.setdefault(chunk.web.uri, chunk.web.title)

        sources = [SourceCitation(url=u, title=titles.get(u)) for u in dedupe_keep_order(urls)]
        return result.model_copy(update={"sources": sources})

    async def suggest_ideas(self, kind: str, seed: str = "", limit: int = 8) -> List[str]:
        """Short inspiration list for a search box. One attempt; any failure yields []."""
        query = build_idea_query(kind, seed, limit)
        try:
            ideas, _ = await self.extract(query, retry_policy=RetryPolicy.single_attempt(), web_search=False)
        except MissionFailed as e:
            logger.warning(f"Idea suggestions for {kind!r} failed: {e.cause}")
            return []

        cleaned = [i.strip() for i in ideas if i and i.strip()]
        return dedupe_keep_order(cleaned)[:limit]

    async def draft_social_post(self, collection: Collection) -> SocialPost:
        query = build_social_post_query(to_markdown(collection))
        post, _ = await self.extract(query, web_search=False)
        return post
