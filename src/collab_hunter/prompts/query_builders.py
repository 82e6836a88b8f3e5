"""
Mission query builders.

Every builder is pure: the same config always produces the same instruction
text. The text is what the user may review and edit before dispatch, so a
MissionQuery carries it verbatim next to the shape its answer must satisfy.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from collab_hunter.models.missions import (
    BrandSearchConfig,
    MatchConfig,
    MissionKind,
    ScoutConfig,
    TrendConfig,
)
from collab_hunter.prompts.mission_prompts import (
    AUTOCOMPLETE_PROMPT,
    BRAND_SEARCH_PROMPT,
    COMMON_EXTRACTION_RULES,
    IDEA_LIST_PROMPTS,
    IDEA_LIST_SUFFIX,
    IP_SCOUT_PROMPT,
    MATCHMAKING_PROMPT,
    OUTPUT_LANGUAGE,
    SOCIAL_POST_PROMPT,
    SYSTEM_INSTRUCTION_LIST,
    SYSTEM_INSTRUCTION_OBJECT,
    TREND_ANALYSIS_PROMPT,
)
from collab_hunter.structured_outputs.shapes import (
    AUTOCOMPLETE,
    CASE_LIST,
    IDEA_LIST,
    IP_PROFILE,
    MATCH_LIST,
    SOCIAL_POST,
    TREND_LIST,
    OutputShape,
)
from collab_hunter.utils.formatting import format_fields_for_prompt, format_list_for_prompt


@dataclass(frozen=True)
class MissionQuery:
    kind: str
    instruction_text: str
    output_shape: OutputShape

    @property
    def system_instruction(self) -> str:
        return SYSTEM_INSTRUCTION_LIST if self.output_shape.is_list else SYSTEM_INSTRUCTION_OBJECT

    def with_instruction(self, text: Optional[str]) -> "MissionQuery":
        """Swap in user-edited instruction text. Blank text keeps the generated one."""
        if text is None or not text.strip():
            return self
        return replace(self, instruction_text=text)


def _rules() -> str:
    return COMMON_EXTRACTION_RULES.format(language=OUTPUT_LANGUAGE)


def build_brand_search_query(config: BrandSearchConfig) -> MissionQuery:
    text = BRAND_SEARCH_PROMPT.format(
        brand_name=config.brandName,
        keywords=format_list_for_prompt(config.keywords, empty_msg="(none, use the brand name)"),
        platforms=format_list_for_prompt(config.platforms, empty_msg="(any)"),
        rules=_rules(),
    )
    return MissionQuery(kind=MissionKind.BRAND_SEARCH.value, instruction_text=text, output_shape=CASE_LIST)


def build_trend_query(config: TrendConfig) -> MissionQuery:
    text = TREND_ANALYSIS_PROMPT.format(
        topic=config.topic,
        time_scale=config.timeScale,
        limit=config.limit,
        keywords=format_list_for_prompt(config.keywords, empty_msg="(none, use the topic)"),
        platforms=format_list_for_prompt(config.platforms, empty_msg="(any)"),
        rules=_rules(),
    )
    return MissionQuery(kind=MissionKind.TREND.value, instruction_text=text, output_shape=TREND_LIST)


def build_scout_query(config: ScoutConfig) -> MissionQuery:
    text = IP_SCOUT_PROMPT.format(ip_name=config.ipName, rules=_rules())
    return MissionQuery(kind=MissionKind.IP_SCOUT.value, instruction_text=text, output_shape=IP_PROFILE)


def build_match_query(config: MatchConfig) -> MissionQuery:
    text = MATCHMAKING_PROMPT.format(
        brand_name=config.brandName,
        industry=config.industry,
        campaign_goal=config.campaignGoal,
        target_audience=config.targetAudience or "(not specified)",
        rules=_rules(),
    )
    return MissionQuery(kind=MissionKind.MATCHMAKING.value, instruction_text=text, output_shape=MATCH_LIST)


_BUILDERS: Dict[MissionKind, Callable[[Any], MissionQuery]] = {
    MissionKind.BRAND_SEARCH: build_brand_search_query,
    MissionKind.TREND: build_trend_query,
    MissionKind.IP_SCOUT: build_scout_query,
    MissionKind.MATCHMAKING: build_match_query,
}


def build_query(config: Any) -> MissionQuery:
    return _BUILDERS[config.mission_kind](config)


def build_freeform_match_query(prompt: str) -> MissionQuery:
    """Matchmaking from a single free-text brief (the HTTP matchmake endpoint)."""
    text = f"{prompt.strip()}\n\n{_rules()}\n- matchScore is an integer from 0 to 100.\n- budgetLevel must be one of: \"$\", \"$$\", \"$$$\" (or null)."
    return MissionQuery(kind=MissionKind.MATCHMAKING.value, instruction_text=text, output_shape=MATCH_LIST)


# ------------------------------------------------------------------
# Secondary pipelines
# ------------------------------------------------------------------

def build_autocomplete_query(keyword: str, current: Optional[Mapping[str, Any]] = None) -> MissionQuery:
    text = AUTOCOMPLETE_PROMPT.format(
        keyword=keyword,
        current_fields=format_fields_for_prompt(dict(current or {})),
        rules=_rules(),
    )
    return MissionQuery(kind="autocomplete", instruction_text=text, output_shape=AUTOCOMPLETE)


def build_idea_query(kind: str, seed: str, limit: int = 8) -> MissionQuery:
    if kind not in IDEA_LIST_PROMPTS:
        raise ValueError(f"Unknown idea kind: {kind}")
    text = IDEA_LIST_PROMPTS[kind].format(limit=limit, seed=seed or "co-branding")
    text = f"{text}\n{IDEA_LIST_SUFFIX.format(limit=limit, language=OUTPUT_LANGUAGE)}"
    return MissionQuery(kind=f"ideas:{kind}", instruction_text=text, output_shape=IDEA_LIST)


def build_social_post_query(notebook_markdown: str) -> MissionQuery:
    text = SOCIAL_POST_PROMPT.format(language=OUTPUT_LANGUAGE, notebook_markdown=notebook_markdown)
    return MissionQuery(kind="social_post", instruction_text=text, output_shape=SOCIAL_POST)
