"""
Declared output shapes.

An OutputShape is what the query builder promises the generative service will
return and what the schema validator checks the deserialized payload against.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import TypeAdapter

from collab_hunter.structured_outputs.assist_outputs import AutoCompleteResult, SocialPost
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.ip_profile_outputs import IPProfile
from collab_hunter.structured_outputs.match_outputs import MatchRecommendation
from collab_hunter.structured_outputs.trend_outputs import TrendItem


@dataclass(frozen=True)
class OutputShape:
    name: str
    annotation: Any
    is_list: bool
    adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "adapter", TypeAdapter(self.annotation))

    def json_schema(self) -> Dict[str, Any]:
        return self.adapter.json_schema()

    def empty(self) -> List[Any]:
        """Only list shapes have a safe empty representative."""
        if not self.is_list:
            raise TypeError(f"{self.name} is an object shape and has no empty value")
        return []


CASE_LIST = OutputShape("CaseList", List[Case], is_list=True)
TREND_LIST = OutputShape("TrendList", List[TrendItem], is_list=True)
IP_PROFILE = OutputShape("IPProfile", IPProfile, is_list=False)
MATCH_LIST = OutputShape("MatchRecommendationList", List[MatchRecommendation], is_list=True)

AUTOCOMPLETE = OutputShape("AutoCompleteResult", AutoCompleteResult, is_list=False)
IDEA_LIST = OutputShape("IdeaList", List[str], is_list=True)
SOCIAL_POST = OutputShape("SocialPost", SocialPost, is_list=False)
