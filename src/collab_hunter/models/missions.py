"""
Mission configurations: a closed, tagged union of the four research missions.

Configs are frozen; the orchestrator owns one for the lifetime of a mission.
"""
from __future__ import annotations

from enum import Enum
from typing import ClassVar, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from typing_extensions import Annotated

from collab_hunter.common.errors import ConfigError


class MissionKind(str, Enum):
    BRAND_SEARCH = "brand_search"
    TREND = "trend"
    IP_SCOUT = "ip_scout"
    MATCHMAKING = "matchmaking"


class _MissionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_inputs: ClassVar[Tuple[str, ...]] = ()

    @property
    def mission_kind(self) -> MissionKind:
        return MissionKind(getattr(self, "kind"))

    def require_complete(self) -> None:
        """Raise ConfigError for the first required input that is blank."""
        for name in self.required_inputs:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise ConfigError(name)


class BrandSearchConfig(_MissionConfig):
    kind: Literal["brand_search"] = "brand_search"
    brandName: str
    keywords: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)

    required_inputs: ClassVar[Tuple[str, ...]] = ("brandName",)


class TrendConfig(_MissionConfig):
    kind: Literal["trend"] = "trend"
    topic: str
    timeScale: str = "past 3 months"
    limit: int = Field(default=10, ge=1, le=50)
    keywords: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)

    required_inputs: ClassVar[Tuple[str, ...]] = ("topic",)


class ScoutConfig(_MissionConfig):
    kind: Literal["ip_scout"] = "ip_scout"
    ipName: str

    required_inputs: ClassVar[Tuple[str, ...]] = ("ipName",)


class MatchConfig(_MissionConfig):
    kind: Literal["matchmaking"] = "matchmaking"
    brandName: str
    industry: str
    campaignGoal: str
    targetAudience: Optional[str] = None

    required_inputs: ClassVar[Tuple[str, ...]] = ("brandName", "industry", "campaignGoal")


MissionConfig = Annotated[
    Union[BrandSearchConfig, TrendConfig, ScoutConfig, MatchConfig],
    Field(discriminator="kind"),
]

mission_config_adapter: TypeAdapter = TypeAdapter(MissionConfig)
