from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from collab_hunter.structured_outputs.enums_literals import CommercialValue, Momentum


class TrendItem(BaseModel):
    """A trending IP worth considering for a collaboration."""

    model_config = ConfigDict(extra="allow")

    ipName: str = Field(..., description="Name of the IP / character / franchise.")
    category: str = Field(..., description="e.g. Anime, Game, Art toy, Film.")
    reason: str = Field(..., description="Why it is trending right now.")
    targetAudience: str = Field(..., description="Who engages with it.")

    momentum: Optional[Momentum] = None
    commercialValue: Optional[CommercialValue] = None
    buzzwords: List[str] = Field(default_factory=list)
    compatibility: List[str] = Field(
        default_factory=list,
        description="Product categories / industries the IP fits well with.",
    )
