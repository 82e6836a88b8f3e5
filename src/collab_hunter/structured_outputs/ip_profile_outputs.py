from typing import List, Optional

from pydantic import BaseModel, Field

from collab_hunter.structured_outputs.enums_literals import IPStatus, IPTier
from collab_hunter.utils.datetime_helpers import date_sort_key


class IPMeta(BaseModel):
    ipName: str
    rightsHolder: str
    originMedium: str = Field(..., description="Anime, game, picture book, film ...")
    currentStatus: IPStatus


class CommercialAnalysis(BaseModel):
    tier: IPTier = Field(..., description="S = global blockbuster, C = niche.")
    marketMomentum: str
    coreAudience: str
    brandArchetype: str
    riskFactors: List[str] = Field(default_factory=list)


class DesignElements(BaseModel):
    keyColors: List[str] = Field(default_factory=list)
    iconography: List[str] = Field(default_factory=list)
    texturesAndMaterials: List[str] = Field(default_factory=list)
    signatureQuotes: List[str] = Field(default_factory=list)


class CollabEvent(BaseModel):
    date: str = Field(..., description="When the collab launched, YYYY.MM when known.")
    partner: str
    description: Optional[str] = None


class StrategicFit(BaseModel):
    bestIndustries: List[str] = Field(default_factory=list)
    avoidIndustries: List[str] = Field(default_factory=list)
    marketingHooks: str


class TimelineEvent(BaseModel):
    date: str
    event: str


class IPProfile(BaseModel):
    """
    Due-diligence profile of a single IP.
    `collabHistory` is newest first once it has been through `with_sorted_history`.
    """

    meta: IPMeta
    commercialAnalysis: CommercialAnalysis
    designElements: DesignElements
    collabHistory: List[CollabEvent] = Field(default_factory=list)
    strategicFit: StrategicFit
    upcomingTimeline: List[TimelineEvent] = Field(default_factory=list)

    def with_sorted_history(self) -> "IPProfile":
        ordered = sorted(self.collabHistory, key=lambda e: date_sort_key(e.date))
        return self.model_copy(update={"collabHistory": ordered})
