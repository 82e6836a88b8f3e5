"""
Request / response schemas for the HTTP surface.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from collab_hunter.models.missions import MissionConfig
from collab_hunter.models.provenance import GroundingMetadata
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.ip_profile_outputs import IPProfile
from collab_hunter.structured_outputs.match_outputs import MatchRecommendation
from collab_hunter.structured_outputs.trend_outputs import TrendItem


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class PreviewRequest(BaseModel):
    config: MissionConfig


class PreviewResponse(BaseModel):
    kind: str
    instructionText: str = Field(..., description="Exactly the text that would be sent; may be edited and passed back to /run.")
    systemInstruction: str
    outputShape: str


class RunMissionRequest(BaseModel):
    config: MissionConfig
    instructionText: Optional[str] = Field(None, description="User-edited instruction text; the generated one is used when omitted.")


class RunMissionResponse(BaseModel):
    kind: str
    instructionText: str
    cases: List[Case] = Field(default_factory=list)
    trends: List[TrendItem] = Field(default_factory=list)
    ipProfile: Optional[IPProfile] = None
    recommendations: List[MatchRecommendation] = Field(default_factory=list)
    metadata: Optional[GroundingMetadata] = None


class MatchmakeRequest(BaseModel):
    # typed loosely so that a missing / non-string prompt is answered with 400, not 422
    prompt: Optional[Any] = None


class MatchmakeResponse(BaseModel):
    recommendations: List[MatchRecommendation]
    metadata: Optional[GroundingMetadata] = None
