"""Shapes for the secondary (non-mission) pipelines: auto-complete and social post drafts."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from collab_hunter.structured_outputs.case_outputs import Right


class CasePatch(BaseModel):
    """Every case field, all optional: the model fills what it could verify."""

    projectName: Optional[str] = None
    brandName: Optional[str] = None
    partnerIntro: Optional[str] = None
    productName: Optional[str] = None
    date: Optional[str] = None
    industry: Optional[str] = None
    visualStyle: Optional[str] = None
    campaignSlogan: Optional[str] = None
    impactResult: Optional[str] = None
    keyVisualUrl: Optional[str] = None
    rights: Optional[List[Right]] = None
    insight: Optional[str] = None
    platformSource: Optional[str] = None
    sourceUrls: Optional[List[str]] = None


class SourceCitation(BaseModel):
    url: str
    title: Optional[str] = None


class AutoCompleteResult(BaseModel):
    suggestedPatch: CasePatch
    confidence: Dict[str, float] = Field(
        default_factory=dict,
        description="Per-field confidence in [0, 1]; fields missing here count as fully confident.",
    )
    warnings: List[str] = Field(default_factory=list)
    sources: List[SourceCitation] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def _confidence_in_range(cls, value: Dict[str, float]) -> Dict[str, float]:
        for key, score in value.items():
            if not 0.0 <= score <= 1.0:
                raise ValueError(f"confidence for '{key}' must be within [0, 1], got {score}")
        return value

    def patch_fields(self) -> Dict[str, object]:
        """Only the fields the model actually suggested (non-null, non-empty)."""
        patch = self.suggestedPatch.model_dump(exclude_none=True)
        return {k: v for k, v in patch.items() if v not in ("", [], {})}


class SocialPost(BaseModel):
    title: str = Field(..., description="Catchy post title, <= 20 characters.")
    content: str = Field(..., description="Post body with emoji and hashtags.")
