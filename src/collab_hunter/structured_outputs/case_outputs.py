from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from collab_hunter.utils.datetime_helpers import date_sort_key


class Right(BaseModel):
    """One concrete co-branding right (a packaging, product or experience change)."""

    title: str = Field(..., description="Short name of the right, e.g. 'Limited-edition packaging'.")
    description: str = Field(..., description="What physically changed for the co-branded product.")


class Case(BaseModel):
    """
    A single co-branding finding.

    `date` is kept exactly as the model wrote it; use `sort_key` for ordering.
    """

    # unknown keys survive a load and save cycle
    model_config = ConfigDict(extra="allow")

    projectName: str = Field(..., description="Project overview / campaign name.")
    brandName: str = Field(..., description="The brand the search was run for.")
    partnerIntro: str = Field(..., description="Who the partner is (IP, brand, artist).")
    productName: str = Field(..., description="The co-branded product or hardware model.")
    date: str = Field(..., description="Launch date, YYYY.MM.DD when known.")

    industry: Optional[str] = Field(default=None, description="Industry of the brand.")
    visualStyle: Optional[str] = Field(default=None, description="Dominant visual language of the collab.")
    campaignSlogan: Optional[str] = Field(default=None, description="Campaign tagline if any.")
    impactResult: Optional[str] = Field(default=None, description="Reported sales / buzz outcome.")
    keyVisualUrl: Optional[str] = Field(default=None, description="URL of the key visual.")

    rights: List[Right] = Field(
        ...,
        min_length=1,
        description="Ordered list of concrete co-branding rights. Never empty.",
    )
    insight: str = Field(..., description="Marketing analysis of why the collab worked (or not).")

    platformSource: str = Field(..., description="Where the case was found, e.g. 'Reddit + Official'.")
    sourceUrls: List[str] = Field(default_factory=list, description="URLs that verify the case.")

    @property
    def sort_key(self):
        return date_sort_key(self.date)


def sort_cases_newest_first(cases: List[Case]) -> List[Case]:
    return sorted(cases, key=lambda c: c.sort_key)
