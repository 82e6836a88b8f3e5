from typing import Optional

from pydantic import BaseModel, Field

from collab_hunter.structured_outputs.enums_literals import BudgetLevel


class MatchRecommendation(BaseModel):
    ipName: str
    category: str
    matchScore: int = Field(..., ge=0, le=100, description="0-100 fit between brand and IP.")
    whyItWorks: str
    campaignIdea: str
    riskFactor: Optional[str] = None
    budgetLevel: Optional[BudgetLevel] = None
