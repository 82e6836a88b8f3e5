"""
Persisted collection records.

A collection is either a case notebook (`type="notebook"`) or a trend report
(`type="report"`). Records are frozen: every store mutation builds a new value.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.trend_outputs import TrendItem

CollectionType = Literal["notebook", "report"]

ENVELOPE_VERSION = 1

DEFAULT_NOTEBOOK_ID = "default"
DEFAULT_NOTEBOOK_NAME = "My First Notebook"
CASE_TARGET_NOTEBOOK_NAME = "My Case Studies"
NEW_NOTEBOOK_NAME = "New Case Notebook"
NEW_REPORT_NAME = "New Trend Report"


class Collection(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    type: CollectionType = "notebook"
    name: str
    cases: List[Case] = Field(default_factory=list)
    trends: List[TrendItem] = Field(default_factory=list)
    createdAt: int = Field(..., description="ms since epoch")
    updatedAt: int = Field(..., description="ms since epoch")

    @property
    def is_notebook(self) -> bool:
        return self.type == "notebook"

    @property
    def is_report(self) -> bool:
        return self.type == "report"

    @property
    def is_empty(self) -> bool:
        return not self.cases and not self.trends


class StoredState(BaseModel):
    collections: List[Collection] = Field(default_factory=list)
    activeCollectionId: Optional[str] = None


class StoreEnvelope(BaseModel):
    version: int = ENVELOPE_VERSION
    state: StoredState = Field(default_factory=StoredState)
