from typing import List, Optional

from pydantic import BaseModel, Field

from collab_hunter.utils.dedupe import dedupe_keep_order


class WebSource(BaseModel):
    uri: Optional[str] = None
    title: Optional[str] = None


class GroundingChunk(BaseModel):
    web: Optional[WebSource] = None


class GroundingMetadata(BaseModel):
    """
    Search provenance attached to a mission result. Shown to the user, never
    validated strictly: unknown keys are ignored and every field may be missing.
    """

    groundingChunks: List[GroundingChunk] = Field(default_factory=list)

    @classmethod
    def from_sources(cls, sources: List[WebSource]) -> "GroundingMetadata":
        return cls(groundingChunks=[GroundingChunk(web=s) for s in sources])

    def source_urls(self) -> List[str]:
        urls = [c.web.uri for c in self.groundingChunks if c.web and c.web.uri]
        return dedupe_keep_order(urls)

    def is_empty(self) -> bool:
        return not self.groundingChunks
