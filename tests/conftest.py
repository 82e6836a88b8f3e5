"""
Shared fixtures: a scripted generative client, a retry policy that never
sleeps, and in-memory storage.
"""
import json
from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

from collab_hunter.common.config import Settings
from collab_hunter.extraction.pipeline import ExtractionPipeline
from collab_hunter.extraction.retry_policy import RetryPolicy
from collab_hunter.infrastructure.llm.generative_client import GenerationRequest, GenerationResponse
from collab_hunter.infrastructure.storage.key_value import InMemoryKeyValueStore
from collab_hunter.models.provenance import GroundingMetadata
from collab_hunter.notebooks.store import CollectionStore
from collab_hunter.structured_outputs.case_outputs import Case

Scripted = Union[str, GenerationResponse, BaseException]


class FakeGenerativeClient:
    """Replays scripted responses in order; exceptions are raised instead of returned."""

    def __init__(self, responses: Optional[Sequence[Scripted]] = None) -> None:
        self.responses: List[Scripted] = list(responses or [])
        self.requests: List[GenerationRequest] = []

    def queue(self, *responses: Scripted) -> None:
        self.responses.extend(responses)

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("FakeGenerativeClient ran out of scripted responses")
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, GenerationResponse):
            return item
        return GenerationResponse(text=item)

    @property
    def call_count(self) -> int:
        return len(self.requests)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ManualClock:
    """Millisecond clock that only moves when told to (or by 1 ms per read when `tick`)."""

    def __init__(self, start: int = 1_700_000_000_000, tick: int = 0) -> None:
        self.now = start
        self.tick = tick

    def __call__(self) -> int:
        value = self.now
        self.now += self.tick
        return value


def make_case(**overrides: Any) -> Case:
    data: Dict[str, Any] = {
        "projectName": "Pikachu x Oreo",
        "brandName": "Oreo",
        "partnerIntro": "Pokemon, the best-selling media franchise",
        "productName": "Pokemon Oreo cookies",
        "date": "2021.09.06",
        "rights": [{"title": "Embossed cookies", "description": "16 Pokemon embossed on the cookie wafers"}],
        "insight": "Collectible scarcity drove resale buzz.",
        "platformSource": "Reddit + Official",
        "sourceUrls": ["https://example.com/oreo-pokemon"],
    }
    data.update(overrides)
    return Case.model_validate(data)


def case_json(**overrides: Any) -> Dict[str, Any]:
    return make_case(**overrides).model_dump()


def raw_case_json(**overrides: Any) -> Dict[str, Any]:
    """A case payload that is never validated, for building invalid model output."""
    data = case_json()
    data.update(overrides)
    return data


def dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def ip_profile_json(**overrides):
    data = {
        "meta": {"ipName": "Labubu", "rightsHolder": "Pop Mart", "originMedium": "Art toy", "currentStatus": "Active"},
        "commercialAnalysis": {
            "tier": "S",
            "marketMomentum": "Explosive in 2024",
            "coreAudience": "Gen Z collectors",
            "brandArchetype": "Mischievous",
            "riskFactors": ["Counterfeits"],
        },
        "designElements": {"keyColors": ["Pink"], "iconography": ["Teeth"], "texturesAndMaterials": ["Plush"], "signatureQuotes": []},
        "collabHistory": [
            {"date": "2023.05", "partner": "Vans", "description": None},
            {"date": "2024.08", "partner": "Uniqlo", "description": "UT line"},
        ],
        "strategicFit": {"bestIndustries": ["Fashion"], "avoidIndustries": ["Finance"], "marketingHooks": "Blind boxes"},
        "upcomingTimeline": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="memory", max_attempts=3, retry_base_delay=1.0)


@pytest.fixture
def sleep_recorder() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def retry_policy(sleep_recorder) -> RetryPolicy:
    return RetryPolicy(max_attempts=3, base_delay=1.0, sleep=sleep_recorder)


@pytest.fixture
def fake_client() -> FakeGenerativeClient:
    return FakeGenerativeClient()


@pytest.fixture
def pipeline(fake_client, retry_policy, settings) -> ExtractionPipeline:
    return ExtractionPipeline(fake_client, retry_policy, settings=settings)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def primary_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
async def collection_store(primary_store, clock) -> CollectionStore:
    store = CollectionStore(primary_store, clock=clock)
    await store.load()
    return store


@pytest.fixture
def grounding() -> GroundingMetadata:
    return GroundingMetadata.model_validate(
        {"groundingChunks": [{"web": {"uri": "https://news.example.com/a", "title": "News A"}}]}
    )
