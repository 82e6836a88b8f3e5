"""
Durable collections of cases (notebooks) and trends (reports).

Every mutation computes a new collection list, persists the whole envelope,
and only then swaps it in memory. If the write fails the in-memory state is
unchanged. Mutations are serialized with an asyncio.Lock.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from collab_hunter.common.errors import CollectionNotFoundError
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.infrastructure.storage.key_value import AsyncKeyValueStore, SyncKeyValueStore
from collab_hunter.models.notebooks import (
    CASE_TARGET_NOTEBOOK_NAME,
    NEW_NOTEBOOK_NAME,
    NEW_REPORT_NAME,
    Collection,
    CollectionType,
    StoredState,
)
from collab_hunter.notebooks.migration import (
    STORAGE_KEY,
    default_state,
    dump_envelope,
    migrate_legacy,
    new_collection_id,
    upgrade_envelope,
)
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.trend_outputs import TrendItem
from collab_hunter.utils.datetime_helpers import now_ms

logger = get_logger(__name__)

LAST_COLLECTION_MESSAGE = "At least one collection must remain; the last collection cannot be deleted."


@dataclass(frozen=True)
class DeleteOutcome:
    deleted: bool
    message: str = ""


@dataclass(frozen=True)
class CaseTarget:
    """Where confirmed review cases go. `create` means the notebook does not exist yet."""

    collection_id: str
    create: bool = False


class CollectionStore:
    def __init__(
        self,
        primary: AsyncKeyValueStore,
        legacy: Optional[SyncKeyValueStore] = None,
        *,
        key: str = STORAGE_KEY,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.primary = primary
        self.legacy = legacy
        self.key = key
        self.clock = clock
        self._state: StoredState = default_state(clock())
        self._lock = asyncio.Lock()
        self._loaded = False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def state(self) -> StoredState:
        return self._state

    @property
    def collections(self) -> List[Collection]:
        return list(self._state.collections)

    @property
    def active_collection_id(self) -> Optional[str]:
        return self._state.activeCollectionId

    @property
    def active_collection(self) -> Optional[Collection]:
        return self.find(self._state.activeCollectionId) if self._state.activeCollectionId else None

    def find(self, collection_id: Optional[str]) -> Optional[Collection]:
        for c in self._state.collections:
            if c.id == collection_id:
                return c
        return None

    def get(self, collection_id: str) -> Collection:
        collection = self.find(collection_id)
        if collection is None:
            raise CollectionNotFoundError(collection_id)
        return collection

    def resolve_case_target(self) -> CaseTarget:
        """Active notebook, else the first notebook, else a new "My Case Studies" notebook."""
        active = self.active_collection
        if active is not None and active.is_notebook:
            return CaseTarget(active.id)
        for c in self._state.collections:
            if c.is_notebook:
                return CaseTarget(c.id)
        return CaseTarget(new_collection_id(), create=True)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> StoredState:
        """Migrate legacy data if needed, then read and upgrade the stored envelope."""
        async with self._lock:
            return await self._load_locked()

    async def _load_locked(self) -> StoredState:
        await migrate_legacy(self.primary, self.legacy, self.key)
        raw = await self.primary.get_item(self.key)
        self._state = upgrade_envelope(raw, self.clock())
        self._loaded = True
        logger.info(f"Loaded {len(self._state.collections)} collection(s)")
        return self._state

    async def _ensure_loaded(self) -> None:
        # a mutation before load() must not overwrite what is already stored
        if not self._loaded:
            await self._load_locked()

    async def _commit(self, collections: List[Collection], active_id: Optional[str]) -> StoredState:
        new_state = StoredState(collections=collections, activeCollectionId=active_id)
        await self.primary.set_item(self.key, dump_envelope(new_state))
        self._state = new_state
        return new_state

    def _next_updated_at(self, previous: Collection) -> int:
        return max(self.clock(), previous.updatedAt + 1)

    def _touched(self, collection: Collection, **updates) -> Collection:
        updates["updatedAt"] = self._next_updated_at(collection)
        return collection.model_copy(update=updates)

    def _replace(self, updated: Collection) -> List[Collection]:
        return [updated if c.id == updated.id else c for c in self._state.collections]

    def _new_collection(self, kind: CollectionType, name: str, *, cases=None, trends=None, collection_id=None) -> Collection:
        ts = self.clock()
        return Collection(
            id=collection_id or new_collection_id(),
            type=kind,
            name=name,
            cases=list(cases or []),
            trends=list(trends or []),
            createdAt=ts,
            updatedAt=ts,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, kind: CollectionType = "notebook", name: Optional[str] = None, *, activate: bool = True) -> Collection:
        async with self._lock:
            await self._ensure_loaded()
            default_name = NEW_REPORT_NAME if kind == "report" else NEW_NOTEBOOK_NAME
            collection = self._new_collection(kind, name or default_name)
            active = collection.id if activate else self._state.activeCollectionId
            await self._commit(self.collections + [collection], active)
            logger.info(f"Created {kind} {collection.id} ({collection.name})")
            return collection

    async def rename(self, collection_id: str, name: str) -> Collection:
        async with self._lock:
            await self._ensure_loaded()
            updated = self._touched(self.get(collection_id), name=name)
            await self._commit(self._replace(updated), self._state.activeCollectionId)
            return updated

    async def delete(self, collection_id: str) -> DeleteOutcome:
        async with self._lock:
            await self._ensure_loaded()
            self.get(collection_id)
            if len(self._state.collections) <= 1:
                logger.warning(f"Refusing to delete the last collection {collection_id}")
                return DeleteOutcome(deleted=False, message=LAST_COLLECTION_MESSAGE)

            remaining = [c for c in self._state.collections if c.id != collection_id]
            active = self._state.activeCollectionId
            if active == collection_id:
                active = remaining[0].id
            await self._commit(remaining, active)
            logger.info(f"Deleted collection {collection_id}")
            return DeleteOutcome(deleted=True)

    async def set_active(self, collection_id: str) -> Collection:
        async with self._lock:
            await self._ensure_loaded()
            collection = self.get(collection_id)
            if self._state.activeCollectionId != collection_id:
                await self._commit(self.collections, collection_id)
            return collection

    async def reorder_cases(self, collection_id: str, new_cases: Sequence[Case]) -> Collection:
        """Replace the full case list (drag-and-drop ordering is computed by the caller)."""
        async with self._lock:
            await self._ensure_loaded()
            updated = self._touched(self.get(collection_id), cases=list(new_cases))
            await self._commit(self._replace(updated), self._state.activeCollectionId)
            return updated

    async def append_cases(self, collection_id: str, cases: Sequence[Case]) -> Collection:
        """Add cases in front of the existing ones, keeping their given order."""
        async with self._lock:
            await self._ensure_loaded()
            collection = self.get(collection_id)
            updated = self._touched(collection, cases=list(cases) + list(collection.cases))
            await self._commit(self._replace(updated), self._state.activeCollectionId)
            return updated

    async def add_manual_case(self, collection_id: str, case: Case) -> Collection:
        return await self.append_cases(collection_id, [case])

    async def delete_item(self, collection_id: str, index: int) -> Collection:
        """Remove the case (notebook) or trend (report) at `index`."""
        async with self._lock:
            await self._ensure_loaded()
            collection = self.get(collection_id)
            items = list(collection.trends if collection.is_report else collection.cases)
            if not 0 <= index < len(items):
                raise IndexError(f"Collection {collection_id} has no item at index {index}")
            del items[index]

            field = "trends" if collection.is_report else "cases"
            updated = self._touched(collection, **{field: items})
            await self._commit(self._replace(updated), self._state.activeCollectionId)
            return updated

    async def add_report(self, topic: str, trends: Sequence[TrendItem]) -> Collection:
        """Always a new report named "Report: <topic>", made active."""
        async with self._lock:
            await self._ensure_loaded()
            report = self._new_collection("report", f"Report: {topic}", trends=trends)
            await self._commit(self.collections + [report], report.id)
            logger.info(f"Saved {len(report.trends)} trend(s) to new report {report.id}")
            return report

    async def commit_review(self, selected: Sequence[Case]) -> Collection:
        """
        Prepend `selected` to the resolved case target and make it active.
        The target notebook is created when no notebook exists.
        """
        async with self._lock:
            await self._ensure_loaded()
            target = self.resolve_case_target()
            collections = self.collections
            if target.create:
                created = self._new_collection("notebook", CASE_TARGET_NOTEBOOK_NAME, collection_id=target.collection_id)
                collections.append(created)
                logger.info(f"No notebook to receive reviewed cases; created {created.id}")

            collection = next(c for c in collections if c.id == target.collection_id)
            updated = self._touched(collection, cases=list(selected) + list(collection.cases))
            collections = [updated if c.id == updated.id else c for c in collections]
            await self._commit(collections, updated.id)
            logger.info(f"Committed {len(selected)} reviewed case(s) to {updated.id}")
            return updated
