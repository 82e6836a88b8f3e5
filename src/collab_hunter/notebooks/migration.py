"""
Load-time upgrade of persisted collections.

Everything that can be wrong with stored data is defaulted here, in one place,
field by field. `upgrade_envelope` is idempotent: upgrading its own output
returns an equal state.
"""
from __future__ import annotations

import json
import math
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from collab_hunter.common.logging_utils import get_logger
from collab_hunter.infrastructure.storage.key_value import AsyncKeyValueStore, SyncKeyValueStore
from collab_hunter.models.notebooks import (
    DEFAULT_NOTEBOOK_ID,
    DEFAULT_NOTEBOOK_NAME,
    ENVELOPE_VERSION,
    NEW_NOTEBOOK_NAME,
    NEW_REPORT_NAME,
    Collection,
    StoredState,
    StoreEnvelope,
)
from collab_hunter.structured_outputs.case_outputs import Case
from collab_hunter.structured_outputs.trend_outputs import TrendItem
from collab_hunter.utils.datetime_helpers import now_ms

logger = get_logger(__name__)

STORAGE_KEY = "cb-hunter-storage"

CASE_REQUIRED_FIELDS = ("projectName", "brandName", "partnerIntro", "productName", "date", "insight", "platformSource")
CASE_OPTIONAL_FIELDS = ("industry", "visualStyle", "campaignSlogan", "impactResult", "keyVisualUrl")
TREND_REQUIRED_FIELDS = ("ipName", "category", "reason", "targetAudience")
RECORD_FIELDS = ("id", "type", "name", "cases", "trends", "createdAt", "updatedAt")
MOMENTUM_VALUES = ("Emerging", "Peaking", "Stabilizing")
COMMERCIAL_VALUES = ("High", "Medium", "Niche")


def new_collection_id() -> str:
    return uuid.uuid4().hex


def default_notebook(now: Optional[int] = None) -> Collection:
    ts = now if now is not None else now_ms()
    return Collection(id=DEFAULT_NOTEBOOK_ID, type="notebook", name=DEFAULT_NOTEBOOK_NAME, createdAt=ts, updatedAt=ts)


def default_state(now: Optional[int] = None) -> StoredState:
    return StoredState(collections=[default_notebook(now)], activeCollectionId=DEFAULT_NOTEBOOK_ID)


def _str_or_default(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _extra_fields(raw: Dict[str, Any], known) -> Dict[str, Any]:
    return {k: v for k, v in raw.items() if isinstance(k, str) and k not in known}


def _int_or_none(value: Any) -> Optional[int]:
    # bool is an int subclass
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def upgrade_case(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None

    case = _extra_fields(raw, CASE_REQUIRED_FIELDS + CASE_OPTIONAL_FIELDS + ("rights", "sourceUrls"))
    case.update({name: _str_or_default(raw.get(name)) for name in CASE_REQUIRED_FIELDS})
    for name in CASE_OPTIONAL_FIELDS:
        value = raw.get(name)
        if isinstance(value, str):
            case[name] = value
        elif value is not None:
            logger.debug(f"Dropping malformed optional case field {name!r}")

    rights = []
    for r in raw.get("rights") if isinstance(raw.get("rights"), list) else []:
        if isinstance(r, dict):
            rights.append({"title": _str_or_default(r.get("title")), "description": _str_or_default(r.get("description"))})
    case["rights"] = rights or [{"title": "", "description": ""}]
    case["sourceUrls"] = _str_list(raw.get("sourceUrls"))
    return case


def upgrade_trend(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None

    known = TREND_REQUIRED_FIELDS + ("momentum", "commercialValue", "buzzwords", "compatibility")
    trend = _extra_fields(raw, known)
    trend.update({name: _str_or_default(raw.get(name)) for name in TREND_REQUIRED_FIELDS})
    if raw.get("momentum") in MOMENTUM_VALUES:
        trend["momentum"] = raw["momentum"]
    if raw.get("commercialValue") in COMMERCIAL_VALUES:
        trend["commercialValue"] = raw["commercialValue"]
    trend["buzzwords"] = _str_list(raw.get("buzzwords"))
    trend["compatibility"] = _str_list(raw.get("compatibility"))
    return trend


def _upgrade_items(raw_items: Any, upgrade, model, what: str) -> List[Any]:
    items = []
    for raw in raw_items if isinstance(raw_items, list) else []:
        data = upgrade(raw)
        if data is None:
            logger.warning(f"Skipping stored {what} that is not an object")
            continue
        try:
            items.append(model.model_validate(data))
        except PydanticValidationError as e:
            logger.warning(f"Skipping stored {what} that cannot be upgraded: {e.error_count()} error(s)")
    return items


def upgrade_record(raw: Any, now: Optional[int] = None) -> Optional[Collection]:
    """
    Upgrade one persisted collection record. Returns None for records that are
    not objects at all.
    """
    if not isinstance(raw, dict):
        return None

    ts = now if now is not None else now_ms()
    kind = raw.get("type")
    if kind not in ("notebook", "report"):
        if kind is not None:
            logger.warning(f"Unknown collection type {kind!r}; treating it as a notebook")
        kind = "notebook"

    record_id = raw.get("id")
    if _int_or_none(record_id) is not None:
        record_id = str(_int_or_none(record_id))
    if not isinstance(record_id, str) or not record_id:
        record_id = new_collection_id()

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        name = NEW_REPORT_NAME if kind == "report" else NEW_NOTEBOOK_NAME

    created_at = _int_or_none(raw.get("createdAt"))
    updated_at = _int_or_none(raw.get("updatedAt"))
    if created_at is None:
        created_at = updated_at if updated_at is not None else ts
    if updated_at is None:
        updated_at = created_at

    return Collection(
        id=record_id,
        type=kind,
        name=name,
        cases=_upgrade_items(raw.get("cases"), upgrade_case, Case, "case"),
        trends=_upgrade_items(raw.get("trends"), upgrade_trend, TrendItem, "trend"),
        createdAt=created_at,
        updatedAt=updated_at,
        **_extra_fields(raw, RECORD_FIELDS),
    )


def upgrade_state(raw: Any, now: Optional[int] = None) -> StoredState:
    """
    Accepts the current envelope, a v0 envelope (`notebooks` / `activeNotebookId`)
    or a bare state object. Anything unusable yields the default state.
    """
    if not isinstance(raw, dict):
        return default_state(now)

    state = raw.get("state") if isinstance(raw.get("state"), dict) else raw
    version = raw.get("version", 0) if state is not raw else 0
    if version != ENVELOPE_VERSION:
        logger.info(f"Upgrading stored collections from envelope version {version} to {ENVELOPE_VERSION}")

    raw_collections = state.get("collections")
    if raw_collections is None:
        raw_collections = state.get("notebooks")

    collections: List[Collection] = []
    seen_ids = set()
    for raw_record in raw_collections if isinstance(raw_collections, list) else []:
        record = upgrade_record(raw_record, now)
        if record is None:
            logger.warning("Skipping stored collection that is not an object")
            continue
        if record.id in seen_ids:
            record = record.model_copy(update={"id": new_collection_id()})
        seen_ids.add(record.id)
        collections.append(record)

    if not collections:
        return default_state(now)

    active = state.get("activeCollectionId")
    if active is None:
        active = state.get("activeNotebookId")
    if _int_or_none(active) is not None:
        active = str(_int_or_none(active))
    if active not in seen_ids:
        active = collections[0].id

    return StoredState(collections=collections, activeCollectionId=active)


def upgrade_envelope(raw_text: Optional[str], now: Optional[int] = None) -> StoredState:
    if not raw_text:
        return default_state(now)
    try:
        raw = json.loads(raw_text)
    except ValueError as e:
        logger.warning(f"Stored collections are not valid JSON ({e}); starting from the default notebook")
        return default_state(now)
    return upgrade_state(raw, now)


def dump_envelope(state: StoredState) -> str:
    return StoreEnvelope(version=ENVELOPE_VERSION, state=state).model_dump_json()


async def migrate_legacy(
    primary: AsyncKeyValueStore,
    legacy: Optional[SyncKeyValueStore],
    key: str = STORAGE_KEY,
) -> bool:
    """
    One-time copy of the legacy medium's value into the primary medium.

    Runs only when the primary has nothing under `key`. The legacy copy is
    removed only after the write has been read back intact. Returns True when
    data was migrated.
    """
    if legacy is None:
        return False

    legacy_value = legacy.get_item(key)
    if not legacy_value:
        return False

    if await primary.get_item(key):
        logger.info(f"Primary storage already holds {key!r}; leaving the legacy copy untouched")
        return False

    logger.info(f"Migrating {key!r} from legacy storage")
    await primary.set_item(key, legacy_value)

    if await primary.get_item(key) != legacy_value:
        logger.warning(f"Read-back of migrated {key!r} did not match; keeping the legacy copy")
        return False

    legacy.remove_item(key)
    logger.info(f"Migrated {key!r} and removed the legacy copy")
    return True
