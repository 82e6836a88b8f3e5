"""
Tests for load-time upgrades and the one-time legacy migration.
"""
import json

import pytest

from collab_hunter.infrastructure.storage.key_value import InMemoryKeyValueStore, InMemorySyncKeyValueStore
from collab_hunter.models.notebooks import DEFAULT_NOTEBOOK_ID, DEFAULT_NOTEBOOK_NAME
from collab_hunter.notebooks.migration import (
    STORAGE_KEY,
    dump_envelope,
    migrate_legacy,
    upgrade_envelope,
    upgrade_record,
)

from conftest import case_json

NOW = 1_700_000_000_000


def v0_envelope():
    """What the browser app persisted: a zustand envelope with notebooks/activeNotebookId."""
    return {
        "state": {
            "notebooks": [
                {"id": "1699999999999", "name": "Old notebook", "cases": [case_json()], "createdAt": 1, "updatedAt": 2},
                {"id": "r1", "type": "report", "name": "Report: 潮玩", "cases": [], "trends": [
                    {"ipName": "Labubu", "category": "潮玩", "reason": "盲盒", "targetAudience": "Z 世代", "momentum": "Huge"},
                ], "createdAt": 3, "updatedAt": 4},
            ],
            "activeNotebookId": "r1",
        },
        "version": 0,
    }


class TestUpgradeEnvelope:
    def test_empty_store_yields_default_notebook(self):
        state = upgrade_envelope(None, NOW)
        assert len(state.collections) == 1
        default = state.collections[0]
        assert (default.id, default.name, default.type) == (DEFAULT_NOTEBOOK_ID, DEFAULT_NOTEBOOK_NAME, "notebook")
        assert state.activeCollectionId == DEFAULT_NOTEBOOK_ID

    def test_unreadable_json_yields_default(self):
        assert upgrade_envelope("{not json", NOW).collections[0].id == DEFAULT_NOTEBOOK_ID

    def test_v0_envelope(self):
        state = upgrade_envelope(json.dumps(v0_envelope()), NOW)
        assert [c.id for c in state.collections] == ["1699999999999", "r1"]
        assert state.collections[0].type == "notebook"
        assert state.collections[1].trends[0].momentum is None
        assert state.activeCollectionId == "r1"

    def test_idempotent(self):
        once = upgrade_envelope(json.dumps(v0_envelope()), NOW)
        twice = upgrade_envelope(dump_envelope(once), NOW + 5)
        assert twice == once

    def test_current_envelope_shape(self):
        state = upgrade_envelope(json.dumps(v0_envelope()), NOW)
        dumped = json.loads(dump_envelope(state))
        assert dumped["version"] == 1
        assert set(dumped["state"]) == {"collections", "activeCollectionId"}

    def test_non_dict_items_skipped(self):
        raw = {"state": {"collections": ["junk", 42, {"id": "a", "name": "A", "cases": ["junk", case_json()]}]}}
        state = upgrade_envelope(json.dumps(raw), NOW)
        assert [c.id for c in state.collections] == ["a"]
        assert len(state.collections[0].cases) == 1
        assert state.activeCollectionId == "a"

    def test_unknown_active_falls_back_to_first(self):
        raw = {"state": {"collections": [{"id": "a", "name": "A"}], "activeCollectionId": "gone"}}
        assert upgrade_envelope(json.dumps(raw), NOW).activeCollectionId == "a"

    def test_duplicate_ids_are_reassigned(self):
        raw = {"state": {"collections": [{"id": "a", "name": "A"}, {"id": "a", "name": "B"}]}}
        ids = [c.id for c in upgrade_envelope(json.dumps(raw), NOW).collections]
        assert ids[0] == "a" and ids[1] != "a"


class TestUpgradeRecord:
    def test_defaults(self):
        record = upgrade_record({"cases": None}, NOW)
        assert record.type == "notebook"
        assert record.name == "New Case Notebook"
        assert record.createdAt == NOW and record.updatedAt == NOW
        assert record.id

    def test_case_without_rights_gets_blank_right(self):
        data = case_json()
        del data["rights"]
        record = upgrade_record({"id": "a", "name": "A", "cases": [data]}, NOW)
        rights = record.cases[0].rights
        assert len(rights) == 1
        assert (rights[0].title, rights[0].description) == ("", "")

    def test_bad_optional_fields_dropped(self):
        record = upgrade_record({"id": "a", "name": "A", "cases": [case_json(), dict(case_json(), industry=5, sourceUrls="x")]}, NOW)
        assert record.cases[1].industry is None
        assert record.cases[1].sourceUrls == []

    def test_numeric_id_becomes_string(self):
        assert upgrade_record({"id": 1699999999999, "name": "A"}, NOW).id == "1699999999999"

    def test_not_a_dict(self):
        assert upgrade_record(["nope"], NOW) is None

    def test_non_finite_id_is_replaced(self):
        record = upgrade_record({"id": float("nan"), "name": "A"}, NOW)
        assert record.id and record.id != "nan"

    def test_unknown_fields_survive_reload(self):
        trend = {"ipName": "Labubu", "category": "c", "reason": "r", "targetAudience": "t", "heatIndex": 97}
        raw = {
            "version": 1,
            "state": {
                "collections": [
                    {"id": "a", "name": "A", "pinned": True, "cases": [dict(case_json(), budget="¥2M")], "createdAt": 1, "updatedAt": 1},
                    {"id": "r", "type": "report", "name": "R", "trends": [trend], "createdAt": 1, "updatedAt": 1},
                ],
                "activeCollectionId": "a",
            },
        }
        state = upgrade_envelope(json.dumps(raw), NOW)
        dumped = json.loads(dump_envelope(state))["state"]["collections"]

        assert dumped[0]["pinned"] is True
        assert dumped[0]["cases"][0]["budget"] == "¥2M"
        assert dumped[1]["trends"][0]["heatIndex"] == 97
        assert upgrade_envelope(dump_envelope(state), NOW) == state


class TestMigrateLegacy:
    @pytest.mark.asyncio
    async def test_copies_then_removes_legacy(self):
        value = json.dumps(v0_envelope())
        primary = InMemoryKeyValueStore()
        legacy = InMemorySyncKeyValueStore({STORAGE_KEY: value})

        assert await migrate_legacy(primary, legacy) is True
        assert await primary.get_item(STORAGE_KEY) == value
        assert legacy.get_item(STORAGE_KEY) is None

    @pytest.mark.asyncio
    async def test_primary_wins_when_both_exist(self):
        primary = InMemoryKeyValueStore({STORAGE_KEY: "primary"})
        legacy = InMemorySyncKeyValueStore({STORAGE_KEY: "legacy"})

        assert await migrate_legacy(primary, legacy) is False
        assert await primary.get_item(STORAGE_KEY) == "primary"
        assert legacy.get_item(STORAGE_KEY) == "legacy"

    @pytest.mark.asyncio
    async def test_failed_read_back_keeps_legacy(self):
        class LossyStore(InMemoryKeyValueStore):
            async def set_item(self, key, value):
                await super().set_item(key, value[:-1])

        legacy = InMemorySyncKeyValueStore({STORAGE_KEY: "payload"})
        assert await migrate_legacy(LossyStore(), legacy) is False
        assert legacy.get_item(STORAGE_KEY) == "payload"

    @pytest.mark.asyncio
    async def test_nothing_to_migrate(self):
        assert await migrate_legacy(InMemoryKeyValueStore(), None) is False
        assert await migrate_legacy(InMemoryKeyValueStore(), InMemorySyncKeyValueStore()) is False
