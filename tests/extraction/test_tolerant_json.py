"""
Tests for the tolerant deserializer.
"""
import pytest

from collab_hunter.common.errors import MalformedOutputError
from collab_hunter.extraction.tolerant_json import (
    extract_json_span,
    repair_json_text,
    strip_code_fences,
    tolerant_deserialize,
)

CLEAN = [{"ipName": "Chiikawa", "category": "Character"}, {"ipName": "Labubu", "category": "Art toy"}]


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n[1, 2]\n```') == "[1, 2]"

    def test_bare_fence(self):
        assert strip_code_fences('Here you go:\n```\n{"a": 1}\n```\nThanks') == '{"a": 1}'

    def test_unterminated_fence(self):
        """Output cut off before the closing fence still loses the opening one."""
        assert strip_code_fences('```json\n[{"a": 1}') == '[{"a": 1}'

    def test_no_fence_is_trimmed(self):
        assert strip_code_fences("  [1]  ") == "[1]"


class TestExtractJsonSpan:
    def test_prose_around_array(self):
        assert extract_json_span('Sure! [1, [2, 3]] hope this helps') == "[1, [2, 3]]"

    def test_first_opener_wins(self):
        assert extract_json_span('{"a": [1]} [2]') == '{"a": [1]}'

    def test_brackets_inside_strings_are_ignored(self):
        text = 'x [{"t": "a ] tricky } value"}] y'
        assert extract_json_span(text) == '[{"t": "a ] tricky } value"}]'

    def test_no_json(self):
        assert extract_json_span("no structure here") is None

    def test_truncated_runs_to_end(self):
        assert extract_json_span('[{"a": 1}, {"b":') == '[{"a": 1}, {"b":'


class TestRepair:
    def test_trailing_commas(self):
        assert repair_json_text('[1, 2, {"a": 1,},]') == '[1, 2, {"a": 1}]'

    def test_missing_comma_between_objects(self):
        assert repair_json_text('[{"a": 1}\n{"b": 2}]') == '[{"a": 1},\n{"b": 2}]'

    def test_comments_removed_outside_strings(self):
        repaired = repair_json_text('[1, // one\n 2 /* two */]')
        assert "//" not in repaired and "/*" not in repaired

    def test_url_inside_string_is_kept(self):
        assert repair_json_text('["https://example.com"]') == '["https://example.com"]'


class TestTolerantDeserialize:
    def test_clean(self):
        assert tolerant_deserialize('[{"ipName": "Chiikawa", "category": "Character"}, {"ipName": "Labubu", "category": "Art toy"}]', expect_list=True) == CLEAN

    def test_fenced_with_prose(self):
        raw = 'Here are the trends:\n```json\n[{"ipName": "Chiikawa", "category": "Character"}, {"ipName": "Labubu", "category": "Art toy"}]\n```'
        assert tolerant_deserialize(raw, expect_list=True) == CLEAN

    def test_trailing_comma(self):
        raw = '[{"ipName": "Chiikawa", "category": "Character",}, {"ipName": "Labubu", "category": "Art toy"},]'
        assert tolerant_deserialize(raw, expect_list=True) == CLEAN

    def test_missing_comma(self):
        raw = '[{"ipName": "Chiikawa", "category": "Character"} {"ipName": "Labubu", "category": "Art toy"}]'
        assert tolerant_deserialize(raw, expect_list=True) == CLEAN

    def test_raw_newline_inside_string(self):
        raw = '{"title": "line one\nline two"}'
        assert tolerant_deserialize(raw, expect_list=False) == {"title": "line one line two"}

    def test_cjk_survives(self):
        assert tolerant_deserialize('```\n["联名", "限定包装"]\n```', expect_list=True) == ["联名", "限定包装"]

    def test_list_shape_degrades_to_empty(self):
        assert tolerant_deserialize("Sorry, I could not find anything.", expect_list=True) == []
        assert tolerant_deserialize('[{"a": ', expect_list=True) == []
        assert tolerant_deserialize(None, expect_list=True) == []

    def test_object_shape_raises(self):
        with pytest.raises(MalformedOutputError) as exc_info:
            tolerant_deserialize("no object at all", expect_list=False)
        assert exc_info.value.raw_text == "no object at all"

    def test_object_shape_truncated_raises(self):
        with pytest.raises(MalformedOutputError):
            tolerant_deserialize('{"meta": {"ipName": "Labubu"', expect_list=False)

    def test_empty_array(self):
        assert tolerant_deserialize("[]", expect_list=True) == []
