"""Helpers for the manual case form: reviewing auto-complete suggestions and building the case."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from collab_hunter.common.errors import ValidationError
from collab_hunter.extraction.schema_validator import issues_from_pydantic
from collab_hunter.structured_outputs.assist_outputs import AutoCompleteResult
from collab_hunter.structured_outputs.case_outputs import Case

DEFAULT_CONFIDENCE_THRESHOLD = 0.4


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return str(value).strip() != ""


def default_field_selection(
    result: AutoCompleteResult,
    current: Optional[Mapping[str, Any]] = None,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> Dict[str, bool]:
    """
    Which suggested fields start out selected.

    A field is pre-selected only when the form has nothing in it yet and the
    model's confidence is strictly above `threshold` (no score = 1.0).
    """
    current = current or {}
    selection: Dict[str, bool] = {}
    for key in result.patch_fields():
        confidence = result.confidence.get(key, 1.0)
        selection[key] = not has_value(current.get(key)) and confidence > threshold
    return selection


def apply_patch(
    current: Optional[Mapping[str, Any]],
    result: AutoCompleteResult,
    selected: Mapping[str, bool] | Iterable[str],
) -> Dict[str, Any]:
    """Return a new form dict with the selected suggestions copied over."""
    patch = result.patch_fields()
    if isinstance(selected, Mapping):
        keys = [k for k, on in selected.items() if on]
    else:
        keys = list(selected)

    merged = dict(current or {})
    for key in keys:
        if key in patch:
            merged[key] = patch[key]
    return merged


def build_manual_case(fields: Mapping[str, Any]) -> Case:
    """Validate a filled-in form as a Case. Raises ValidationError with the offending fields."""
    try:
        return Case.model_validate(dict(fields))
    except PydanticValidationError as exc:
        raise ValidationError("Case", issues_from_pydantic(exc)) from exc
