from __future__ import annotations

from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from collab_hunter.common.errors import ValidationError, ValidationIssue
from collab_hunter.structured_outputs.shapes import OutputShape


def _format_loc(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def issues_from_pydantic(exc: PydanticValidationError) -> List[ValidationIssue]:
    return [ValidationIssue(path=_format_loc(tuple(err.get("loc", ()))), message=err.get("msg", "")) for err in exc.errors()]


def validate(candidate: Any, shape: OutputShape) -> Any:
    """
    Validate a deserialized candidate against `shape`.

    Returns the typed value (models, lists of models) or raises ValidationError
    listing every offending path. Nothing is repaired or dropped: one bad element
    fails the whole value. Already-validated values pass through unchanged.
    """
    try:
        return shape.adapter.validate_python(candidate)
    except PydanticValidationError as exc:
        raise ValidationError(shape.name, issues_from_pydantic(exc)) from exc
