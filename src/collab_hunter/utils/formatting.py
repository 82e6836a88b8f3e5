from typing import Any, Dict, List, Optional


def format_list_for_prompt(items: Optional[List[str]], bullet: str = "-", empty_msg: str = "(none)") -> str:
    """Format a list of strings for prompt insertion."""
    cleaned = [i for i in (items or []) if i and i.strip()]
    if not cleaned:
        return empty_msg
    return "\n".join(f"{bullet} {item}" for item in cleaned)


def format_fields_for_prompt(fields: Dict[str, Any], empty_msg: str = "(none)") -> str:
    lines = []
    for key, value in fields.items():
        if value in (None, "", [], {}):
            continue
        if isinstance(value, list):
            value = "; ".join(str(v) for v in value)
        lines.append(f"- {key}: {value}")
    return "\n".join(lines) if lines else empty_msg
