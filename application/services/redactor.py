# application/services/redactor.py
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import parse_qsl

SENSITIVE_KEYS = {"authorization", "cookie", "set-cookie"}
# roster rows carry names, pubkeys and e-mail identities
PERSONAL_FIELDS = {"csv"}


def mask_value(key: str, value: Any) -> Any:
    if key.lower() in SENSITIVE_KEYS and value is not None:
        return "********"
    return value


def mask_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: mask_value(k, v) for k, v in (d or {}).items()}


def summarize_body(body: Optional[str]) -> Optional[Dict[str, Any]]:
    """Replace personal form values by their length so request bodies can be logged."""
    if body is None:
        return None
    summary: Dict[str, Any] = {}
    for key, value in parse_qsl(body, keep_blank_values=True):
        if key.lower() in PERSONAL_FIELDS or key.lower() in SENSITIVE_KEYS:
            summary[key] = f"<{len(value)} chars>"
        else:
            summary[key] = value
    return summary
