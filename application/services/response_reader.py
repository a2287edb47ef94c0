# application/services/response_reader.py
from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

from application.ports.http_client import HttpResponse


class ResponseFormatError(Exception):
    pass


def decode_body(resp: HttpResponse) -> str:
    """
    Recover the body text. The endpoint prints shell output, which is UTF-8
    unless the Content-Type says otherwise.
    """
    raw = resp.content
    if not raw:
        return resp.text or ""

    ctype = (resp.headers or {}).get("Content-Type") or (resp.headers or {}).get("content-type") or ""
    m = re.search(r"charset\s*=\s*([^\s;]+)", ctype, re.I)
    if m:
        enc = m.group(1).strip().strip('"').strip("'")
        try:
            return raw.decode(enc, errors="replace")
        except LookupError:
            pass
    return raw.decode("utf-8", errors="replace")


def parse_json_object(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResponseFormatError(f"Malformed JSON response: {exc.msg} (line {exc.lineno} col {exc.colno})") from exc
    if not isinstance(data, dict):
        raise ResponseFormatError(f"JSON response must be an object, got {type(data).__name__}")
    return data


def _try_extract_title(html: str) -> Optional[str]:
    if "<" not in html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    if soup.title is None:
        return None
    title = soup.title.get_text(strip=True)
    return title or None


def describe_failure(resp: HttpResponse) -> str:
    """Human readable message for a non-200 completion."""
    body = decode_body(resp)
    title = _try_extract_title(body)
    if title:
        return f"HTTP {resp.status}: {title}"
    head = body.strip().splitlines()[0][:200] if body.strip() else ""
    return f"HTTP {resp.status}: {head}" if head else f"HTTP {resp.status}"
