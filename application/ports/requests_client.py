# application/ports/requests_client.py
from __future__ import annotations

from typing import Dict, Optional

import requests

from application.ports.http_client import HttpClientPort, HttpResponse


class RequestsSessionHttpClient(HttpClientPort):
    def __init__(self, base_headers: Optional[Dict[str, str]] = None, timeout_sec: float = 120):
        self._session = requests.Session()
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        timeout_sec: Optional[float] = None,
    ) -> HttpResponse:
        merged = dict(self._base_headers)
        if headers:
            merged.update(headers)

        # body arrives form-encoded
        data = body.encode("utf-8") if body is not None else None

        resp = self._session.request(
            method=method.upper(),
            url=url,
            headers=merged,
            data=data,
            timeout=timeout_sec if timeout_sec is not None else self._timeout,
        )

        return HttpResponse(
            status=resp.status_code,
            url=str(resp.url),
            text=resp.text,
            headers=dict(resp.headers),
            encoding=resp.encoding,
            content=resp.content,
        )

    def close(self) -> None:
        self._session.close()
