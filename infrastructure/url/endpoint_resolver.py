# infrastructure/url/endpoint_resolver.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EndpointResolver:
    """
    Build step URLs as ``<base_url>/<endpoint>?<selector>``.

    ``endpoint`` may itself be absolute, in which case base_url is ignored.
    """

    base_url: str
    endpoint: str = "api.php"

    def resolve(self, selector: str) -> str:
        return f"{self._endpoint_url()}?{selector}"

    def _endpoint_url(self) -> str:
        if self.endpoint.startswith("http://") or self.endpoint.startswith("https://"):
            return self.endpoint
        if not self.base_url:
            return self.endpoint
        return self.base_url.rstrip("/") + "/" + self.endpoint.lstrip("/")
