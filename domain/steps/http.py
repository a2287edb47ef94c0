# domain/steps/http.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from domain.exceptions import ValidationError
from domain.steps.base import Step

SUPPORTED_METHODS = ("GET", "POST")


class ResponseFormat(str, Enum):
    TEXT = "text"      # body rendered verbatim
    JSON = "json"      # body parsed, display_field rendered, links built from fields
    IGNORE = "ignore"  # body never read (warm-up ping)


@dataclass(frozen=True)
class LinkSpec:
    target: str    # link id in the view
    template: str  # e.g. "https://live.blockcypher.com/btc-testnet/tx/${result.tx}"


@dataclass(frozen=True)
class RemoteRequestSpec:
    method: str
    selector: str  # query key appended to the endpoint: api.php?<selector>
    body_field: Optional[str] = None   # form field name, POST only
    body_source: Optional[str] = None  # area id whose text becomes the field value
    headers: Optional[Dict[str, str]] = None
    timeout_sec: Optional[int] = None

    def __post_init__(self) -> None:
        method = (self.method or "").upper()
        if method not in SUPPORTED_METHODS:
            raise ValidationError(f"Unsupported method: {self.method}")
        if not self.selector:
            raise ValidationError("Request selector must not be empty")
        if method == "POST" and not self.body_field:
            raise ValidationError(f"POST request '{self.selector}' requires body_field")
        if method == "GET" and self.body_field:
            raise ValidationError(f"GET request '{self.selector}' cannot carry a body")


@dataclass(frozen=True)
class ResponseSpec:
    format: ResponseFormat = ResponseFormat.TEXT
    display_field: str = "lines"
    links: List[LinkSpec] = field(default_factory=list)


@dataclass(frozen=True)
class RemoteStep(Step):
    request: RemoteRequestSpec
    response: ResponseSpec = field(default_factory=ResponseSpec)

    @property
    def input_area(self) -> Optional[str]:
        return self.request.body_source
