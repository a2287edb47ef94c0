# domain/view.py
"""
View model of the wizard page.

Holds the state a browser would keep in the DOM: which trigger controls are
enabled, the text of each display area, which panels are visible and the
href of each link. Every mutation is appended to ``journal`` so callers can
tell exactly which writes a step produced.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from domain.exceptions import ValidationError


class MutationKind(str, Enum):
    CONTROL = "control"
    TEXT = "text"
    VISIBILITY = "visibility"
    LINK = "link"


@dataclass(frozen=True)
class ViewMutation:
    kind: MutationKind
    target: str
    value: Any


@dataclass(frozen=True)
class InitialView:
    controls: Dict[str, bool] = field(default_factory=dict)
    areas: Dict[str, str] = field(default_factory=dict)
    panels: Dict[str, bool] = field(default_factory=dict)
    links: Dict[str, str] = field(default_factory=dict)


@dataclass
class ViewState:
    controls: Dict[str, bool] = field(default_factory=dict)
    areas: Dict[str, str] = field(default_factory=dict)
    panels: Dict[str, bool] = field(default_factory=dict)
    links: Dict[str, str] = field(default_factory=dict)
    journal: List[ViewMutation] = field(default_factory=list)

    @classmethod
    def from_initial(cls, initial: InitialView) -> "ViewState":
        return cls(
            controls=dict(initial.controls),
            areas=dict(initial.areas),
            panels=dict(initial.panels),
            links=dict(initial.links),
        )

    # controls
    def is_enabled(self, control: str) -> bool:
        self._require(self.controls, control, "control")
        return self.controls[control]

    def enable(self, control: str) -> None:
        self._set(self.controls, control, True, MutationKind.CONTROL, "control")

    def disable(self, control: str) -> None:
        self._set(self.controls, control, False, MutationKind.CONTROL, "control")

    # display areas
    def text(self, area: str) -> str:
        self._require(self.areas, area, "area")
        return self.areas[area]

    def set_text(self, area: str, text: str) -> None:
        self._set(self.areas, area, "" if text is None else str(text), MutationKind.TEXT, "area")

    # panels
    def is_visible(self, panel: str) -> bool:
        self._require(self.panels, panel, "panel")
        return self.panels[panel]

    def show(self, panel: str) -> None:
        self._set(self.panels, panel, True, MutationKind.VISIBILITY, "panel")

    def hide(self, panel: str) -> None:
        self._set(self.panels, panel, False, MutationKind.VISIBILITY, "panel")

    # links
    def set_link(self, link: str, href: str) -> None:
        self._set(self.links, link, href, MutationKind.LINK, "link")

    def mutations(self, kind: Optional[MutationKind] = None, target: Optional[str] = None) -> List[ViewMutation]:
        return [
            m for m in self.journal
            if (kind is None or m.kind == kind) and (target is None or m.target == target)
        ]

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {
            "controls": dict(self.controls),
            "areas": dict(self.areas),
            "panels": dict(self.panels),
            "links": dict(self.links),
        }

    def _set(self, bucket: Dict[str, Any], key: str, value: Any, kind: MutationKind, label: str) -> None:
        self._require(bucket, key, label)
        bucket[key] = value
        self.journal.append(ViewMutation(kind=kind, target=key, value=value))

    def _require(self, bucket: Dict[str, Any], key: str, label: str) -> None:
        if key not in bucket:
            raise ValidationError(f"Unknown {label}: {key}")
