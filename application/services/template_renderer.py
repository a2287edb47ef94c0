from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict

_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")


class TemplateRenderError(Exception):
    pass


@dataclass(frozen=True)
class RenderSources:
    result: Dict[str, Any] = field(default_factory=dict)
    last: Dict[str, Any] = field(default_factory=dict)

    def root(self, name: str) -> Dict[str, Any]:
        roots = {"result": self.result, "last": self.last}
        if name not in roots:
            raise TemplateRenderError(f"unknown root: {name}")
        return roots[name]


class TemplateRenderer:
    """
    Fill link templates such as ``.../tx/${result.tx}``.

    Paths are dotted (``${result.meta.tx}``), digits index lists
    (``${result.items.0}``). Missing keys and nulls render as "".
    """

    def render(self, s: str, src: RenderSources) -> str:
        if s is None:
            return ""
        if "${" in _PLACEHOLDER.sub("", s):
            raise TemplateRenderError(f"unclosed template: {s}")
        return _PLACEHOLDER.sub(lambda m: self._to_text(self._lookup(m.group(1).strip(), src)), s)

    def _lookup(self, expr: str, src: RenderSources) -> Any:
        root_name, _, path = expr.partition(".")
        cur: Any = src.root(root_name)
        for part in path.split(".") if path else []:
            cur = self._step_into(cur, part)
        return cur

    @staticmethod
    def _step_into(cur: Any, part: str) -> Any:
        if part.isdigit():
            if not isinstance(cur, list):
                raise TemplateRenderError(f"index access on non-list: {part}")
            idx = int(part)
            return cur[idx] if idx < len(cur) else ""
        if isinstance(cur, dict):
            return cur.get(part, "")
        return getattr(cur, part, "")

    @staticmethod
    def _to_text(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, list):
            return ",".join("" if x is None else str(x) for x in value)
        return str(value)
