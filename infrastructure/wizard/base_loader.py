# infrastructure/wizard/base_loader.py
"""
Build Wizard domain objects from parsed definition files.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from domain.exceptions import ValidationError
from domain.steps.base import Step
from domain.steps.http import (
    LinkSpec,
    RemoteRequestSpec,
    RemoteStep,
    ResponseFormat,
    ResponseSpec,
)
from domain.view import InitialView
from domain.wizard import HttpDefaults, Wizard, WizardDefaults, WizardMeta


class WizardLoadError(Exception):
    pass


class WizardLoaderBase(ABC):
    def load_from_file(self, path: str | Path) -> Wizard:
        p = Path(path)
        if not p.exists():
            raise WizardLoadError(f"Wizard file not found: {path}")

        try:
            data = self._load_file(p)
        except WizardLoadError:
            raise
        except Exception as exc:
            raise WizardLoadError(f"Wizard file could not be parsed: {path}: {exc}") from exc

        if data is None:
            raise WizardLoadError(f"Wizard file is empty: {path}")
        if not isinstance(data, dict):
            raise WizardLoadError(f"Wizard file is invalid: {path}")

        return self.load_from_dict(data)

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...

    def load_from_dict(self, data: Dict[str, Any]) -> Wizard:
        try:
            wizard = Wizard(
                meta=self._load_meta(data.get("meta") or {}),
                defaults=self._load_defaults(data.get("defaults") or {}),
                view=self._load_view(data.get("view") or {}),
                steps=self._load_steps(data.get("steps") or []),
            )
        except ValidationError as exc:
            raise WizardLoadError(str(exc)) from exc

        self._validate_references(wizard)
        return wizard

    def _load_meta(self, data: Dict[str, Any]) -> WizardMeta:
        wizard_id = data.get("id")
        if not wizard_id:
            raise WizardLoadError("meta.id is required")
        return WizardMeta(
            id=str(wizard_id),
            name=data.get("name", str(wizard_id)),
            version=int(data.get("version", 1)),
            description=data.get("description", ""),
            on_load=data.get("on_load"),
        )

    def _load_defaults(self, data: Dict[str, Any]) -> WizardDefaults:
        http_data = data.get("http")
        http_defaults = None
        if http_data:
            http_defaults = HttpDefaults(
                base_url=http_data.get("base_url", ""),
                endpoint=http_data.get("endpoint", "api.php"),
                timeout_sec=http_data.get("timeout_sec", 120),
                headers=http_data.get("headers") or {},
            )
        return WizardDefaults(http=http_defaults)

    def _load_view(self, data: Dict[str, Any]) -> InitialView:
        return InitialView(
            controls={str(k): bool(v) for k, v in (data.get("controls") or {}).items()},
            areas={str(k): "" if v is None else str(v) for k, v in (data.get("areas") or {}).items()},
            panels={str(k): bool(v) for k, v in (data.get("panels") or {}).items()},
            links={str(k): "" if v is None else str(v) for k, v in (data.get("links") or {}).items()},
        )

    def _load_steps(self, steps_data: List[Dict[str, Any]]) -> List[Step]:
        steps: List[Step] = []
        seen = set()
        for step_data in steps_data:
            step = self._load_step(step_data)
            if step.id in seen:
                raise WizardLoadError(f"Duplicate step id: {step.id}")
            seen.add(step.id)
            steps.append(step)
        return steps

    def _load_step(self, data: Dict[str, Any]) -> Step:
        step_id = data.get("id")
        if not step_id:
            raise WizardLoadError("Every step needs an id")
        if not data.get("display"):
            raise WizardLoadError(f"Step {step_id} needs a display area")

        req_data = data.get("request") or {}
        request = RemoteRequestSpec(
            method=str(req_data.get("method", "GET")).upper(),
            selector=req_data.get("selector", step_id),
            body_field=req_data.get("body_field"),
            body_source=req_data.get("body_source"),
            headers=req_data.get("headers"),
            timeout_sec=req_data.get("timeout_sec"),
        )

        resp_data = data.get("response") or {}
        raw_format = resp_data.get("format", ResponseFormat.TEXT.value)
        try:
            response_format = ResponseFormat(raw_format)
        except ValueError as exc:
            raise WizardLoadError(f"Step {step_id}: unknown response format: {raw_format}") from exc

        links = [
            LinkSpec(target=link.get("target", ""), template=link.get("template", ""))
            for link in resp_data.get("links") or []
        ]

        return RemoteStep(
            id=step_id,
            name=data.get("name", step_id),
            display=data["display"],
            trigger=data.get("trigger"),
            reveal=list(data.get("reveal") or []),
            unlocks=data.get("unlocks"),
            terminal=bool(data.get("terminal", False)),
            placeholder=data.get("placeholder"),
            request=request,
            response=ResponseSpec(
                format=response_format,
                display_field=resp_data.get("display_field", "lines"),
                links=links,
            ),
        )

    def _validate_references(self, wizard: Wizard) -> None:
        """Every id a step points at must exist in the initial view."""
        view = wizard.view
        errors: List[str] = []
        step_ids = {s.id for s in wizard.steps}

        if wizard.meta.on_load:
            on_load = wizard.find_step(wizard.meta.on_load)
            if on_load is None:
                errors.append(f"meta.on_load refers to unknown step: {wizard.meta.on_load}")
            elif on_load.trigger is not None:
                errors.append(f"on-load step {on_load.id} must not have a trigger")

        for step in wizard.steps:
            if step.trigger is not None and step.trigger not in view.controls:
                errors.append(f"{step.id}: unknown trigger control {step.trigger}")
            if step.trigger is None and step.id != wizard.meta.on_load:
                errors.append(f"{step.id}: only the on-load step may omit its trigger")
            if step.display not in view.areas:
                errors.append(f"{step.id}: unknown display area {step.display}")
            for panel in step.reveal:
                if panel not in view.panels:
                    errors.append(f"{step.id}: unknown panel {panel}")
            if step.unlocks is not None and step.unlocks not in step_ids:
                errors.append(f"{step.id}: unlocks unknown step {step.unlocks}")
            if isinstance(step, RemoteStep):
                source = step.request.body_source
                if source is not None and source not in view.areas:
                    errors.append(f"{step.id}: unknown body source area {source}")
                for link in step.response.links:
                    if link.target not in view.links:
                        errors.append(f"{step.id}: unknown link {link.target}")

        if errors:
            raise WizardLoadError("Invalid wizard definition: " + "; ".join(errors))
