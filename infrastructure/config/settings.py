# infrastructure/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from domain.exceptions import ValidationError
from domain.wizard import HttpDefaults

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_ENV_PATH = PROJECT_ROOT / ".env"
DEFAULT_WIZARD_DIR = PROJECT_ROOT / "wizards"


@dataclass(frozen=True)
class WizardSettings:
    """
    Runtime settings. ``None`` means "not configured": the wizard file's
    ``defaults.http`` section then applies.
    """

    base_url: Optional[str] = None
    endpoint: Optional[str] = None
    timeout_sec: Optional[float] = None
    wizard_dir: Path = DEFAULT_WIZARD_DIR
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        env_path: Optional[Path] = DEFAULT_ENV_PATH,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "WizardSettings":
        """
        Read ``WIZARD_*`` variables. Values from the .env file win over the
        process environment.
        """
        values = {}
        for key, value in (os.environ if environ is None else environ).items():
            values[key] = value
        if env_path is not None and Path(env_path).exists():
            for key, value in dotenv_values(env_path).items():
                if value is not None:
                    values[key] = value

        timeout_raw = values.get("WIZARD_TIMEOUT_SEC")
        timeout: Optional[float] = None
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValidationError(f"WIZARD_TIMEOUT_SEC must be a number: {timeout_raw}") from exc
            if timeout <= 0:
                raise ValidationError(f"WIZARD_TIMEOUT_SEC must be positive: {timeout_raw}")

        wizard_dir = values.get("WIZARD_DIR")
        return cls(
            base_url=values.get("WIZARD_BASE_URL") or None,
            endpoint=values.get("WIZARD_ENDPOINT") or None,
            timeout_sec=timeout,
            wizard_dir=Path(wizard_dir) if wizard_dir else DEFAULT_WIZARD_DIR,
            log_level=(values.get("WIZARD_LOG_LEVEL") or "INFO").upper(),
        )

    def with_overrides(self, **fields) -> "WizardSettings":
        return replace(self, **{k: v for k, v in fields.items() if v is not None})

    def http_defaults(self, wizard_defaults: Optional[HttpDefaults]) -> HttpDefaults:
        base = wizard_defaults or HttpDefaults()
        return HttpDefaults(
            base_url=self.base_url if self.base_url is not None else base.base_url,
            endpoint=self.endpoint if self.endpoint is not None else base.endpoint,
            timeout_sec=self.timeout_sec if self.timeout_sec is not None else base.timeout_sec,
            headers=dict(base.headers),
        )
