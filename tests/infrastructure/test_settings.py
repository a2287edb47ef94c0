from __future__ import annotations

from pathlib import Path

import pytest

from domain.exceptions import ValidationError
from domain.wizard import HttpDefaults
from infrastructure.config.settings import DEFAULT_WIZARD_DIR, WizardSettings


def test_from_env_defaults_when_unset(tmp_path: Path) -> None:
    settings = WizardSettings.from_env(env_path=tmp_path / ".env", environ={})

    assert settings.base_url is None
    assert settings.endpoint is None
    assert settings.timeout_sec is None
    assert settings.wizard_dir == DEFAULT_WIZARD_DIR
    assert settings.log_level == "INFO"


def test_from_env_reads_environment(tmp_path: Path) -> None:
    environ = {
        "WIZARD_BASE_URL": "http://115.27.243.20/cert-demo",
        "WIZARD_ENDPOINT": "index.php",
        "WIZARD_TIMEOUT_SEC": "45",
        "WIZARD_DIR": str(tmp_path),
        "WIZARD_LOG_LEVEL": "debug",
    }

    settings = WizardSettings.from_env(env_path=None, environ=environ)

    assert settings.base_url == "http://115.27.243.20/cert-demo"
    assert settings.endpoint == "index.php"
    assert settings.timeout_sec == 45.0
    assert settings.wizard_dir == tmp_path
    assert settings.log_level == "DEBUG"


def test_dotenv_file_wins_over_environment(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("WIZARD_BASE_URL=http://from-dotenv\n", encoding="utf-8")

    settings = WizardSettings.from_env(env_path=env_file, environ={"WIZARD_BASE_URL": "http://from-env"})

    assert settings.base_url == "http://from-dotenv"


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeout_rejected(raw) -> None:
    with pytest.raises(ValidationError, match="WIZARD_TIMEOUT_SEC"):
        WizardSettings.from_env(env_path=None, environ={"WIZARD_TIMEOUT_SEC": raw})


def test_http_defaults_merge_over_wizard_file() -> None:
    wizard_http = HttpDefaults(base_url="http://localhost/cert-demo", endpoint="api.php", timeout_sec=120,
                               headers={"User-Agent": "cert-wizard"})

    merged = WizardSettings(base_url="http://demo").http_defaults(wizard_http)

    assert merged.base_url == "http://demo"
    assert merged.endpoint == "api.php"
    assert merged.timeout_sec == 120
    assert merged.headers == {"User-Agent": "cert-wizard"}


def test_http_defaults_without_wizard_section() -> None:
    merged = WizardSettings(timeout_sec=30).http_defaults(None)

    assert merged.base_url == ""
    assert merged.endpoint == "api.php"
    assert merged.timeout_sec == 30


def test_with_overrides_ignores_none() -> None:
    settings = WizardSettings(base_url="http://a", log_level="INFO")

    updated = settings.with_overrides(base_url=None, log_level="DEBUG")

    assert updated.base_url == "http://a"
    assert updated.log_level == "DEBUG"
