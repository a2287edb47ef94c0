# infrastructure/wizard/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict

from infrastructure.wizard.base_loader import WizardLoadError, WizardLoaderBase
from infrastructure.wizard.json_loader import JsonWizardLoader
from infrastructure.wizard.yaml_loader import YamlWizardLoader


class WizardLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, WizardLoaderBase] = {
            ".yaml": YamlWizardLoader(),
            ".yml": YamlWizardLoader(),
            ".json": JsonWizardLoader(),
        }

    def get_loader(self, path: Path) -> WizardLoaderBase:
        ext = Path(path).suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise WizardLoadError(f"Unsupported wizard format: {ext}")
        return loader

    def load(self, path: Path):
        return self.get_loader(path).load_from_file(path)
