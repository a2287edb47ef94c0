# infrastructure/wizard/__init__.py
from infrastructure.wizard.base_loader import WizardLoadError, WizardLoaderBase
from infrastructure.wizard.file_finder import WizardFileFinder
from infrastructure.wizard.json_loader import JsonWizardLoader
from infrastructure.wizard.loader_registry import WizardLoaderRegistry
from infrastructure.wizard.yaml_loader import YamlWizardLoader

__all__ = [
    "WizardLoadError",
    "WizardLoaderBase",
    "WizardFileFinder",
    "WizardLoaderRegistry",
    "YamlWizardLoader",
    "JsonWizardLoader",
]
