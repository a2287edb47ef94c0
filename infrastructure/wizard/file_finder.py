"""Find wizard definition files by ID."""
from pathlib import Path
from typing import Optional


class WizardFileFinder:
    """Search wizard files under the given base directory."""

    PRIORITY = [".json", ".yaml", ".yml"]

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def find_by_id(self, wizard_id: str) -> Optional[Path]:
        """
        Find a wizard file by wizard ID.

        Args:
            wizard_id: Wizard ID (e.g., "cert_demo")

        Returns:
            The Path if found, otherwise None.
        """
        if not self.base_dir.exists():
            return None

        candidates: list[Path] = []
        # Reason: Define deterministic priority when multiple extensions exist.
        # Impact: .json is selected over YAML variants for the same wizard_id.
        for ext in self.PRIORITY:
            filename = f"{wizard_id}{ext}"
            for file_path in self.base_dir.rglob(filename):
                if file_path.is_file():
                    candidates.append(file_path)

        if not candidates:
            return None

        candidates.sort(key=lambda path: (self.PRIORITY.index(path.suffix), str(path)))
        return candidates[0]
