from __future__ import annotations

from pathlib import Path

from infrastructure.wizard.file_finder import WizardFileFinder


def test_file_finder_prefers_json(tmp_path: Path) -> None:
    base_dir = tmp_path / "wizards"
    base_dir.mkdir()
    (base_dir / "sample.yaml").write_text("meta: {}", encoding="utf-8")
    (base_dir / "sample.json").write_text("{}", encoding="utf-8")

    finder = WizardFileFinder(base_dir)

    found = finder.find_by_id("sample")

    assert found is not None
    assert found.suffix == ".json"


def test_file_finder_uses_yaml_when_no_json(tmp_path: Path) -> None:
    base_dir = tmp_path / "wizards"
    base_dir.mkdir()
    (base_dir / "sample.yaml").write_text("meta: {}", encoding="utf-8")

    finder = WizardFileFinder(base_dir)

    found = finder.find_by_id("sample")

    assert found is not None
    assert found.suffix == ".yaml"


def test_file_finder_searches_nested_yml(tmp_path: Path) -> None:
    nested = tmp_path / "wizards" / "demo"
    nested.mkdir(parents=True)
    wizard_path = nested / "sample.yml"
    wizard_path.write_text("meta: {}", encoding="utf-8")

    assert WizardFileFinder(tmp_path / "wizards").find_by_id("sample") == wizard_path


def test_file_finder_missing(tmp_path: Path) -> None:
    assert WizardFileFinder(tmp_path / "absent").find_by_id("sample") is None
    assert WizardFileFinder(tmp_path).find_by_id("sample") is None
