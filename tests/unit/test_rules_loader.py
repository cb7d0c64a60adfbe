"""
Tests for rules.yaml loading and validation.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from editcore.rules.loader import load_rules
from editcore.rules.models import DEFAULT_RULES, EditorRules


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(content)
    return path


# --- Loading ---


class TestLoadRules:
    """Test loading valid rules files."""

    def test_project_rules_file(self, project_root: Path) -> None:
        """The shipped rules.yaml matches the built-in defaults."""
        rules = load_rules(project_root / "rules.yaml")

        assert rules == DEFAULT_RULES

    def test_partial_file_uses_defaults(self, tmp_path: Path) -> None:
        rules = load_rules(write(tmp_path, "indentation:\n  step_px: 40\n"))

        assert rules.indentation.step_px == 40
        assert rules.indentation.min_px == 0
        assert rules.links.default_scheme == "https://"

    def test_empty_file(self, tmp_path: Path) -> None:
        assert load_rules(write(tmp_path, "")) == EditorRules()

    def test_markdown_fenced_yaml(self, tmp_path: Path) -> None:
        """Only the fenced block is read."""
        content = "# Editor rules\n\n```yaml\nhistory:\n  limit: 50\n```\n\nNotes: ignored\n"
        rules = load_rules(write(tmp_path, content))

        assert rules.history.limit == 50

    def test_image_alignment_directions(self, tmp_path: Path) -> None:
        content = "image_alignment:\n  center:\n    display: block\n    margin: 0 auto\n"
        rules = load_rules(write(tmp_path, content))

        assert rules.image_alignment.for_direction("center") == {
            "display": "block",
            "margin": "0 auto",
        }
        assert rules.image_alignment.for_direction("left")["float"] == "left"


# --- Errors ---


class TestLoadRulesErrors:
    """Test failure modes."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rules(write(tmp_path, "indentation: [unclosed\n"))

    def test_invalid_step(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="validation failed"):
            load_rules(write(tmp_path, "indentation:\n  step_px: 0\n"))

    def test_scheme_without_separator(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="default_scheme"):
            load_rules(write(tmp_path, "links:\n  default_scheme: https\n"))

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            load_rules(write(tmp_path, "- just\n- a list\n"))
