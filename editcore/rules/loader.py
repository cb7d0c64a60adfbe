import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from editcore.rules.models import EditorRules

logger = logging.getLogger(__name__)


def _strip_fences(content: str) -> str:
    """Return the first ```yaml block, or the whole content if there is none."""
    yaml_lines = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    return "\n".join(yaml_lines) if found_block else content


def load_rules(path: Path) -> EditorRules:
    """
    Load and validate the editor rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    content = path.read_text()

    try:
        data = yaml.safe_load(_strip_fences(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = EditorRules.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.info("Rules %s v%s loaded from %s", rules.project.slug, rules.project.rules_version, path)
    return rules
