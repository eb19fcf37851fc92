from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules


def parse_rules(content: str) -> Rules:
    """
    Parse and validate rules YAML text.
    Raises ValueError on YAML syntax or schema problems.
    """
    # Strip a markdown ```yaml fence if the file is a rendered doc
    lines = content.splitlines()
    yaml_lines = []
    in_block = False
    found_block = False

    for line in lines:
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            in_block = False
            break

        if in_block:
            yaml_lines.append(line)

    clean_content = "\n".join(yaml_lines) if found_block else content

    try:
        data = yaml.safe_load(clean_content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    # An empty file means "all defaults"
    if data is None:
        data = {}

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if syntax or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        return parse_rules(f.read())
