from pathlib import Path

import yaml
from pydantic import ValidationError

from coursecast.domain.errors import ConfigurationError
from coursecast.rules.models import Rules


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ConfigurationError if syntax or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    # Rules may live inside a markdown ```yaml fence
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
            break
        if in_block:
            yaml_lines.append(line)

    clean_content = "\n".join(yaml_lines) if found_block else content

    try:
        data = yaml.safe_load(clean_content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return Rules.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(f"Rules validation failed:\n{e}") from e
