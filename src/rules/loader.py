import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import EditorialRules

logger = logging.getLogger(__name__)


def load_rules(path: Path) -> EditorialRules:
    """
    Load and validate the editorial rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    # An empty file means "all defaults"
    if data is None:
        data = {}

    try:
        rules = EditorialRules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.info("Loaded editorial rules v%s from %s", rules.rules_version, path)
    return rules


def default_rules() -> EditorialRules:
    """Built-in rules, identical to the shipped editorial_rules.yaml."""
    return EditorialRules()
