"""
gafpack Configuration

Optional YAML file holding default options for a coverage run. Only the
``coverage:`` section is read; other top-level sections are left for other
tools sharing the file. Command-line flags override values from the file.

Example config.yaml:

    coverage:
      len_scale: false
      coverage_column: true
      weight_queries: true
      weight_key: interval    # or "name"
      edges: true
      strict_edges: false
      strict_interval: false

Usage:
    from gafpack.config import load_config, resolve_options
    options = resolve_options(load_config("config.yaml"))
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .accumulators import WEIGHT_KEY_SCHEMES

SECTION = "coverage"

DEFAULT_OPTIONS: Dict[str, Any] = {
    "len_scale": False,
    "coverage_column": False,
    "weight_queries": False,
    "weight_key": "interval",
    "edges": False,
    "strict_edges": False,
    "strict_interval": False,
}

BOOLEAN_OPTIONS = [k for k, v in DEFAULT_OPTIONS.items() if isinstance(v, bool)]


def load_config(config_path: str) -> Any:
    """
    Read the coverage section of a YAML file.

    An empty file, or one without a ``coverage:`` key, gives an empty
    section. The section is returned as parsed; check it with
    validate_config before use.

    Raises:
        FileNotFoundError: config_path is not a file
        yaml.YAMLError: the file is not valid YAML
        ValueError: the top level of the file is not a mapping
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, encoding="utf-8") as f:
        document = yaml.safe_load(f)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"{config_path}: top level must be a mapping, got {type(document).__name__}")
    section = document.get(SECTION)
    return {} if section is None else section


def validate_config(section: Any) -> Tuple[bool, List[str]]:
    """
    Validate a coverage section as returned by load_config.

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if not isinstance(section, dict):
        return False, [f"'{SECTION}' section must be a mapping, got {type(section).__name__}"]

    errors = [f"Unknown option: {SECTION}.{key}" for key in section if key not in DEFAULT_OPTIONS]

    for key in BOOLEAN_OPTIONS:
        value = section.get(key)
        if value is not None and not isinstance(value, bool):
            errors.append(f"{SECTION}.{key} must be true or false, got {value!r}")

    weight_key = section.get("weight_key")
    if weight_key is not None and weight_key not in WEIGHT_KEY_SCHEMES:
        errors.append(
            f"{SECTION}.weight_key must be one of {', '.join(WEIGHT_KEY_SCHEMES)}, got {weight_key!r}"
        )

    return len(errors) == 0, errors


def resolve_options(
    section: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Merge defaults, config file values and command-line overrides.

    Values of None, in the section or the overrides, mean "not given".

    Examples:
        >>> resolve_options({"edges": True}, {"len_scale": True})["edges"]
        True
    """
    options = dict(DEFAULT_OPTIONS)

    for layer in (section or {}, overrides or {}):
        for key, value in layer.items():
            if key in DEFAULT_OPTIONS and value is not None:
                options[key] = value

    return options
