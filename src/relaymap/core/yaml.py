"""YAML configuration loading.

Used by [RelayMapConfig.from_yaml()][relaymap.services.configs.RelayMapConfig.from_yaml]
and the CLI to read configuration files with ``yaml.safe_load``.

Examples:
    ```python
    from relaymap.core.yaml import load_yaml

    data = load_yaml("config/relaymap.yaml")
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML mapping from disk.

    Args:
        config_path: Path to the YAML file (absolute or relative).

    Returns:
        Parsed mapping, or an empty dict for an empty file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the YAML is malformed or its top level is
            not a mapping.

    Warning:
        The structure of the returned dictionary is not validated here;
        pass it to a Pydantic model for schema validation.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")
    return data
