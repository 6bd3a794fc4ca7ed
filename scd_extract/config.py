"""
Configuration loading for scd-extract.

Settings live in an optional ``scd-extract.yaml``. The file is validated against
``schema/config.schema.json`` and merged over the defaults below.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validate

from scd_extract.exceptions import InvalidConfigError
from scd_extract.formatter import (
    DEFAULT_DECLARATION,
    DEFAULT_INDENT,
    DEFAULT_VERBATIM_CONTAINERS,
)

logger = logging.getLogger(__name__)

# Get project root to find schema
PROJECT_ROOT = Path(__file__).parent.parent
SCHEMA_FILE = PROJECT_ROOT / "schema/config.schema.json"

CONFIG_FILENAME = "scd-extract.yaml"


@dataclass
class ExtractConfig:
    """Formatter and extraction settings."""

    indent: str = DEFAULT_INDENT
    declaration: str = DEFAULT_DECLARATION
    verbatim_containers: list[str] = field(
        default_factory=lambda: list(DEFAULT_VERBATIM_CONTAINERS)
    )
    enum_policy: str = "preserve"  # preserve | prune
    strict_references: bool = False
    output_extension: str = ".cid"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractConfig":
        """Build a config from the parsed YAML mapping (already validated)."""
        fmt = data.get("format", {})
        extract = data.get("extract", {})
        config = cls()
        config.indent = fmt.get("indent", config.indent)
        config.declaration = fmt.get("declaration", config.declaration)
        config.verbatim_containers = list(
            fmt.get("verbatim_containers", config.verbatim_containers)
        )
        config.enum_policy = extract.get("enum_policy", config.enum_policy)
        config.strict_references = extract.get("strict_references", config.strict_references)
        config.output_extension = extract.get("output_extension", config.output_extension)
        return config


def load_config(path: Path | None = None) -> ExtractConfig:
    """
    Load configuration from YAML.

    Args:
        path: Explicit config file. When None, ``scd-extract.yaml`` in the
            current directory is used if it exists, otherwise defaults.

    Returns:
        ExtractConfig

    Raises:
        InvalidConfigError: If the file is empty, not a mapping, not valid
            YAML, or fails schema validation
        FileNotFoundError: If an explicit path does not exist
    """
    if path is None:
        default = Path.cwd() / CONFIG_FILENAME
        if not default.exists():
            logger.debug("No config file found, using defaults")
            return ExtractConfig()
        path = default

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"{path}: {e}") from e

    if data is None:
        raise InvalidConfigError(f"{path} is empty")

    if not isinstance(data, dict):
        raise InvalidConfigError(f"expected mapping, got {type(data).__name__}")

    validate_config(data)
    logger.debug(f"Loaded config from {path}")
    return ExtractConfig.from_dict(data)


def validate_config(data: dict[str, Any]) -> None:
    """Validate a config mapping against the JSON schema."""
    schema = json.loads(SCHEMA_FILE.read_text())
    try:
        validate(instance=data, schema=schema)
    except ValidationError as e:
        location = ".".join(str(p) for p in e.path) or "<root>"
        raise InvalidConfigError(f"{e.message} (at {location})") from e
