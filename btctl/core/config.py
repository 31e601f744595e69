"""Configuration loading for btctl.

Settings come from an optional YAML file (``$XDG_CONFIG_HOME/btctl/config.yaml``
by default) validated against the packaged JSON schema. Command-line flags are
applied on top by the CLI.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from btctl.core.errors import ConfigError
from btctl.core.model import Settings

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "btctl/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("btctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at root")
    return loaded


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from ``path``, or from the default location if it exists.

    An explicitly given path must exist; the default one is optional.
    """
    explicit = path is not None
    config_path = path if path is not None else default_config_path()
    if not explicit and not config_path.is_file():
        LOGGER.debug("No config file at %s, using defaults", config_path)
        return Settings()

    doc = _read_yaml(config_path)
    try:
        _load_schema_validator().validate(doc)
    except ValidationError as exc:
        where = ".".join(str(p) for p in exc.path)
        where = f" ({where})" if where else ""
        raise ConfigError(f"Schema validation failed for {config_path}{where}: {exc.message}") from exc

    LOGGER.debug("Loaded config from %s", config_path)
    settings = Settings()
    if "store_path" in doc:
        doc["store_path"] = Path(doc["store_path"]).expanduser()
    for key in ("timeout_s", "poll_interval_s"):
        if key in doc:
            doc[key] = float(doc[key])
    return replace(settings, **doc)
