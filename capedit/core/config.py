"""User configuration loaded from an optional YAML file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError

from capedit.core.document_loader import load_schema_validator
from capedit.core.errors import ConfigError
from capedit.core.model import DEFAULT_BASE_URL, DEFAULT_TRANSPORT

DEFAULT_EXECUTE_URL = "http://localhost:8080/sony/app/execute"
EXECUTE_URL_ENV = "CAPEDIT_EXECUTE_URL"
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


@dataclass(frozen=True)
class Settings:
    default_base_url: str = DEFAULT_BASE_URL
    default_transport: str = DEFAULT_TRANSPORT
    execute_url: str = DEFAULT_EXECUTE_URL
    timeout_s: float = 10.0


def config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "capedit/config.yaml"


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
    path = path or config_path()
    doc: dict[str, Any] = {}
    if path.is_file():
        doc = _read_yaml(path)
        try:
            load_schema_validator("config.schema.json").validate(doc)
        except ValidationError as exc:
            where = ".".join(str(p) for p in exc.path)
            raise ConfigError(f"Invalid config {path}{f' ({where})' if where else ''}: {exc.message}") from exc
        LOGGER.debug("Loaded settings from %s", path)

    settings = Settings(
        default_base_url=doc.get("default_base_url", DEFAULT_BASE_URL),
        default_transport=doc.get("default_transport", DEFAULT_TRANSPORT),
        execute_url=doc.get("execute_url", DEFAULT_EXECUTE_URL),
        timeout_s=float(doc.get("timeout_s", 10.0)),
    )
    override = os.environ.get(EXECUTE_URL_ENV)
    if override:
        settings = Settings(
            default_base_url=settings.default_base_url,
            default_transport=settings.default_transport,
            execute_url=override,
            timeout_s=settings.timeout_s,
        )
    return settings
