"""Configuration loading.

Settings come from an optional YAML file and the environment. Uses
environment variables when available, falls back to conventional defaults.

Environment variables:
    SCHEMA_ANNOTATE_CONFIG — config file (default: ./schema-annotate.yaml)
    SCHEMA_ANNOTATE_DATABASE_URL — SQLAlchemy URL of the database to inspect
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from schema_annotate.comment.options import RenderOptions
from schema_annotate.errors import ConfigError

DEFAULT_CONFIG_NAME = "schema-annotate.yaml"
CONFIG_ENV = "SCHEMA_ANNOTATE_CONFIG"
DATABASE_URL_ENV = "SCHEMA_ANNOTATE_DATABASE_URL"


@dataclass
class AnnotateConfig:
    database_url: str | None = None
    options: RenderOptions = field(default_factory=RenderOptions)
    models: list[str] = field(default_factory=list)
    tables: dict[str, str] = field(default_factory=dict)
    # Directory relative model globs and table paths resolve against
    base_dir: Path = field(default_factory=Path.cwd)


def config_path() -> Path:
    """Return the config file location."""
    return Path(os.environ.get(CONFIG_ENV, DEFAULT_CONFIG_NAME))


def load_config(path: Path | str | None = None) -> AnnotateConfig:
    """Load configuration from YAML, filling gaps from the environment.

    A missing file is not an error unless it was asked for explicitly.

    Raises:
        ConfigError: If the file is not a YAML mapping or holds bad values.
    """
    explicit = path is not None or CONFIG_ENV in os.environ
    cfg_path = Path(path) if path else config_path()

    data: dict = {}
    if cfg_path.is_file():
        with open(cfg_path) as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Config at {cfg_path} is not a YAML mapping")
        data = loaded or {}
    elif explicit:
        raise ConfigError(f"Config file not found: {cfg_path}")

    models = data.get("models") or []
    if isinstance(models, str):
        models = [models]
    if not isinstance(models, list):
        raise ConfigError("'models' must be a list of paths or glob patterns")

    tables = data.get("tables") or {}
    if not isinstance(tables, dict):
        raise ConfigError("'tables' must map file paths to table names")

    base_dir = cfg_path.resolve().parent if cfg_path.is_file() else Path.cwd()
    return AnnotateConfig(
        database_url=data.get("database_url") or os.environ.get(DATABASE_URL_ENV),
        options=RenderOptions.from_mapping(data),
        models=[str(m) for m in models],
        tables={
            str(base_dir / k) if not Path(k).is_absolute() else str(k): str(v)
            for k, v in tables.items()
        },
        base_dir=base_dir,
    )
