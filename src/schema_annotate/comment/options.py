"""Render options and their validation."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from schema_annotate.errors import ConfigError

APPEND = "append"
PREPEND = "prepend"
POSITIONS = (APPEND, PREPEND)


@dataclass(frozen=True)
class RenderOptions:
    """Which sections to render and where the block goes in the file.

    ``constraints``, ``references`` and ``triggers`` only matter for
    backends that report them (PostgreSQL).
    """

    border: bool = False
    indexes: bool = True
    foreign_keys: bool = True
    constraints: bool = True
    references: bool = True
    triggers: bool = True
    position: str = APPEND

    def __post_init__(self) -> None:
        if self.position not in POSITIONS:
            raise ConfigError(
                f"Unknown position {self.position!r}. Valid: {', '.join(POSITIONS)}"
            )

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> RenderOptions:
        """Build options from a config mapping, ignoring unrelated keys."""
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            value = data[f.name]
            if f.name == "position":
                kwargs[f.name] = str(value)
            elif isinstance(value, bool):
                kwargs[f.name] = value
            else:
                raise ConfigError(f"Option '{f.name}' must be true or false, got {value!r}")
        return cls(**kwargs)
