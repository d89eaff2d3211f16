"""Exception types raised by schema-annotate."""

from __future__ import annotations


class AnnotateError(Exception):
    """Base class for schema-annotate errors."""


class ProviderError(AnnotateError):
    """A metadata query against the database failed."""

    def __init__(self, table: object, cause: BaseException) -> None:
        self.table = str(table)
        self.cause = cause
        super().__init__(f"Failed to read schema for table {self.table}: {cause}")


class ContractError(AnnotateError):
    """A caller passed malformed input (programming error)."""


class ConfigError(AnnotateError):
    """The configuration file or an option value is invalid."""
