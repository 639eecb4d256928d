"""
Configuration schemas using Pydantic for validation and type safety.
"""

import os
from pathlib import Path
from typing import Optional, Dict, List, NamedTuple, Mapping
from pydantic import BaseModel, Field, field_validator

from ..exceptions import ConfigError


class EffectiveSettings(NamedTuple):
    """Per-entry settings after resolving entry values against global defaults"""
    schema_version: str
    error_template: str


def _coerce_document_list(v):
    """Allow a bare string where a list of documents is expected"""
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    return v


def _coerce_ref_overrides(v):
    if v is None:
        return {}
    return v


class SchemaEntry(BaseModel):
    """A schema file and the documents it validates"""
    path: str = Field(default="", description="Path to the JSON Schema file (JSON, JSON5, YAML or TOML)")
    documents: List[str] = Field(default_factory=list, description="Document paths or glob patterns")
    schema_version: Optional[str] = Field(default=None, description="Draft override for this schema")
    error_template: Optional[str] = Field(default=None, description="Error template override for this schema")
    ref_overrides: Dict[str, str] = Field(default_factory=dict, description="Remote $ref URL -> local file path")

    @field_validator("documents", mode="before")
    @classmethod
    def validate_documents(cls, v):
        return _coerce_document_list(v)

    @field_validator("ref_overrides", mode="before")
    @classmethod
    def validate_ref_overrides(cls, v):
        return _coerce_ref_overrides(v)

    def effective_settings(self, global_version: Optional[str], global_template: Optional[str]) -> EffectiveSettings:
        """
        Resolve schema version and error template against global defaults.

        Priority: entry value if non-empty, else global value, else "".
        """
        return EffectiveSettings(
            schema_version=self.schema_version or global_version or "",
            error_template=self.error_template or global_template or "",
        )

    def check(self) -> None:
        """
        Validate the entry before any document I/O.

        Raises:
            ConfigError: If the path is missing/unreadable or no documents are listed
        """
        if not self.path:
            raise ConfigError("schema path is required")
        if not self.documents:
            raise ConfigError("at least one document is required")

        schema_file = Path(self.path)
        if not schema_file.is_file():
            raise ConfigError(f"schema file {self.path!r}: no such file")
        if not os.access(schema_file, os.R_OK):
            raise ConfigError(f"schema file {self.path!r}: permission denied")


class ValidatorConfig(BaseModel):
    """Complete, merged configuration for one run"""
    schema_version: Optional[str] = Field(default=None, description="Default draft for entries without one")
    schemas: List[SchemaEntry] = Field(default_factory=list, description="Schema-document mappings, in order")
    error_template: Optional[str] = Field(default=None, description="Default error template")
    ref_overrides: Dict[str, str] = Field(default_factory=dict, description="Global $ref overrides")

    @field_validator("ref_overrides", mode="before")
    @classmethod
    def validate_ref_overrides(cls, v):
        return _coerce_ref_overrides(v)

    def settings_for(self, entry: SchemaEntry) -> EffectiveSettings:
        return entry.effective_settings(self.schema_version, self.error_template)

    def check(self) -> None:
        """
        Validate every entry, naming the offending index on failure.

        Raises:
            ConfigError: If no schemas are configured or an entry is invalid
        """
        if not self.schemas:
            raise ConfigError("no schemas configured")

        for i, entry in enumerate(self.schemas):
            try:
                entry.check()
            except ConfigError as e:
                raise ConfigError(f"schemas[{i}]: {e}") from e


class PartialConfig(BaseModel):
    """
    Configuration contributed by a single source.

    Every field is optional; None means "this source says nothing".
    schema_path and documents are only set by the environment and CLI layers
    and feed the entry-0 overlay.
    """
    schema_version: Optional[str] = None
    schemas: Optional[List[SchemaEntry]] = None
    error_template: Optional[str] = None
    ref_overrides: Optional[Dict[str, str]] = None
    schema_path: Optional[str] = None
    documents: Optional[List[str]] = None

    @field_validator("documents", mode="before")
    @classmethod
    def validate_documents(cls, v):
        if v is None:
            return None
        return _coerce_document_list(v)

    def is_empty(self) -> bool:
        return not any(value for value in self.model_dump().values())


def merge_ref_overrides(*sources: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """
    Merge $ref override maps, later sources winning on identical keys.

    Sources are given lowest priority first; None is treated as empty.
    """
    result: Dict[str, str] = {}
    for source in sources:
        if source:
            result.update(source)
    return result


def new_schema_entry(schema_path: str, *documents: str) -> SchemaEntry:
    """Build an entry with an empty override map"""
    return SchemaEntry(path=schema_path, documents=list(documents), ref_overrides={})
