"""
Terraform data-source shaped validation of inline document content.

Arguments mirror the data source: document, schema, schema_version,
error_message_template, ref_overrides. Provider-level defaults apply when an
argument is empty.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config.schemas import PartialConfig, SchemaEntry
from ..exceptions import DocumentError, DocumentValidationError
from .orchestrator import compile_schema
from .parser import FileParseError, parse_data
from .templates import format_validation_error

logger = logging.getLogger(__name__)


class ProviderDefaults(BaseModel):
    """Provider-level defaults"""
    schema_version: Optional[str] = Field(default=None, description="Default JSON Schema draft")
    error_message_template: Optional[str] = Field(default=None, description="Default error template")


class DataSourceArguments(BaseModel):
    """Arguments of a jsonschema_validator data source"""
    model_config = ConfigDict(populate_by_name=True)

    document: str = Field(description="Inline JSON/JSON5/YAML/TOML document content")
    schema_path: str = Field(alias="schema", description="Path to the schema file")
    schema_version: Optional[str] = Field(default=None, description="Draft override")
    error_message_template: Optional[str] = Field(default=None, description="Error template override")
    ref_overrides: Dict[str, str] = Field(default_factory=dict, description="Remote $ref URL -> local file")
    force_filetype: Optional[str] = Field(default=None, description="Format of the inline document")

    def to_partial_config(self) -> PartialConfig:
        """The same settings as a configuration layer"""
        return PartialConfig(
            schema_version=self.schema_version or None,
            error_template=self.error_message_template or None,
            schemas=[
                SchemaEntry(
                    path=self.schema_path,
                    schema_version=self.schema_version or None,
                    error_template=self.error_message_template or None,
                    ref_overrides=dict(self.ref_overrides),
                )
            ],
        )


@dataclass
class DataSourceResult:
    id: str
    validated: str


def canonical_json(value: Any) -> str:
    """Compact JSON with sorted keys; YAML dates and other non-JSON scalars become strings"""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def validate_data_source(args: DataSourceArguments, defaults: Optional[ProviderDefaults] = None) -> DataSourceResult:
    """
    Validate inline document content against a schema file.

    Returns:
        DataSourceResult with the canonical document and a content-derived id

    Raises:
        DocumentError: Document content cannot be parsed
        DocumentValidationError: Document fails the schema (message is the rendered template)
        CompileError: Schema cannot be compiled
        UnsupportedSchemaVersion: Unknown schema_version
    """
    defaults = defaults or ProviderDefaults()
    schema_version = args.schema_version or defaults.schema_version or ""
    template = args.error_message_template or defaults.error_message_template or ""

    try:
        document = parse_data(args.document, args.force_filetype)
    except FileParseError as e:
        raise DocumentError(f"failed to parse document: {e}") from e

    compiled = compile_schema(args.schema_path, schema_version, args.ref_overrides)

    errors = compiled.validate(document)
    if errors:
        message, context = format_validation_error(
            errors, args.schema_path, compiled.uri, args.document, template
        )
        raise DocumentValidationError(message, context.errors)

    validated = canonical_json(document)
    composite = f"{validated}:{canonical_json(compiled.validator.schema)}:{schema_version}"
    result_id = hashlib.sha256(composite.encode("utf-8")).hexdigest()
    logger.debug(f"Data source validated against {args.schema_path}: {result_id}")
    return DataSourceResult(id=result_id, validated=validated)
