"""
Validation orchestrator: compiles each configured schema and validates its documents.

Schema entries are processed in configuration order and documents in the order
produced by expand_document_globs. A compile failure skips that entry only; a
document failure is recorded and processing continues. Each entry gets a fresh
registry so $ref overrides never leak between entries.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

from jsonschema.exceptions import SchemaError, ValidationError
from referencing import Registry
from referencing.exceptions import Unresolvable

from ..config.schemas import EffectiveSettings, SchemaEntry, ValidatorConfig
from ..exceptions import CompileError, UnsupportedSchemaVersion
from .details import ValidationErrorDetail
from .documents import expand_document_globs
from .drafts import DRAFT_04, Draft, resolve_draft
from .parser import FileParseError, parse_by_type, parse_file, read_text, resolve_file_type
from .refs import check_refs, local_retriever, register_ref_overrides, resolve_ref_overrides
from .templates import format_validation_error

logger = logging.getLogger(__name__)


def schema_uri_for(path: str) -> str:
    """file:// URI of the schema's absolute path"""
    return Path(path).resolve().as_uri()


@dataclass
class CompiledSchema:
    """A schema ready to validate documents"""
    path: str
    uri: str
    draft: Draft
    validator: Any

    def validate(self, document: Any) -> List[ValidationError]:
        """
        All validation errors for a document (empty when valid).

        Raises:
            CompileError: If a reference only reachable at validation time cannot be resolved
        """
        try:
            return list(self.validator.iter_errors(document))
        except Unresolvable as e:
            raise CompileError(f"$ref cannot be resolved: {e}") from e


def compile_schema_data(
    schema: Any,
    uri: str,
    draft: Draft,
    ref_overrides: Optional[Mapping[str, str]] = None,
    path: str = "",
) -> CompiledSchema:
    """
    Compile parsed schema content.

    Overrides are registered before the schema itself, then every $ref is
    resolved so broken references fail here rather than mid-validation.

    Raises:
        RefOverrideError: If an override file cannot be loaded
        CompileError: If the schema is invalid or a $ref cannot be resolved
    """
    if not isinstance(schema, (dict, bool)):
        raise CompileError(f"failed to compile schema: expected an object or boolean, got {type(schema).__name__}")

    try:
        draft.validator_class.check_schema(schema)
    except SchemaError as e:
        raise CompileError(f"failed to compile schema: {e.message}") from e

    id_keyword = "id" if draft is DRAFT_04 else "$id"
    if isinstance(schema, dict) and id_keyword not in schema:
        schema = {**schema, id_keyword: uri}

    registry = Registry(retrieve=local_retriever(draft.specification))
    registry = register_ref_overrides(registry, ref_overrides or {}, draft.specification)
    resource = draft.specification.create_resource(schema)
    registry = registry.with_resource(uri, resource).crawl()

    check_refs(resource, registry.resolver(base_uri=uri), draft.specification)

    validator = draft.validator_class(
        schema,
        registry=registry,
        format_checker=draft.validator_class.FORMAT_CHECKER,
    )
    logger.debug(f"Compiled {uri} as {draft.name}")
    return CompiledSchema(path=path, uri=uri, draft=draft, validator=validator)


def compile_schema(
    schema_path: str,
    schema_version: str = "",
    ref_overrides: Optional[Mapping[str, str]] = None,
) -> CompiledSchema:
    """
    Read, parse and compile a schema file.

    Raises:
        CompileError: Unparsable or invalid schema, unresolvable $ref, bad override file
        UnsupportedSchemaVersion: schema_version names no known draft
    """
    try:
        schema = parse_file(schema_path)
    except FileParseError as e:
        raise CompileError(f"failed to parse schema {schema_path!r}: {e}") from e

    draft = resolve_draft(schema_version, schema)
    return compile_schema_data(schema, schema_uri_for(schema_path), draft, ref_overrides, path=schema_path)


@dataclass
class DocumentResult:
    document: str
    valid: bool
    message: str = ""
    errors: List[ValidationErrorDetail] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass
class SchemaResult:
    schema: str
    documents: List[DocumentResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.error is None and all(d.valid for d in self.documents)


@dataclass
class RunResult:
    schemas: List[SchemaResult] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return all(s.valid for s in self.schemas)

    @property
    def exit_code(self) -> int:
        return 0 if self.valid else 1


class ValidationListener:
    """Receives outcomes as they happen. Default implementation does nothing."""

    def document_passed(self, schema: SchemaResult, document: DocumentResult) -> None:
        pass

    def document_failed(self, schema: SchemaResult, document: DocumentResult) -> None:
        pass

    def schema_failed(self, schema: SchemaResult) -> None:
        pass

    def finished(self, result: RunResult) -> None:
        pass


@dataclass
class ValidationOrchestrator:
    """
    Drives validation across every schema -> documents mapping of a configuration.

    Args:
        config: Merged, checked configuration
        force_filetype: Parse every document as this type instead of by extension
        listener: Notified of each outcome in order
    """
    config: ValidatorConfig
    force_filetype: Optional[str] = None
    listener: ValidationListener = field(default_factory=ValidationListener)

    def run(self) -> RunResult:
        result = RunResult()
        for entry in self.config.schemas:
            result.schemas.append(self.validate_entry(entry))
        self.listener.finished(result)
        logger.info(f"Validation {'passed' if result.valid else 'failed'} for {len(result.schemas)} schema(s)")
        return result

    def validate_entry(self, entry: SchemaEntry) -> SchemaResult:
        """Compile one schema and validate each of its documents"""
        settings = self.config.settings_for(entry)
        schema_result = SchemaResult(schema=entry.path)
        documents = expand_document_globs(entry.documents)
        overrides = resolve_ref_overrides(self.config.ref_overrides, entry.ref_overrides)

        try:
            compiled = compile_schema(entry.path, settings.schema_version, overrides)
        except (CompileError, UnsupportedSchemaVersion) as e:
            logger.info(f"Schema {entry.path} failed to compile: {e}")
            schema_result.error = str(e)
            self.listener.schema_failed(schema_result)
            return schema_result

        for document in documents:
            doc_result = self.validate_document(compiled, document, settings)
            schema_result.documents.append(doc_result)
            if doc_result.valid:
                self.listener.document_passed(schema_result, doc_result)
            else:
                self.listener.document_failed(schema_result, doc_result)

        return schema_result

    def validate_document(self, compiled: CompiledSchema, path: str, settings: EffectiveSettings) -> DocumentResult:
        try:
            text = read_text(path)
            data = parse_by_type(text, resolve_file_type(path, self.force_filetype))
        except FileParseError as e:
            logger.debug(f"Document {path} could not be parsed: {e}")
            return DocumentResult(document=path, valid=False, message=f"failed to parse document: {e}")

        try:
            errors = compiled.validate(data)
        except CompileError as e:
            return DocumentResult(document=path, valid=False, message=str(e))

        if not errors:
            logger.debug(f"Document {path} is valid against {compiled.path}")
            return DocumentResult(document=path, valid=True)

        message, context = format_validation_error(
            errors, compiled.path, compiled.uri, text, settings.error_template
        )
        logger.debug(f"Document {path} has {context.error_count} error(s)")
        return DocumentResult(document=path, valid=False, message=message, errors=context.errors)


def run_validation(
    config: ValidatorConfig,
    force_filetype: Optional[str] = None,
    listener: Optional[ValidationListener] = None,
) -> RunResult:
    """Validate every schema entry in config"""
    orchestrator = ValidationOrchestrator(
        config=config,
        force_filetype=force_filetype,
        listener=listener or ValidationListener(),
    )
    return orchestrator.run()
