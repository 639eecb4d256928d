"""
Validation: parsing, document expansion, draft selection, $ref overrides,
error templating and orchestration
"""

from .parser import FileType, FileParseError, parse_file, parse_data, detect_file_type
from .documents import contains_glob_chars, expand_document_globs
from .drafts import Draft, SUPPORTED_VERSIONS, get_draft, normalize_schema_version
from .details import ValidationErrorDetail
from .templates import (
    COMMON_ERROR_TEMPLATES,
    ErrorContext,
    get_common_template,
    render_error,
    format_validation_error,
)
from .refs import resolve_ref_overrides

__all__ = [
    "FileType",
    "FileParseError",
    "parse_file",
    "parse_data",
    "detect_file_type",
    "contains_glob_chars",
    "expand_document_globs",
    "Draft",
    "SUPPORTED_VERSIONS",
    "get_draft",
    "normalize_schema_version",
    "ValidationErrorDetail",
    "COMMON_ERROR_TEMPLATES",
    "ErrorContext",
    "get_common_template",
    "render_error",
    "format_validation_error",
    "resolve_ref_overrides",
]
