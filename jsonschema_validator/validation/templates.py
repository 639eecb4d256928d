"""
Error message templating.

Templates are Jinja2, rendered in a sandbox over a fixed read-only context:

    SchemaFile / Schema   path of the schema file
    Document              document content, truncated
    FullMessage           complete error message
    ErrorCount            number of individual errors
    Errors                list of errors, each with Message, Path / DocumentPath,
                          SchemaPath and Value

Example:
    {{ ErrorCount }} error(s) in {{ SchemaFile }}:
    {% for e in Errors %}- {{ e.Path }}: {{ e.Message }}
    {% endfor %}

Templates without any Jinja markup use simple placeholders instead:
{error}, {full_message}, {schema}, {document}, {path}, {error_count}.

A broken template never raises; it renders a fallback message that still
contains the validation failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment
from jsonschema.exceptions import ValidationError

from .details import ValidationErrorDetail, build_full_message, extract_validation_errors, truncate

logger = logging.getLogger(__name__)

MAX_DOCUMENT_LENGTH = 500
DEFAULT_TEMPLATE = "{{ FullMessage }}"

COMMON_ERROR_TEMPLATES: Dict[str, str] = {
    "basic": "{% for e in Errors %}{{ e.Message }}\n{% endfor %}",
    "detailed": (
        "{{ ErrorCount }} validation error(s) found:\n"
        "{% for e in Errors %}{{ loop.index }}. {{ e.Message }} at {{ e.DocumentPath }}\n{% endfor %}"
    ),
    "simple": "{{ FullMessage }}",
    "with_path": "{% for e in Errors %}{{ e.DocumentPath }}: {{ e.Message }}\n{% endfor %}",
    "with_schema": "Schema {{ SchemaFile }} validation failed:\n{{ FullMessage }}",
    "verbose": (
        "Validation Results:\n"
        "Schema: {{ SchemaFile }}\n"
        "Errors: {{ ErrorCount }}\n"
        "Full Message: {{ FullMessage }}\n\n"
        "Individual Errors:\n"
        "{% for e in Errors %}Error {{ loop.index }}:\n"
        "  Document Path: {{ e.DocumentPath }}\n"
        "  Schema Path: {{ e.SchemaPath }}\n"
        "  Message: {{ e.Message }}{% if e.Value %}\n"
        "  Value: {{ e.Value }}{% endif %}\n\n"
        "{% endfor %}"
    ),
}

_environment = SandboxedEnvironment(undefined=StrictUndefined, autoescape=False)


@dataclass
class ErrorContext:
    """Everything a template may see for one failing document"""
    schema_file: str
    document: str
    full_message: str
    errors: List[ValidationErrorDetail] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def template_vars(self) -> Dict[str, Any]:
        return {
            "Schema": self.schema_file,
            "SchemaFile": self.schema_file,
            "Document": self.document,
            "FullMessage": self.full_message,
            "ErrorCount": self.error_count,
            "Errors": [e.template_view() for e in self.errors],
        }


def get_common_template(name: str) -> Optional[str]:
    """Built-in template by name, or None if there is no such template"""
    return COMMON_ERROR_TEMPLATES.get(name)


def list_common_templates() -> List[str]:
    return sorted(COMMON_ERROR_TEMPLATES.keys())


def resolve_template(template: Optional[str]) -> str:
    """
    Turn a configured template value into template text.

    Empty -> default template. "@name" or an exact built-in name -> that built-in.
    Anything else is used verbatim.
    """
    if not template:
        return DEFAULT_TEMPLATE
    name = template[1:] if template.startswith("@") else template
    common = get_common_template(name)
    if common is not None:
        return common
    if template.startswith("@"):
        logger.warning(f"Unknown built-in error template {name!r}; using it as literal text")
    return template


def build_error_context(
    schema_file: str,
    document: str,
    full_message: str,
    errors: Iterable[ValidationErrorDetail],
) -> ErrorContext:
    return ErrorContext(
        schema_file=schema_file,
        document=truncate(document or "", MAX_DOCUMENT_LENGTH),
        full_message=full_message,
        errors=list(errors),
    )


def _render_placeholders(template: str, context: ErrorContext) -> str:
    path = context.errors[0].document_path if context.errors else ""
    replacements = {
        "{error}": context.full_message,
        "{full_message}": context.full_message,
        "{schema}": context.schema_file,
        "{document}": context.document,
        "{path}": path,
        "{error_count}": str(context.error_count),
    }
    result = template
    for placeholder, value in replacements.items():
        result = result.replace(placeholder, value)
    return result


def _fallback(reason: str, context: ErrorContext) -> str:
    return f"validation failed (template error: {reason}): {context.full_message}"


def render_error(context: ErrorContext, template: Optional[str]) -> str:
    """
    Render an error context through a template.

    Never raises for a bad template: syntax or runtime failures produce a
    fallback message that embeds the full validation message.
    """
    text = resolve_template(template)

    if "{{" not in text and "{%" not in text:
        return _render_placeholders(text, context)

    try:
        return _environment.from_string(text).render(**context.template_vars())
    except TemplateError as e:
        logger.debug(f"Error template failed: {e}")
        return _fallback(str(e), context)
    except Exception as e:
        logger.debug(f"Error template raised {type(e).__name__}: {e}")
        return _fallback(f"{type(e).__name__}: {e}", context)


def format_validation_error(
    errors: Iterable[ValidationError],
    schema_file: str,
    schema_uri: str,
    document: str,
    template: Optional[str],
) -> Tuple[str, ErrorContext]:
    """
    Translate native validation errors and render them.

    Args:
        errors: Errors reported by the validator for one document
        schema_file: Schema path as configured
        schema_uri: Absolute URI the schema was compiled under
        document: Document content (or path) shown to the template
        template: Template text, built-in name, or None for the default

    Returns:
        (rendered message, error context)
    """
    details = extract_validation_errors(errors, schema_uri)
    context = build_error_context(schema_file, document, build_full_message(schema_uri, details), details)
    return render_error(context, template), context
