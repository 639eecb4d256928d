"""
Translation of jsonschema's native error tree into flat, sorted error details.
"""

import json
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Iterator, List, Sequence

from jsonschema.exceptions import ValidationError

MAX_VALUE_LENGTH = 100
TRUNCATION_MARKER = "..."


def truncate(text: str, max_len: int) -> str:
    """Cut text to max_len characters, appending a marker when cut"""
    if len(text) <= max_len:
        return text
    return text[:max_len] + TRUNCATION_MARKER


def to_json_pointer(parts: Sequence[Any]) -> str:
    """
    RFC 6901 pointer for a path. The root is "" (not "/").
    """
    if not parts:
        return ""
    return "/" + "/".join(str(p).replace("~", "~0").replace("/", "~1") for p in parts)


def format_value(value: Any) -> str:
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        text = repr(value)
    return truncate(text, MAX_VALUE_LENGTH)


@dataclass
class ValidationErrorDetail:
    """One schema keyword violation"""
    message: str
    document_path: str
    schema_path: str
    value: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    def template_view(self) -> Dict[str, str]:
        """Field names exposed to error templates"""
        return {
            "Message": self.message,
            "Path": self.document_path,
            "DocumentPath": self.document_path,
            "SchemaPath": self.schema_path,
            "Value": self.value,
        }


def _leaves(error: ValidationError) -> Iterator[ValidationError]:
    # anyOf/oneOf failures carry the per-branch errors in .context
    if error.context:
        for child in error.context:
            yield from _leaves(child)
    else:
        yield error


def extract_validation_errors(errors: Iterable[ValidationError], schema_uri: str) -> List[ValidationErrorDetail]:
    """
    Flatten native errors to their leaves, sorted by document path then message.
    """
    details = []
    for error in errors:
        for leaf in _leaves(error):
            details.append(
                ValidationErrorDetail(
                    message=leaf.message,
                    document_path=to_json_pointer(list(leaf.absolute_path)),
                    schema_path=f"{schema_uri}#{to_json_pointer(list(leaf.absolute_schema_path))}",
                    value=format_value(leaf.instance),
                )
            )
    details.sort(key=lambda d: (d.document_path, d.message))
    return details


def build_full_message(schema_uri: str, details: Sequence[ValidationErrorDetail]) -> str:
    """Summary line followed by one "- at '<path>': <message>" line per error"""
    lines = [f"jsonschema validation failed with '{schema_uri}'"]
    lines.extend(f"- at '{d.document_path}': {d.message}" for d in details)
    return "\n".join(lines)
