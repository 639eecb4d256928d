"""
JSON Schema draft selection.

Accepted spellings are case-insensitive and whitespace-trimmed:
"draft/2020-12", "2020-12" and "draft-2020-12" name the same draft, likewise
for 2019-09; the single-digit drafts accept "draft-07", "draft/07", "7", etc.
"""

import re
from typing import Any, Dict, List, NamedTuple

from jsonschema import (
    Draft4Validator,
    Draft6Validator,
    Draft7Validator,
    Draft201909Validator,
    Draft202012Validator,
)
from jsonschema.validators import validator_for
from referencing import Specification
from referencing.jsonschema import DRAFT4, DRAFT6, DRAFT7, DRAFT201909, DRAFT202012

from ..exceptions import UnsupportedSchemaVersion


class Draft(NamedTuple):
    name: str
    validator_class: type
    specification: Specification


DRAFT_2020_12 = Draft("draft/2020-12", Draft202012Validator, DRAFT202012)
DRAFT_2019_09 = Draft("draft/2019-09", Draft201909Validator, DRAFT201909)
DRAFT_07 = Draft("draft-07", Draft7Validator, DRAFT7)
DRAFT_06 = Draft("draft-06", Draft6Validator, DRAFT6)
DRAFT_04 = Draft("draft-04", Draft4Validator, DRAFT4)

# Keyed by normalized version string
_DRAFTS: Dict[str, Draft] = {
    "2020-12": DRAFT_2020_12,
    "2019-09": DRAFT_2019_09,
    "7": DRAFT_07,
    "6": DRAFT_06,
    "4": DRAFT_04,
}

SUPPORTED_VERSIONS: List[str] = [draft.name for draft in _DRAFTS.values()]

_DRAFT_PREFIX = re.compile(r"^draft[-/_ ]?")


def normalize_schema_version(version: str) -> str:
    """Reduce a version string to its table key ("draft-07" -> "7")"""
    normalized = _DRAFT_PREFIX.sub("", version.strip().lower())
    if normalized.isdigit():
        normalized = str(int(normalized))
    return normalized


def get_draft(version: str) -> Draft:
    """
    Look up a draft by any accepted spelling.

    Raises:
        UnsupportedSchemaVersion: If the string names no known draft
    """
    draft = _DRAFTS.get(normalize_schema_version(version))
    if draft is None:
        raise UnsupportedSchemaVersion(version, SUPPORTED_VERSIONS)
    return draft


def draft_for_schema(schema: Any, default: Draft = DRAFT_2020_12) -> Draft:
    """Draft declared by the schema's $schema keyword, or default when absent or unknown"""
    if not isinstance(schema, dict) or "$schema" not in schema:
        return default
    cls = validator_for(schema, default=default.validator_class)
    for draft in _DRAFTS.values():
        if draft.validator_class is cls:
            return draft
    return default


def resolve_draft(version: str, schema: Any) -> Draft:
    """
    Pick the draft for a schema.

    The configured version is a default: a $schema keyword in the schema wins.
    An invalid configured version is an error even when $schema is present.
    """
    default = get_draft(version) if version else DRAFT_2020_12
    return draft_for_schema(schema, default)
