"""
Document and schema parsing for JSON, JSON5, YAML and TOML files.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import json5
import toml
import yaml

logger = logging.getLogger(__name__)


class FileType(str, Enum):
    JSON = "json"
    JSON5 = "json5"
    YAML = "yaml"
    TOML = "toml"
    AUTO = "auto"


class FileParseError(ValueError):
    """Raised when a file or inline content cannot be parsed"""


_EXTENSIONS = {
    ".json": FileType.JSON,
    ".json5": FileType.JSON5,
    ".yaml": FileType.YAML,
    ".yml": FileType.YAML,
    ".toml": FileType.TOML,
}


def detect_file_type(path: Union[str, Path]) -> FileType:
    """
    Determine file type from extension.

    Unknown extensions fall back to JSON5, the most permissive format.
    """
    return _EXTENSIONS.get(Path(path).suffix.lower(), FileType.JSON5)


def _coerce_type(force_type: Optional[Union[str, FileType]]) -> FileType:
    if not force_type:
        return FileType.AUTO
    try:
        return FileType(str(force_type).lower())
    except ValueError:
        supported = ", ".join(t.value for t in FileType)
        raise FileParseError(f"unknown file type: {force_type!r} (supported: {supported})") from None


def parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FileParseError(f"parsing JSON: {e}") from e


def parse_json5(text: str) -> Any:
    try:
        return json5.loads(text)
    except ValueError as e:
        raise FileParseError(f"parsing JSON5: {e}") from e


def parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FileParseError(f"parsing YAML: {e}") from e


def parse_toml(text: str) -> Any:
    try:
        return toml.loads(text)
    except toml.TomlDecodeError as e:
        raise FileParseError(f"parsing TOML: {e}") from e


_PARSERS = {
    FileType.JSON: parse_json,
    FileType.JSON5: parse_json5,
    FileType.YAML: parse_yaml,
    FileType.TOML: parse_toml,
}


def parse_by_type(text: str, file_type: FileType) -> Any:
    parser = _PARSERS.get(file_type, parse_json5)
    return parser(text)


def detect_file_type_from_content(text: str) -> FileType:
    """
    Guess the format of inline content.

    Tries strict JSON, then TOML, then JSON5, then YAML (which accepts almost anything).
    """
    trimmed = text.strip()
    if not trimmed:
        raise FileParseError("empty content")

    for file_type in (FileType.JSON, FileType.TOML, FileType.JSON5, FileType.YAML):
        try:
            parse_by_type(trimmed, file_type)
        except FileParseError:
            continue
        return file_type

    raise FileParseError("unable to detect file type by content")


def parse_data(text: str, force_type: Optional[Union[str, FileType]] = None) -> Any:
    """
    Parse inline content, detecting its format unless one is forced.
    """
    file_type = _coerce_type(force_type)
    if file_type is FileType.AUTO:
        try:
            file_type = detect_file_type_from_content(text)
        except FileParseError as e:
            raise FileParseError(
                f"unable to detect file type from inline content; set force_filetype explicitly: {e}"
            ) from e
    return parse_by_type(text, file_type)


def read_text(path: Union[str, Path]) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise FileParseError(f"reading file: {e}") from e
    except UnicodeDecodeError as e:
        raise FileParseError(f"reading file: not valid UTF-8: {e}") from e


def parse_file(path: Union[str, Path], force_type: Optional[Union[str, FileType]] = None) -> Any:
    """
    Read and parse a file by its extension or a forced type.

    Args:
        path: File to read
        force_type: One of json, json5, yaml, toml; auto/None detects by extension

    Returns:
        Parsed value

    Raises:
        FileParseError: If the file cannot be read or parsed
    """
    file_type = resolve_file_type(path, force_type)
    logger.debug(f"Parsing {path} as {file_type.value}")
    return parse_by_type(read_text(path), file_type)


def resolve_file_type(path: Union[str, Path], force_type: Optional[Union[str, FileType]] = None) -> FileType:
    """Forced type if given, otherwise the type implied by the extension"""
    file_type = _coerce_type(force_type)
    if file_type is FileType.AUTO:
        return detect_file_type(path)
    return file_type
