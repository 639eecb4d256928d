"""
Configuration source readers.

Each reader looks for one kind of configuration source and returns a
ConfigSource (a PartialConfig plus its priority), or None when the source is
absent. A source that exists but cannot be parsed raises ConfigError: malformed
configuration is never treated as missing configuration.

Discovery order (first found wins, see loader.merge_config):
    1. .jsonschema-validator.yaml (or .yml/.toml/.json) in the working directory
    2. pyproject.toml, section [tool.jsonschema-validator]
    3. package.json, field "jsonschema-validator"
    4. ~/.jsonschema-validator.yaml
Environment variables are read separately by read_env.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..exceptions import ConfigError
from ..validation.parser import FileParseError, FileType, parse_by_type, read_text
from .schemas import PartialConfig

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "JSONSCHEMA_VALIDATOR_"
TOOL_NAME = "jsonschema-validator"

# Priority ranks, higher wins
PRIORITY_CLI = 100
PRIORITY_ENV = 90
PRIORITY_EXPLICIT_FILE = 80
PRIORITY_PROJECT_FILE = 40
PRIORITY_PYPROJECT = 30
PRIORITY_PACKAGE_JSON = 20
PRIORITY_HOME_FILE = 10

PROJECT_FILE_CANDIDATES = [
    ".jsonschema-validator.yaml",
    ".jsonschema-validator.yml",
    ".jsonschema-validator.toml",
    ".jsonschema-validator.json",
    ".jsonschema.yaml",
    ".jsonschema.yml",
    "jsonschema-validator.yaml",
    "jsonschema-validator.yml",
]

HOME_FILE_CANDIDATES = [
    ".jsonschema-validator.yaml",
    ".jsonschema-validator.yml",
]

_CONFIG_FILE_TYPES = {
    ".yaml": FileType.YAML,
    ".yml": FileType.YAML,
    ".toml": FileType.TOML,
    ".json": FileType.JSON,
}

_TOP_LEVEL_FIELDS = {"schema_version", "schemas", "error_template", "ref_overrides"}
_ENTRY_FIELDS = {"path", "documents", "schema_version", "error_template", "ref_overrides"}

# Names used by other front-ends for the same fields
_FIELD_ALIASES = {
    "error_message_template": "error_template",
    "document": "documents",
    "schema": "path",
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class SourceContext:
    """Where to look for configuration files"""
    cwd: Path
    home: Path

    @classmethod
    def current(cls) -> "SourceContext":
        return cls(cwd=Path.cwd(), home=Path.home())


@dataclass
class ConfigSource:
    """A partial configuration and where it came from"""
    name: str
    priority: int
    config: PartialConfig = field(default_factory=PartialConfig)
    path: Optional[Path] = None


def _canonical_key(key: str, naming: str) -> str:
    if naming == "camel":
        key = _CAMEL_BOUNDARY.sub("_", key).lower()
    return key.replace("-", "_")


def _adapt_mapping(raw: Mapping[str, Any], allowed: set, naming: str, where: str) -> Dict[str, Any]:
    adapted: Dict[str, Any] = {}
    for key, value in raw.items():
        canonical = _canonical_key(str(key), naming)
        canonical = _FIELD_ALIASES.get(canonical, canonical)
        if canonical not in allowed:
            logger.warning(f"{where}: ignoring unknown configuration key {key!r}")
            continue
        adapted[canonical] = value
    return adapted


def adapt_keys(raw: Any, naming: str, where: str) -> PartialConfig:
    """
    Rename source keys to canonical field names and build a PartialConfig.

    Args:
        raw: Parsed configuration mapping (None for an empty file)
        naming: "snake" for YAML/TOML (kebab-case tolerated), "camel" for JSON
        where: Source description used in error messages

    Raises:
        ConfigError: If the structure does not match the configuration model
    """
    if raw is None:
        return PartialConfig()
    if not isinstance(raw, Mapping):
        raise ConfigError(f"{where}: expected a mapping at top level, got {type(raw).__name__}")

    data = _adapt_mapping(raw, _TOP_LEVEL_FIELDS, naming, where)

    if "schemas" in data:
        schemas = data["schemas"]
        if not isinstance(schemas, list):
            raise ConfigError(f"{where}: 'schemas' must be a list")
        entries: List[Dict[str, Any]] = []
        for i, entry in enumerate(schemas):
            if not isinstance(entry, Mapping):
                raise ConfigError(f"{where}: schemas[{i}] must be a mapping")
            entries.append(_adapt_mapping(entry, _ENTRY_FIELDS, naming, f"{where} schemas[{i}]"))
        data["schemas"] = entries

    try:
        return PartialConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"{where}: invalid configuration: {e}") from e


def _parse_config_text(path: Path, file_type: FileType) -> Any:
    try:
        return parse_by_type(read_text(path), file_type)
    except FileParseError as e:
        raise ConfigError(f"loading config file {str(path)!r}: {e}") from e


def read_config_file(path: Path, name: str = "config file", priority: int = PRIORITY_EXPLICIT_FILE) -> ConfigSource:
    """
    Read a standalone configuration file, dispatching on its extension.

    Raises:
        ConfigError: If the file is missing, has an unsupported extension, or is malformed
    """
    path = Path(path)
    file_type = _CONFIG_FILE_TYPES.get(path.suffix.lower())
    if file_type is None:
        raise ConfigError(
            f"unsupported config file format: {path.suffix or '(none)'}. Use .yaml, .yml, .toml, or .json"
        )
    if not path.is_file():
        raise ConfigError(f"config file not found: {str(path)!r}")

    raw = _parse_config_text(path, file_type)
    naming = "camel" if file_type is FileType.JSON else "snake"
    return ConfigSource(name=name, priority=priority, config=adapt_keys(raw, naming, str(path)), path=path)


def read_project_file(ctx: SourceContext) -> Optional[ConfigSource]:
    """Project-level file in the working directory"""
    for candidate in PROJECT_FILE_CANDIDATES:
        path = ctx.cwd / candidate
        if path.is_file():
            return read_config_file(path, name="project file", priority=PRIORITY_PROJECT_FILE)
        logger.debug(f"No project config at {path}")
    return None


def read_pyproject(ctx: SourceContext) -> Optional[ConfigSource]:
    """[tool.jsonschema-validator] in pyproject.toml"""
    path = ctx.cwd / "pyproject.toml"
    if not path.is_file():
        return None

    data = _parse_config_text(path, FileType.TOML)
    tool = data.get("tool") or {}
    if not isinstance(tool, Mapping):
        raise ConfigError(f"{path}: 'tool' must be a table, got {type(tool).__name__}")
    section = tool.get(TOOL_NAME)
    if section is None:
        logger.debug(f"{path} has no [tool.{TOOL_NAME}] section")
        return None

    where = f"{path} [tool.{TOOL_NAME}]"
    return ConfigSource(
        name="pyproject.toml",
        priority=PRIORITY_PYPROJECT,
        config=adapt_keys(section, "snake", where),
        path=path,
    )


def read_package_json(ctx: SourceContext) -> Optional[ConfigSource]:
    """"jsonschema-validator" field in package.json (camelCase keys)"""
    path = ctx.cwd / "package.json"
    if not path.is_file():
        return None

    data = _parse_config_text(path, FileType.JSON)
    if not isinstance(data, Mapping) or TOOL_NAME not in data:
        logger.debug(f"{path} has no {TOOL_NAME!r} field")
        return None

    return ConfigSource(
        name="package.json",
        priority=PRIORITY_PACKAGE_JSON,
        config=adapt_keys(data[TOOL_NAME], "camel", f"{path} {TOOL_NAME!r}"),
        path=path,
    )


def read_home_file(ctx: SourceContext) -> Optional[ConfigSource]:
    """User-level file in the home directory"""
    for candidate in HOME_FILE_CANDIDATES:
        path = ctx.home / candidate
        if path.is_file():
            return read_config_file(path, name="home file", priority=PRIORITY_HOME_FILE)
    return None


DISCOVERY_READERS: List[Callable[[SourceContext], Optional[ConfigSource]]] = [
    read_project_file,
    read_pyproject,
    read_package_json,
    read_home_file,
]


def discover_config_source(ctx: Optional[SourceContext] = None) -> Optional[ConfigSource]:
    """
    Return the first configuration source found, in discovery order.

    Lower-priority file sources are not consulted once one is found.
    """
    ctx = ctx or SourceContext.current()
    for reader in DISCOVERY_READERS:
        source = reader(ctx)
        if source is not None:
            logger.info(f"Using configuration from {source.name}: {source.path}")
            return source
    logger.info("No configuration file found")
    return None


def normalize_env_prefix(prefix: Optional[str]) -> str:
    """Ensure the prefix is non-empty and ends with an underscore"""
    if not prefix:
        return DEFAULT_ENV_PREFIX
    if not prefix.endswith("_"):
        prefix += "_"
    return prefix


def parse_ref_overrides_from_string(value: str) -> Dict[str, str]:
    """
    Parse "url1=path1,url2=path2".

    Malformed pairs and pairs with an empty side are ignored.
    """
    if not value:
        return {}
    return parse_ref_overrides_from_slice(value.split(","))


def parse_ref_overrides_from_slice(items: List[str]) -> Dict[str, str]:
    """Parse a list of "url=path" strings, as given by repeated --ref-override flags"""
    overrides: Dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            continue
        url, path = item.split("=", 1)
        url, path = url.strip(), path.strip()
        if url and path:
            overrides[url] = path
    return overrides


def read_env(prefix: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> ConfigSource:
    """
    Read configuration from environment variables.

    Recognized (with default prefix):
        JSONSCHEMA_VALIDATOR_SCHEMA_VERSION=draft/2020-12
        JSONSCHEMA_VALIDATOR_SCHEMA=schemas/config.json
        JSONSCHEMA_VALIDATOR_ERROR_TEMPLATE="{{ FullMessage }}"
        JSONSCHEMA_VALIDATOR_REF_OVERRIDES="https://example.com/a.json=./a.json,..."
    """
    prefix = normalize_env_prefix(prefix)
    environ = os.environ if environ is None else environ

    def get(name: str) -> Optional[str]:
        value = environ.get(prefix + name)
        return value if value else None

    overrides = get("REF_OVERRIDES")
    partial = PartialConfig(
        schema_version=get("SCHEMA_VERSION"),
        schema_path=get("SCHEMA"),
        error_template=get("ERROR_TEMPLATE"),
        ref_overrides=parse_ref_overrides_from_string(overrides) if overrides else None,
    )
    if not partial.is_empty():
        logger.debug(f"Environment configuration found with prefix {prefix}")
    return ConfigSource(name="environment", priority=PRIORITY_ENV, config=partial)
