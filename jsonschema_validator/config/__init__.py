"""
Configuration system: schemas, source readers and loaders
"""

from .schemas import (
    EffectiveSettings,
    SchemaEntry,
    ValidatorConfig,
    PartialConfig,
    merge_ref_overrides,
    new_schema_entry,
)
from .sources import (
    DEFAULT_ENV_PREFIX,
    ConfigSource,
    SourceContext,
    discover_config_source,
    read_env,
    parse_ref_overrides_from_string,
    parse_ref_overrides_from_slice,
)
from .loader import load_config, build_cli_overlay, merge_config, resolve_config

__all__ = [
    "EffectiveSettings",
    "SchemaEntry",
    "ValidatorConfig",
    "PartialConfig",
    "merge_ref_overrides",
    "new_schema_entry",
    "DEFAULT_ENV_PREFIX",
    "ConfigSource",
    "SourceContext",
    "discover_config_source",
    "read_env",
    "parse_ref_overrides_from_string",
    "parse_ref_overrides_from_slice",
    "load_config",
    "build_cli_overlay",
    "merge_config",
    "resolve_config",
]
