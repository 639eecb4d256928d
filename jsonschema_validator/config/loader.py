"""
Configuration loader: file discovery, environment overrides, and CLI overrides.

Priority, highest to lowest:
    CLI flags > environment variables > explicit --config file
    > .jsonschema-validator.yaml > pyproject.toml > package.json > home file

Only one file source is used per run. CLI flags and environment variables
always layer on top of it.
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from ..validation.drafts import get_draft
from .schemas import PartialConfig, SchemaEntry, ValidatorConfig, merge_ref_overrides, new_schema_entry
from .sources import (
    PRIORITY_CLI,
    ConfigSource,
    SourceContext,
    discover_config_source,
    parse_ref_overrides_from_slice,
    read_config_file,
    read_env,
)

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = ("schema_version", "error_template")


def load_config(path: Union[str, Path]) -> ValidatorConfig:
    """
    Load configuration from a single YAML, TOML or JSON file.

    No environment or CLI overrides are applied and entries are not checked.

    Raises:
        ConfigError: If the file is missing, unsupported, or malformed
    """
    source = read_config_file(Path(path))
    return merge_config(discovered_sources=[source], check=False)


def build_cli_overlay(
    schema: Optional[str] = None,
    documents: Optional[Sequence[str]] = None,
    schema_version: Optional[str] = None,
    error_template: Optional[str] = None,
    ref_overrides: Optional[Sequence[str]] = None,
) -> ConfigSource:
    """
    Build the highest-priority layer from command-line values.

    Args:
        schema: --schema path
        documents: --document values followed by positional arguments
        schema_version: --schema-version
        error_template: --error-template
        ref_overrides: repeated --ref-override "url=path" strings
    """
    overrides = parse_ref_overrides_from_slice(list(ref_overrides or []))
    partial = PartialConfig(
        schema_path=schema or None,
        documents=list(documents) if documents else None,
        schema_version=schema_version or None,
        error_template=error_template or None,
        ref_overrides=overrides or None,
    )
    return ConfigSource(name="command line", priority=PRIORITY_CLI, config=partial)


def _highest(layers: List[ConfigSource], field_name: str):
    """Value from the highest-priority layer that sets field_name"""
    value = None
    for layer in layers:
        candidate = getattr(layer.config, field_name)
        if candidate:
            value = candidate
    return value


def _overlay_first_entry(
    schemas: List[SchemaEntry],
    schema_path: Optional[str],
    documents: Optional[List[str]],
) -> List[SchemaEntry]:
    """
    Replace entry 0 with a fresh entry built from CLI/env values.

    Missing parts fall back to the existing entry 0. Returns a new list.
    """
    base = schemas[0] if schemas else None
    entry = new_schema_entry(
        schema_path or (base.path if base else ""),
        *(documents or (base.documents if base else [])),
    )
    return [entry] + schemas[1:]


def merge_config(
    explicit_config_file: Optional[Union[str, Path]] = None,
    env_values: Optional[ConfigSource] = None,
    discovered_sources: Optional[Sequence[Optional[ConfigSource]]] = None,
    cli_overlay: Optional[ConfigSource] = None,
    check: bool = True,
) -> ValidatorConfig:
    """
    Merge configuration layers into one effective configuration.

    Args:
        explicit_config_file: --config path; replaces discovery when given
        env_values: Layer read from environment variables
        discovered_sources: File sources in discovery order; the first one present is used
        cli_overlay: Layer built from command-line flags
        check: Validate entries (paths exist, documents listed) and the global draft

    Returns:
        ValidatorConfig

    Raises:
        ConfigError: Unreadable config file or invalid entries
        UnsupportedSchemaVersion: Global schema_version names no known draft
    """
    if explicit_config_file:
        file_source = read_config_file(Path(explicit_config_file))
    else:
        file_source = next((s for s in (discovered_sources or []) if s is not None), None)

    layers = sorted(
        (layer for layer in (file_source, env_values, cli_overlay) if layer is not None),
        key=lambda layer: layer.priority,
    )
    for layer in layers:
        logger.debug(f"Config layer {layer.name} (priority {layer.priority})")

    merged = {name: _highest(layers, name) for name in _SCALAR_FIELDS}
    merged["ref_overrides"] = merge_ref_overrides(*(layer.config.ref_overrides for layer in layers))

    schemas = list(file_source.config.schemas or []) if file_source else []
    schema_path = _highest(layers, "schema_path")
    documents = _highest(layers, "documents")
    if schema_path or documents:
        schemas = _overlay_first_entry(schemas, schema_path, documents)

    cfg = ValidatorConfig(schemas=schemas, **merged)

    if check:
        cfg.check()
        if cfg.schema_version:
            get_draft(cfg.schema_version)

    return cfg


def resolve_config(
    config_file: Optional[Union[str, Path]] = None,
    env_prefix: Optional[str] = None,
    cli_overlay: Optional[ConfigSource] = None,
    ctx: Optional[SourceContext] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ValidatorConfig:
    """
    Read every applicable source and merge them.

    File discovery only runs when no explicit config file is given.
    """
    env_values = read_env(env_prefix, environ)
    discovered: List[Optional[ConfigSource]] = []
    if not config_file:
        discovered.append(discover_config_source(ctx))

    return merge_config(
        explicit_config_file=config_file,
        env_values=env_values,
        discovered_sources=discovered,
        cli_overlay=cli_overlay,
    )
