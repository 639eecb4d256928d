"""
Tests for configuration source readers and discovery order.
"""

import json
import pytest

from jsonschema_validator.config.sources import (
    DEFAULT_ENV_PREFIX,
    SourceContext,
    adapt_keys,
    discover_config_source,
    normalize_env_prefix,
    parse_ref_overrides_from_slice,
    parse_ref_overrides_from_string,
    read_env,
    read_home_file,
    read_package_json,
    read_project_file,
    read_pyproject,
)
from jsonschema_validator.exceptions import ConfigError


@pytest.fixture
def ctx(workdir, tmp_path):
    return SourceContext(cwd=workdir, home=tmp_path / "home")


PYPROJECT = """
[project]
name = "demo"

[tool.jsonschema-validator]
schema-version = "draft-07"

[[tool.jsonschema-validator.schemas]]
path = "schema.json"
documents = ["a.json"]
"""


def test_readers_return_none_when_absent(ctx):
    assert read_project_file(ctx) is None
    assert read_pyproject(ctx) is None
    assert read_package_json(ctx) is None
    assert read_home_file(ctx) is None
    assert discover_config_source(ctx) is None


def test_read_pyproject_section(ctx):
    (ctx.cwd / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    source = read_pyproject(ctx)
    assert source is not None
    assert source.config.schema_version == "draft-07"
    assert source.config.schemas[0].documents == ["a.json"]


def test_read_pyproject_without_section(ctx):
    (ctx.cwd / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")
    assert read_pyproject(ctx) is None


def test_read_pyproject_malformed(ctx):
    (ctx.cwd / "pyproject.toml").write_text("[project\nname=", encoding="utf-8")
    with pytest.raises(ConfigError):
        read_pyproject(ctx)


def test_read_package_json_camel_case(ctx):
    (ctx.cwd / "package.json").write_text(json.dumps({
        "name": "demo",
        "jsonschema-validator": {
            "schemaVersion": "draft/2019-09",
            "errorTemplate": "@detailed",
            "schemas": [{
                "path": "schema.json",
                "documents": ["a.json"],
                "refOverrides": {"https://example.com/Thing.json": "thing.json"},
            }],
        },
    }), encoding="utf-8")

    source = read_package_json(ctx)
    assert source.config.schema_version == "draft/2019-09"
    assert source.config.error_template == "@detailed"
    # URL keys inside the override map are never renamed
    assert source.config.schemas[0].ref_overrides == {"https://example.com/Thing.json": "thing.json"}


def test_read_package_json_without_field(ctx):
    (ctx.cwd / "package.json").write_text(json.dumps({"name": "demo"}), encoding="utf-8")
    assert read_package_json(ctx) is None


def test_read_home_file(ctx):
    (ctx.home / ".jsonschema-validator.yaml").write_text("schema_version: '6'\n", encoding="utf-8")
    source = read_home_file(ctx)
    assert source.config.schema_version == "6"


def test_project_file_sibling_extensions(ctx):
    (ctx.cwd / ".jsonschema-validator.toml").write_text('schema_version = "4"\n', encoding="utf-8")
    source = read_project_file(ctx)
    assert source.config.schema_version == "4"


def test_discovery_stops_at_first_found(ctx):
    """Project file wins outright over pyproject, package.json and home file"""
    (ctx.cwd / ".jsonschema-validator.yaml").write_text("error_template: project\n", encoding="utf-8")
    (ctx.cwd / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    (ctx.home / ".jsonschema-validator.yaml").write_text("schema_version: '6'\n", encoding="utf-8")

    source = discover_config_source(ctx)
    assert source.name == "project file"
    assert source.config.error_template == "project"
    # not merged with lower-priority files
    assert source.config.schema_version is None


def test_discovery_falls_through_to_home(ctx):
    (ctx.home / ".jsonschema-validator.yaml").write_text("schema_version: '6'\n", encoding="utf-8")
    assert discover_config_source(ctx).name == "home file"


def test_malformed_discovered_file_is_hard_failure(ctx):
    (ctx.cwd / ".jsonschema-validator.yaml").write_text("schemas: [\n", encoding="utf-8")
    (ctx.home / ".jsonschema-validator.yaml").write_text("schema_version: '6'\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        discover_config_source(ctx)


def test_adapt_keys_ignores_unknown(caplog):
    partial = adapt_keys({"schema_version": "7", "colour": "blue"}, "snake", "test")
    assert partial.schema_version == "7"
    assert "colour" in caplog.text


def test_adapt_keys_terraform_names():
    partial = adapt_keys(
        {"error_message_template": "t", "schemas": [{"schema": "s.json", "document": "d.json"}]},
        "snake",
        "test",
    )
    assert partial.error_template == "t"
    assert partial.schemas[0].path == "s.json"
    assert partial.schemas[0].documents == ["d.json"]


def test_adapt_keys_rejects_non_mapping():
    with pytest.raises(ConfigError, match="expected a mapping"):
        adapt_keys(["not", "a", "mapping"], "snake", "test")


def test_read_env_fields():
    source = read_env(environ={
        "JSONSCHEMA_VALIDATOR_SCHEMA_VERSION": "draft-07",
        "JSONSCHEMA_VALIDATOR_SCHEMA": "s.json",
        "JSONSCHEMA_VALIDATOR_ERROR_TEMPLATE": "{error}",
        "JSONSCHEMA_VALIDATOR_REF_OVERRIDES": "https://a=./a.json, https://b=./b.json",
        "OTHER_SCHEMA": "ignored.json",
    })
    assert source.config.schema_version == "draft-07"
    assert source.config.schema_path == "s.json"
    assert source.config.error_template == "{error}"
    assert source.config.ref_overrides == {"https://a": "./a.json", "https://b": "./b.json"}


def test_read_env_empty():
    source = read_env(environ={})
    assert source.config.is_empty()


def test_normalize_env_prefix():
    assert normalize_env_prefix(None) == DEFAULT_ENV_PREFIX
    assert normalize_env_prefix("") == DEFAULT_ENV_PREFIX
    assert normalize_env_prefix("MYAPP") == "MYAPP_"
    assert normalize_env_prefix("MYAPP_") == "MYAPP_"


def test_parse_ref_overrides_from_string():
    assert parse_ref_overrides_from_string("") == {}
    assert parse_ref_overrides_from_string("u1=p1,u2=p2") == {"u1": "p1", "u2": "p2"}
    assert parse_ref_overrides_from_string("noequals,=empty,key=,ok=1") == {"ok": "1"}


def test_parse_ref_overrides_from_slice_keeps_equals_in_path():
    assert parse_ref_overrides_from_slice(["https://x?a=b=local.json"]) == {"https://x?a": "b=local.json"}


def test_read_pyproject_tool_not_a_table(ctx):
    (ctx.cwd / "pyproject.toml").write_text('tool = "oops"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="'tool' must be a table"):
        read_pyproject(ctx)
