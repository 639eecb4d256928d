"""
Tests for the command-line entrypoint.
"""

import json
import pytest

import yaml

from jsonschema_validator import __version__
from jsonschema_validator.run.cli import (
    EXIT_SUCCESS,
    EXIT_USAGE_ERROR,
    EXIT_VALIDATION_FAIL,
    build_parser,
    main,
)

from conftest import write_json


@pytest.fixture
def good_doc(workdir):
    return write_json(workdir / "good.json", {"name": "Jo", "age": 30})


@pytest.fixture
def bad_doc(workdir):
    return write_json(workdir / "bad.json", {"name": "", "age": -5})


def test_valid_document(person_schema, good_doc, capsys):
    code = main(["-s", str(person_schema), "good.json"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "✓ good.json: valid" in out


def test_invalid_document(person_schema, bad_doc, capsys):
    code = main(["-s", str(person_schema), "-d", "bad.json"])
    err = capsys.readouterr().err
    assert code == EXIT_VALIDATION_FAIL
    assert 'document "bad.json": jsonschema validation failed' in err


def test_quiet_hides_success_lines(person_schema, good_doc, capsys):
    assert main(["-q", "-s", str(person_schema), "good.json"]) == EXIT_SUCCESS
    assert capsys.readouterr().out == ""


def test_summary_with_verbose(person_schema, good_doc, bad_doc, capsys):
    main(["-v", "-s", str(person_schema), "good.json", "bad.json"])
    assert "Documents: 2 (1 failed)" in capsys.readouterr().out


def test_error_template_flag(person_schema, bad_doc, capsys):
    main(["-s", str(person_schema), "-e", "{{ ErrorCount }} errors", "bad.json"])
    assert 'document "bad.json": 2 errors' in capsys.readouterr().err


def test_nothing_configured_is_usage_error(workdir, capsys):
    assert main([]) == EXIT_USAGE_ERROR
    assert "Error: no schemas configured" in capsys.readouterr().err


def test_documents_without_schema_is_usage_error(workdir, capsys):
    assert main(["doc.json"]) == EXIT_USAGE_ERROR
    assert "schemas[0]: schema path is required" in capsys.readouterr().err


def test_unsupported_version_is_usage_error(person_schema, good_doc, capsys):
    code = main(["-s", str(person_schema), "--schema-version", "draft-99", "good.json"])
    assert code == EXIT_USAGE_ERROR
    assert "unsupported schema version" in capsys.readouterr().err


def test_missing_config_file_is_usage_error(workdir, capsys):
    assert main(["-c", "nope.yaml"]) == EXIT_USAGE_ERROR


def test_compile_failure_exits_one(workdir, good_doc, capsys):
    schema = write_json(workdir / "broken.schema.json", {"$ref": "https://example.com/missing.json"})
    code = main(["-s", str(schema), "good.json"])
    assert code == EXIT_VALIDATION_FAIL
    assert f'schema "{schema}"' in capsys.readouterr().err


def test_config_file_discovery(workdir, person_schema, good_doc, capsys):
    (workdir / ".jsonschema-validator.yaml").write_text(yaml.safe_dump({
        "schemas": [{"path": person_schema.name, "documents": ["*.json"]}],
    }), encoding="utf-8")

    # person.schema.json itself matches *.json and is not a valid person
    code = main([])
    out = capsys.readouterr().out
    assert code == EXIT_VALIDATION_FAIL
    assert "✓ good.json: valid" in out


def test_json_format(person_schema, good_doc, bad_doc, capsys):
    code = main(["--format", "json", "-s", str(person_schema), "good.json", "bad.json"])
    report = json.loads(capsys.readouterr().out)
    assert code == EXIT_VALIDATION_FAIL
    assert report["valid"] is False
    docs = report["schemas"][0]["documents"]
    assert [d["valid"] for d in docs] == [True, False]
    assert docs[1]["error_count"] == 2
    assert {e["document_path"] for e in docs[1]["errors"]} == {"/age", "/name"}


def test_ref_override_flag(workdir, good_doc, capsys):
    write_json(workdir / "local.json", {"type": "string"})
    schema = write_json(workdir / "s.schema.json", {
        "properties": {"name": {"$ref": "https://example.com/name.json"}},
    })
    code = main(["-s", str(schema), "-r", "https://example.com/name.json=local.json", "good.json"])
    assert code == EXIT_SUCCESS


def test_version(capsys):
    assert main(["--version"]) == EXIT_SUCCESS
    assert capsys.readouterr().out.strip() == f"jsonschema-validator version {__version__}"


def test_list_templates(capsys):
    assert main(["--list-templates"]) == EXIT_SUCCESS
    out = capsys.readouterr().out
    for name in ("basic", "detailed", "simple", "with_path", "with_schema", "verbose"):
        assert name in out


def test_parser_collects_repeated_flags():
    args = build_parser().parse_args(["-d", "a.json", "-d", "b.json", "-r", "u=p", "-r", "v=q", "c.json"])
    assert args.documents == ["a.json", "b.json"]
    assert args.ref_overrides == ["u=p", "v=q"]
    assert args.paths == ["c.json"]


def test_malformed_pyproject_tool_is_usage_error(workdir, capsys):
    (workdir / "pyproject.toml").write_text('tool = ["not", "a", "table"]\n', encoding="utf-8")
    assert main([]) == EXIT_USAGE_ERROR
    assert "'tool' must be a table" in capsys.readouterr().err
