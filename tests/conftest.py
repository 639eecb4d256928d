"""
Shared fixtures: an isolated working directory and a small person schema.
"""

import json
import os
import pytest
from pathlib import Path


PERSON_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 2},
        "age": {"type": "integer", "minimum": 0, "maximum": 150},
    },
    "required": ["name", "age"],
}


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory with HOME pointed at an empty directory"""
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for key in list(os.environ):
        if key.startswith("JSONSCHEMA_VALIDATOR_"):
            monkeypatch.delenv(key)
    return project


@pytest.fixture
def person_schema(workdir) -> Path:
    return write_json(workdir / "person.schema.json", PERSON_SCHEMA)
