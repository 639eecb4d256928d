"""
Tests for configuration models and override merging.
"""

from jsonschema_validator.config import (
    SchemaEntry,
    ValidatorConfig,
    merge_ref_overrides,
    new_schema_entry,
)


def test_new_schema_entry():
    """Constructor helper yields an empty override map and the given documents"""
    entry = new_schema_entry("schema.json", "a.json", "b.json")
    assert entry.ref_overrides is not None
    assert entry.ref_overrides == {}
    assert len(entry.documents) == 2


def test_new_schema_entry_maps_are_independent():
    a = new_schema_entry("schema.json", "a.json")
    b = new_schema_entry("schema.json", "b.json")
    a.ref_overrides["x"] = "y"
    assert b.ref_overrides == {}


def test_merge_ref_overrides_empty_side():
    a = {"https://example.com/a.json": "a.json"}
    assert merge_ref_overrides(a, {}) == a
    assert merge_ref_overrides({}, a) == a
    assert merge_ref_overrides(a, None) == a


def test_merge_ref_overrides_right_biased():
    assert merge_ref_overrides({"k": "x"}, {"k": "y"}) == {"k": "y"}
    assert merge_ref_overrides({"k": "x"}, {"j": "z"}, {"k": "w"}) == {"k": "w", "j": "z"}


def test_merge_ref_overrides_does_not_mutate_inputs():
    a = {"k": "x"}
    merge_ref_overrides(a, {"k": "y"})
    assert a == {"k": "x"}


def test_effective_settings_entry_wins():
    entry = SchemaEntry(path="s.json", documents=["d.json"], schema_version="draft-07", error_template="@basic")
    config = ValidatorConfig(schema_version="draft/2020-12", error_template="{{ FullMessage }}", schemas=[entry])
    settings = config.settings_for(entry)
    assert settings.schema_version == "draft-07"
    assert settings.error_template == "@basic"


def test_effective_settings_fall_back_to_global_then_empty():
    entry = SchemaEntry(path="s.json", documents=["d.json"], schema_version="")
    assert entry.effective_settings("draft-06", None) == ("draft-06", "")
    assert entry.effective_settings(None, None) == ("", "")


def test_documents_accept_single_string():
    entry = SchemaEntry(path="s.json", documents="only.json")
    assert entry.documents == ["only.json"]


def test_null_ref_overrides_become_empty():
    entry = SchemaEntry(path="s.json", documents=["d.json"], ref_overrides=None)
    assert entry.ref_overrides == {}
