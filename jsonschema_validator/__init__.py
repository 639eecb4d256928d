"""
JSON Schema Validator

Validates JSON/JSON5/YAML/TOML documents against JSON Schema definitions, with
layered configuration discovery, per-schema overrides and templated error output.
"""

__version__ = "0.1.0"
