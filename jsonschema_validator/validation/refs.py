"""
$ref override resolution and the local-only resource registry.

Overrides redirect remote schema URLs to local files. They are registered
with the registry before the main schema so that a $ref to the remote URL
resolves to local content. Anything not registered can only be loaded from
file:// URIs; all other schemes are unresolvable, so no network access ever
happens.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlsplit
from urllib.request import url2pathname

from referencing import Registry, Resource, Specification
from referencing.exceptions import CannotDetermineSpecification, NoSuchResource, Unresolvable
from referencing.jsonschema import UnknownDialect

from ..config.schemas import merge_ref_overrides
from ..exceptions import CompileError, RefOverrideError
from .parser import FileParseError, parse_file

logger = logging.getLogger(__name__)


def resolve_ref_overrides(
    global_overrides: Optional[Mapping[str, str]],
    entry_overrides: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    """Merge global and per-schema overrides; the entry wins on identical URLs"""
    return merge_ref_overrides(global_overrides, entry_overrides)


def local_retriever(specification: Specification):
    """
    Build a registry retrieve hook that only loads file:// URIs.

    Files are parsed by extension, so JSON5/YAML/TOML schemas can be referenced too.
    """

    def retrieve(uri: str) -> Resource:
        parts = urlsplit(uri)
        if parts.scheme != "file":
            logger.debug(f"Refusing to retrieve non-local resource {uri}")
            raise NoSuchResource(ref=uri)
        try:
            contents = parse_file(url2pathname(parts.path))
        except FileParseError as e:
            logger.debug(f"Cannot load {uri}: {e}")
            raise NoSuchResource(ref=uri) from e
        return Resource.from_contents(contents, default_specification=specification)

    return retrieve


def register_ref_overrides(
    registry: Registry,
    overrides: Mapping[str, str],
    specification: Specification,
) -> Registry:
    """
    Parse each override file and register it under its remote URL.

    Raises:
        RefOverrideError: If an override file cannot be read or parsed
    """
    resources = []
    for remote_url, local_path in overrides.items():
        try:
            contents = parse_file(local_path)
        except FileParseError as e:
            raise RefOverrideError(remote_url, local_path, str(e)) from e
        if not isinstance(contents, (dict, bool)):
            raise RefOverrideError(remote_url, local_path, "not a JSON Schema object")

        try:
            resource = Resource.from_contents(contents, default_specification=specification)
        except (CannotDetermineSpecification, UnknownDialect) as e:
            raise RefOverrideError(remote_url, local_path, f"unknown $schema: {e}") from e

        logger.debug(f"Registering ref override {remote_url} -> {local_path}")
        resources.append((remote_url, resource))

    return registry.with_resources(resources)


def check_refs(resource: Resource, resolver: Any, specification: Specification) -> None:
    """
    Resolve every $ref up front, following references into other resources.

    Subschema locations come from the resource's own specification, so a
    property named like a keyword (e.g. "default") is walked like any other
    subschema. Targets reached through a $ref, including override files and
    retrieved file:// resources, are checked the same way.

    Args:
        resource: The compiled schema's root resource
        resolver: Resolver rooted at the schema's URI
        specification: Draft used for targets that do not declare $schema

    Raises:
        CompileError: If any reference cannot be resolved
    """
    visited = set()
    # keeps walked contents alive so their ids stay unique
    walked = []
    pending: List[Tuple[Resource, Any]] = [(resource, resolver)]

    while pending:
        current, current_resolver = pending.pop()
        contents = current.contents
        if id(contents) in visited:
            continue
        visited.add(id(contents))
        walked.append(contents)

        ref = contents.get("$ref") if isinstance(contents, dict) else None
        if isinstance(ref, str):
            try:
                resolved = current_resolver.lookup(ref)
                target = Resource.from_contents(resolved.contents, default_specification=specification)
            except (Unresolvable, NoSuchResource, CannotDetermineSpecification, UnknownDialect) as e:
                raise CompileError(f"failed to compile schema: $ref {ref!r} cannot be resolved: {e}") from e
            pending.append((target, resolved.resolver))

        for subresource in current.subresources():
            pending.append((subresource, current_resolver.in_subresource(subresource)))
