"""Loading manifests from YAML and mappings into typed models."""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ValidationFailed
from .base import Manifest
from .gvk import extract_gvk
from .kinds import KindRegistry

logger = logging.getLogger(__name__)


def error_location(loc: tuple) -> str:
    """Render a pydantic error location as a dotted field path."""
    parts = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        else:
            parts.append(("." if parts else "") + str(item))
    return "".join(parts) or "manifest"


def validation_failed(error: ValidationError, prefix: str = "") -> ValidationFailed:
    """Convert a pydantic ValidationError into ValidationFailed.

    The first error names the field; every error is kept in context["errors"].
    """
    errors = [
        {
            "field": error_location(tuple(e["loc"])),
            "reason": e["msg"],
        }
        for e in error.errors()
    ]
    first = errors[0] if errors else {"field": "manifest", "reason": str(error)}
    field = f"{prefix}.{first['field']}" if prefix else first["field"]
    return ValidationFailed(field, first["reason"], context={"errors": errors}, cause=error)


def model_for(api_version: str, kind: str) -> Type[Manifest]:
    """Select the manifest model for (apiVersion, kind).

    Raises:
        ValidationFailed: for unknown kinds or a mismatched apiVersion
    """
    model = KindRegistry.get(kind)
    if model is None:
        raise ValidationFailed("kind", f"unknown kind '{kind}'")
    if model.API_VERSION != api_version:
        raise ValidationFailed(
            "apiVersion",
            f"{kind} expects apiVersion '{model.API_VERSION}', got '{api_version}'",
        )
    return model


def parse_manifest(
    data: Mapping[str, Any], model: Optional[Type[Manifest]] = None
) -> Manifest:
    """Validate a manifest mapping and return the typed model.

    Raises:
        ValidationFailed: if the mapping does not satisfy the kind's schema
    """
    if not isinstance(data, Mapping):
        raise ValidationFailed("manifest", "must be a mapping")
    if model is None:
        api_version = data.get("apiVersion") or data.get("api_version") or ""
        kind = data.get("kind") or ""
        if not kind:
            raise ValidationFailed("kind", "is required")
        model = model_for(str(api_version), str(kind))
    try:
        manifest = model.model_validate(dict(data))
    except ValidationError as e:
        raise validation_failed(e) from e
    logger.debug(f"Parsed {manifest.kind} manifest '{manifest.metadata.name}'")
    return manifest


def _is_file(source: str) -> bool:
    if "\n" in source:
        return False
    try:
        return Path(source).is_file()
    except OSError:
        return False


def load_manifest(source: Union[str, Path]) -> Manifest:
    """Load a manifest from a YAML file path or YAML text.

    The kind is detected from apiVersion/kind alone before the full document
    is parsed into the selected model.
    """
    if isinstance(source, Path) or _is_file(source):
        text = Path(source).read_text()
    else:
        text = str(source)

    gvk = extract_gvk(text)
    model = model_for(gvk.api_version, gvk.kind)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationFailed("manifest", f"invalid YAML: {e}", cause=e) from e
    return parse_manifest(data, model)


def manifest_to_dict(manifest: Manifest) -> Dict[str, Any]:
    """Serialize a manifest with wire (camelCase) field names."""
    return manifest.model_dump(mode="json", by_alias=True, exclude_none=True)
