"""Group-version-kind extraction from manifest YAML.

Only the top-level apiVersion and kind scalars are read. The rest of the
document is composed into nodes but never constructed, so specs that do not
fit a generic mapping (enum values, custom tags) cannot break kind detection.
"""

from dataclasses import dataclass

import yaml

from ..exceptions import ValidationFailed


@dataclass(frozen=True)
class GVK:
    api_version: str
    kind: str

    @property
    def group(self) -> str:
        return self.api_version.split("/", 1)[0]

    @property
    def version(self) -> str:
        parts = self.api_version.split("/", 1)
        return parts[1] if len(parts) == 2 else ""


def extract_gvk(text: str) -> GVK:
    """Read apiVersion and kind from a YAML manifest.

    Raises:
        ValidationFailed: if the document is not a mapping or either field is missing
    """
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise ValidationFailed("manifest", f"invalid YAML: {e}", cause=e) from e

    if not isinstance(root, yaml.MappingNode):
        raise ValidationFailed("manifest", "document must be a mapping")

    fields = {}
    for key_node, value_node in root.value:
        if not isinstance(key_node, yaml.ScalarNode):
            continue
        if key_node.value in ("apiVersion", "kind") and isinstance(value_node, yaml.ScalarNode):
            fields[key_node.value] = value_node.value

    api_version = fields.get("apiVersion", "").strip()
    kind = fields.get("kind", "").strip()
    if not api_version:
        raise ValidationFailed("apiVersion", "is required")
    if "/" not in api_version:
        raise ValidationFailed("apiVersion", f"must look like <group>/<version>, got '{api_version}'")
    if not kind:
        raise ValidationFailed("kind", "is required")
    return GVK(api_version=api_version, kind=kind)
