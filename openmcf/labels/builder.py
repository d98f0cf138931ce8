"""Label builder.

build_labels() is a pure function of (metadata, kind): the same inputs always
produce an equal map with keys in the same order, because labels become part
of the provider-side resource and take part in drift detection.
"""

from typing import Dict, Mapping, Optional

from ..manifest.base import CloudResourceMetadata
from . import keys


def build_labels(
    metadata: CloudResourceMetadata, kind: str, lowercase_kind: bool = False
) -> Dict[str, str]:
    """Build the canonical label map for a resource.

    Args:
        metadata: Manifest metadata
        kind: Resource kind, e.g. "GcpDnsRecord"
        lowercase_kind: Lower-case the kind value (GCP label values must be lower case)

    Returns:
        Label map with resource, resource_name, resource_kind and, when set,
        resource_id, organization and environment
    """
    labels = {
        keys.RESOURCE: "true",
        keys.RESOURCE_NAME: metadata.name,
        keys.RESOURCE_KIND: kind.lower() if lowercase_kind else kind,
    }
    if metadata.id:
        labels[keys.RESOURCE_ID] = metadata.id
    if metadata.org:
        labels[keys.ORGANIZATION] = metadata.org
    if metadata.env:
        labels[keys.ENVIRONMENT] = metadata.env
    return labels


def merge_labels(
    system: Mapping[str, str], user: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Merge user labels/tags on top of system labels.

    User values win on conflicts except for reserved keys, which keep the
    system value.
    """
    merged = dict(system)
    for key, value in (user or {}).items():
        if key in keys.RESERVED_KEYS and key in system:
            continue
        merged[key] = value
    return merged


def stack_labels(organization: str, project: str, stack: str) -> Dict[str, str]:
    """Stack labels identifying the Pulumi stack that provisioned a resource."""
    return {
        keys.PULUMI_ORGANIZATION: organization,
        keys.PULUMI_PROJECT: project,
        keys.PULUMI_STACK_NAME: stack,
        keys.PULUMI_STACK_FQDN: f"{organization}/{project}/{stack}",
    }


def stack_fqdn(labels: Mapping[str, str]) -> Optional[str]:
    """Resolve the stack FQDN from manifest labels.

    stack.fqdn wins; otherwise organization, project and stack.name must all
    be present. Returns None when the labels do not name a stack.
    """
    fqdn = labels.get(keys.PULUMI_STACK_FQDN)
    if fqdn:
        return fqdn
    parts = [
        labels.get(keys.PULUMI_ORGANIZATION),
        labels.get(keys.PULUMI_PROJECT),
        labels.get(keys.PULUMI_STACK_NAME),
    ]
    if all(parts):
        return "/".join(parts)
    return None
