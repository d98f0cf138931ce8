"""Label keys attached to every provisioned resource."""

DOMAIN = "openmcf.org"

# Canonical resource labels
RESOURCE = "resource"
RESOURCE_NAME = "resource_name"
RESOURCE_KIND = "resource_kind"
RESOURCE_ID = "resource_id"
ORGANIZATION = "organization"
ENVIRONMENT = "environment"

RESERVED_KEYS = frozenset(
    {RESOURCE, RESOURCE_NAME, RESOURCE_KIND, RESOURCE_ID, ORGANIZATION, ENVIRONMENT}
)

# Stack labels set by the Pulumi program; stack.fqdn takes precedence over the parts
PULUMI_STACK_FQDN = "pulumi.openmcf.org/stack.fqdn"
PULUMI_ORGANIZATION = "pulumi.openmcf.org/organization"
PULUMI_PROJECT = "pulumi.openmcf.org/project"
PULUMI_STACK_NAME = "pulumi.openmcf.org/stack.name"


def with_domain_prefix(key: str) -> str:
    """'org' -> 'openmcf.org/org'"""
    return f"{DOMAIN}/{key}"


def with_prometheus_format(label: str) -> str:
    """Convert a label key to a Prometheus-safe name ('openmcf.org/org' -> 'openmcf_org_org')."""
    return label.replace(".", "_").replace("/", "_").replace("-", "_")
