import base64
import json
from typing import Any, Callable, Dict, Optional

import pytest

from openmcf.iac.engine import RecordingContext
from openmcf.iac.modules import ModuleRegistry
from openmcf.iac.outputs import OutputRegistry
from openmcf.iac.runner import run_module

# ============================================================================
# Credential fixtures
# ============================================================================

GCP_SERVICE_ACCOUNT_KEY = {"type": "service_account", "project_id": "p-123"}


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


PROVIDER_CONFIGS: Dict[str, Dict[str, Any]] = {
    "aws": {
        "access_key_id": "AKIAEXAMPLE",
        "secret_access_key": "secret",
        "region": "us-west-2",
    },
    "azure": {
        "client_id": "client",
        "client_secret": "secret",
        "tenant_id": "tenant",
        "subscription_id": "subscription",
    },
    "gcp": {
        "service_account_key_base64": b64(json.dumps(GCP_SERVICE_ACCOUNT_KEY)),
        "project_id": "p-123",
    },
    "digitalocean": {"api_token": "dop_v1_token"},
    "cloudflare": {"api_token": "cf-token"},
    "civo": {"api_token": "civo-token", "default_region": "LON1"},
}


@pytest.fixture
def provider_configs() -> Dict[str, Dict[str, Any]]:
    """Valid credential records per provider, as written in provider config files."""
    return {k: dict(v) for k, v in PROVIDER_CONFIGS.items()}


# ============================================================================
# Manifest fixtures
# ============================================================================


def manifest(api_version: str, kind: str, name: str, spec: Dict[str, Any], **metadata: Any) -> Dict[str, Any]:
    return {
        "apiVersion": api_version,
        "kind": kind,
        "metadata": {"name": name, **metadata},
        "spec": spec,
    }


@pytest.fixture
def route53_record() -> Dict[str, Any]:
    return manifest(
        "aws.openmcf.org/v1",
        "AwsRoute53DnsRecord",
        "api-record",
        {
            "hostedZoneId": "Z123",
            "name": "api.example.com",
            "type": "A",
            "values": ["1.2.3.4"],
        },
    )


@pytest.fixture
def azure_dns_record() -> Dict[str, Any]:
    return manifest(
        "azure.openmcf.org/v1",
        "AzureDnsRecord",
        "www-record",
        {
            "resourceGroup": "dns-rg",
            "zoneName": "example.com",
            "recordType": "A",
            "name": "www",
            "values": ["10.0.0.1"],
        },
    )


@pytest.fixture
def azure_vm() -> Dict[str, Any]:
    return manifest(
        "azure.openmcf.org/v1",
        "AzureVirtualMachine",
        "web-vm",
        {
            "region": "eastus",
            "resourceGroup": "app-rg",
            "subnetId": "/subscriptions/s/resourceGroups/app-rg/providers/Microsoft.Network/virtualNetworks/v/subnets/default",
            "sshPublicKey": "ssh-rsa AAAAB3Nza user@host",
            "enableSystemAssignedIdentity": True,
            "image": {
                "publisher": "Canonical",
                "offer": "0001-com-ubuntu-server-jammy",
                "sku": "22_04-lts",
            },
        },
    )


@pytest.fixture
def gcp_dns_record() -> Dict[str, Any]:
    return manifest(
        "gcp.openmcf.org/v1",
        "GcpDnsRecord",
        "svc-record",
        {
            "projectId": "p-123",
            "managedZone": "my-zone",
            "type": "A",
            "name": "svc.example.com.",
            "values": ["10.0.0.1", "10.0.0.2"],
            "ttlSeconds": 0,
        },
    )


@pytest.fixture
def gcp_compute_instance() -> Dict[str, Any]:
    return manifest(
        "gcp.openmcf.org/v1",
        "GcpComputeInstance",
        "worker-1",
        {
            "projectId": "p-123",
            "zone": "us-central1-a",
            "machineType": "e2-medium",
            "bootDisk": {"image": "debian-cloud/debian-12"},
            "networkInterfaces": [{"network": "default"}],
        },
    )


@pytest.fixture
def digitalocean_vpc() -> Dict[str, Any]:
    return manifest(
        "digital-ocean.openmcf.org/v1",
        "DigitalOceanVpc",
        "test-vpc",
        {"region": "nyc3", "ipRangeCidr": "10.10.0.0/16"},
    )


@pytest.fixture
def digitalocean_dns_record() -> Dict[str, Any]:
    return manifest(
        "digital-ocean.openmcf.org/v1",
        "DigitalOceanDnsRecord",
        "www-record",
        {"domain": "example.com", "name": "www", "type": "A", "value": "1.2.3.4"},
    )


@pytest.fixture
def cloudflare_dns_record() -> Dict[str, Any]:
    return manifest(
        "cloudflare.openmcf.org/v1",
        "CloudflareDnsRecord",
        "WWW-Record",
        {"zoneId": "zone-abc", "name": "www", "type": "A", "value": "1.2.3.4", "proxied": True},
    )


@pytest.fixture
def cloudflare_dns_zone() -> Dict[str, Any]:
    return manifest(
        "cloudflare.openmcf.org/v1",
        "CloudflareDnsZone",
        "example-zone",
        {
            "zoneName": "example.com",
            "accountId": "acct-1",
            "records": [
                {"name": "www", "type": "A", "value": "1.2.3.4", "ttl": 300, "proxied": True}
            ],
        },
    )


@pytest.fixture
def civo_dns_record() -> Dict[str, Any]:
    return manifest(
        "civo.openmcf.org/v1",
        "CivoDnsRecord",
        "Mail-Record",
        {"zoneId": "domain-1", "name": "@", "type": "MX", "value": "mail.example.com", "priority": 10},
    )


# ============================================================================
# Module runtime fixtures
# ============================================================================


def stack_input(target: Dict[str, Any], provider_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"target": target}
    if provider_config is not None:
        data["providerConfig"] = provider_config
    return data


@pytest.fixture
def run() -> Callable[..., RecordingContext]:
    """Run the module for a target manifest against a fresh RecordingContext.

    Usage:
        ctx = run(route53_record, provider_configs["aws"])
        ctx.exports["fqdn"]
    """

    def _run(target: Dict[str, Any], provider_config: Optional[Dict[str, Any]] = None) -> RecordingContext:
        ctx = RecordingContext(stack_input(target, provider_config))
        module = ModuleRegistry.get_module(target["kind"])
        assert module is not None, f"no module for {target['kind']}"
        run_module(ctx, module)
        return ctx

    return _run


@pytest.fixture
def restore_output_registry():
    """Snapshot the output registry and restore it after the test."""
    ModuleRegistry.get_all_kinds()
    saved = dict(OutputRegistry._outputs)
    yield
    OutputRegistry._outputs = saved
