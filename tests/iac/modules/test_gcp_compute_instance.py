import pytest

from openmcf.iac.engine import OutputRef
from openmcf.iac.modules.gcp.compute_instance import (
    DEFAULT_SERVICE_ACCOUNT_SCOPES,
    INSTANCE_TYPE_TOKEN,
)


@pytest.fixture
def gcp(provider_configs):
    return provider_configs["gcp"]


def instance_props(ctx):
    return ctx.resource(INSTANCE_TYPE_TOKEN, "worker-1").props


class TestGcpComputeInstanceModule:
    """Tests for the Compute Engine instance module."""

    def test_minimal_instance(self, run, gcp_compute_instance, gcp):
        props = instance_props(run(gcp_compute_instance, gcp))
        assert props == {
            "name": "worker-1",
            "project": "p-123",
            "zone": "us-central1-a",
            "machineType": "e2-medium",
            "bootDisk": {
                "autoDelete": True,
                "initializeParams": {"image": "debian-cloud/debian-12"},
            },
            "networkInterfaces": [{"network": "default"}],
            "labels": {
                "resource": "true",
                "resource_name": "worker-1",
                "resource_kind": "gcpcomputeinstance",
            },
            "deletionProtection": False,
            "allowStoppingForUpdate": True,
        }

    def test_outputs(self, run, gcp_compute_instance, gcp):
        exports = run(gcp_compute_instance, gcp).exports
        assert exports["instance_id"] == OutputRef("worker-1", "instanceId")
        assert exports["internal_ip"] == OutputRef("worker-1", "networkInterfaces", (0, "networkIp"))
        assert "external_ip" not in exports

    def test_external_ip(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["networkInterfaces"] = [
            {"network": "default", "accessConfigs": [{"networkTier": "STANDARD"}]}
        ]
        ctx = run(gcp_compute_instance, gcp)
        assert instance_props(ctx)["networkInterfaces"][0]["accessConfigs"] == [{"networkTier": "STANDARD"}]
        assert ctx.exports["external_ip"] == OutputRef(
            "worker-1", "networkInterfaces", (0, "accessConfigs", 0, "natIp")
        )

    def test_boot_disk_options(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["bootDisk"] = {
            "image": "debian-cloud/debian-12",
            "sizeGb": 50,
            "type": "pd-ssd",
            "autoDelete": False,
        }
        boot = instance_props(run(gcp_compute_instance, gcp))["bootDisk"]
        assert boot == {
            "autoDelete": False,
            "initializeParams": {"image": "debian-cloud/debian-12", "size": 50, "type": "pd-ssd"},
        }

    def test_subnetwork_and_alias_ranges(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["networkInterfaces"] = [
            {
                "subnetwork": "projects/p-123/regions/us-central1/subnetworks/app",
                "aliasIpRanges": [{"ipCidrRange": "/24", "subnetworkRangeName": "pods"}],
            }
        ]
        ni = instance_props(run(gcp_compute_instance, gcp))["networkInterfaces"][0]
        assert ni == {
            "subnetwork": "projects/p-123/regions/us-central1/subnetworks/app",
            "aliasIpRanges": [{"ipCidrRange": "/24", "subnetworkRangeName": "pods"}],
        }

    def test_metadata_and_ssh_keys(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"].update(
            metadata={"enable-oslogin": "FALSE"},
            sshKeys=["alice:ssh-ed25519 AAAA alice", "bob:ssh-ed25519 BBBB bob"],
            startupScript="#!/bin/sh\necho hi\n",
        )
        props = instance_props(run(gcp_compute_instance, gcp))
        assert props["metadata"] == {
            "enable-oslogin": "FALSE",
            "ssh-keys": "alice:ssh-ed25519 AAAA alice\nbob:ssh-ed25519 BBBB bob",
        }
        assert props["metadataStartupScript"] == "#!/bin/sh\necho hi\n"

    def test_service_account_default_scopes(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["serviceAccount"] = {"email": "sa@p-123.iam.gserviceaccount.com"}
        account = instance_props(run(gcp_compute_instance, gcp))["serviceAccount"]
        assert account == {
            "scopes": DEFAULT_SERVICE_ACCOUNT_SCOPES,
            "email": "sa@p-123.iam.gserviceaccount.com",
        }

    def test_spot_shortcut(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["spot"] = True
        assert instance_props(run(gcp_compute_instance, gcp))["scheduling"] == {
            "preemptible": True,
            "automaticRestart": False,
            "onHostMaintenance": "TERMINATE",
            "provisioningModel": "SPOT",
        }

    def test_preemptible_shortcut(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["preemptible"] = True
        scheduling = instance_props(run(gcp_compute_instance, gcp))["scheduling"]
        assert scheduling["preemptible"] is True
        assert "provisioningModel" not in scheduling

    def test_explicit_scheduling(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["scheduling"] = {
            "onHostMaintenance": "MIGRATE",
            "instanceTerminationAction": "STOP",
        }
        assert instance_props(run(gcp_compute_instance, gcp))["scheduling"] == {
            "preemptible": False,
            "automaticRestart": True,
            "onHostMaintenance": "MIGRATE",
            "instanceTerminationAction": "STOP",
        }

    def test_attached_disks_get_device_names(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"]["attachedDisks"] = [
            {"source": "disk-a"},
            {"source": "disk-b", "deviceName": "logs", "mode": "READ_ONLY"},
        ]
        assert instance_props(run(gcp_compute_instance, gcp))["attachedDisks"] == [
            {"source": "disk-a", "deviceName": "attached-disk-0"},
            {"source": "disk-b", "deviceName": "logs", "mode": "READ_ONLY"},
        ]

    def test_user_labels_and_tags(self, run, gcp_compute_instance, gcp):
        gcp_compute_instance["spec"].update(labels={"team": "batch"}, tags=["http-server"])
        props = instance_props(run(gcp_compute_instance, gcp))
        assert props["labels"]["team"] == "batch"
        assert props["labels"]["resource_kind"] == "gcpcomputeinstance"
        assert props["tags"] == ["http-server"]
