import pytest

from openmcf.iac.engine import OutputRef
from openmcf.iac.modules.azure.virtual_machine import (
    NIC_TYPE_TOKEN,
    PUBLIC_IP_TYPE_TOKEN,
    VM_TYPE_TOKEN,
)


@pytest.fixture
def azure(provider_configs):
    return provider_configs["azure"]


class TestAzureVirtualMachineModule:
    """Tests for the Azure VM module."""

    def test_defaults(self, run, azure_vm, azure):
        ctx = run(azure_vm, azure)
        assert [r.type_token for r in ctx.resources] == [NIC_TYPE_TOKEN, VM_TYPE_TOKEN]
        assert ctx.providers[0].package == "azure-native"

        vm = ctx.resource(VM_TYPE_TOKEN, "web-vm")
        assert vm.props["hardwareProfile"] == {"vmSize": "Standard_D2s_v3"}
        assert vm.props["osProfile"]["adminUsername"] == "azureuser"
        assert vm.props["osProfile"]["computerName"] == "web-vm"
        linux = vm.props["osProfile"]["linuxConfiguration"]
        assert linux["disablePasswordAuthentication"] is True
        assert linux["ssh"]["publicKeys"] == [
            {"path": "/home/azureuser/.ssh/authorized_keys", "keyData": "ssh-rsa AAAAB3Nza user@host"}
        ]
        storage = vm.props["storageProfile"]
        assert storage["imageReference"] == {
            "publisher": "Canonical",
            "offer": "0001-com-ubuntu-server-jammy",
            "sku": "22_04-lts",
            "version": "latest",
        }
        assert storage["osDisk"]["managedDisk"] == {"storageAccountType": "Premium_LRS"}
        assert "dataDisks" not in storage
        assert vm.props["identity"] == {"type": "SystemAssigned"}
        assert vm.props["diagnosticsProfile"] == {"bootDiagnostics": {"enabled": True}}
        assert vm.depends_on == ["web-vm-nic"]

    def test_outputs(self, run, azure_vm, azure):
        ctx = run(azure_vm, azure)
        assert ctx.exports == {
            "computer_name": "web-vm",
            "network_interface_id": OutputRef("web-vm-nic", "id"),
            "private_ip_address": OutputRef("web-vm-nic", "ipConfigurations", (0, "privateIPAddress")),
            "system_assigned_identity_principal_id": OutputRef("web-vm", "identity", ("principalId",)),
            "vm_id": OutputRef("web-vm", "id"),
            "vm_name": OutputRef("web-vm", "name"),
        }

    def test_network_interface(self, run, azure_vm, azure):
        nic = run(azure_vm, azure).resource(NIC_TYPE_TOKEN, "web-vm-nic")
        assert nic.props["resourceGroupName"] == "app-rg"
        assert nic.props["location"] == "eastus"
        assert nic.props["ipConfigurations"][0]["subnet"] == {"id": azure_vm["spec"]["subnetId"]}
        assert "networkSecurityGroup" not in nic.props

    def test_nic_id_wired_into_vm(self, run, azure_vm, azure):
        vm = run(azure_vm, azure).resource(VM_TYPE_TOKEN, "web-vm")
        assert vm.props["networkProfile"]["networkInterfaces"] == [
            {"id": OutputRef("web-vm-nic", "id"), "primary": True}
        ]

    def test_public_ip(self, run, azure_vm, azure):
        azure_vm["spec"]["network"] = {"enablePublicIp": True}
        azure_vm["spec"]["availabilityZone"] = "2"
        ctx = run(azure_vm, azure)
        assert [r.name for r in ctx.resources] == ["web-vm-nic", "web-vm-pip", "web-vm"]
        pip = ctx.resource(PUBLIC_IP_TYPE_TOKEN, "web-vm-pip")
        assert pip.props["sku"] == {"name": "Standard"}
        assert pip.props["publicIPAllocationMethod"] == "Static"
        assert pip.props["zones"] == ["2"]
        assert ctx.resource(VM_TYPE_TOKEN, "web-vm").depends_on == ["web-vm-nic", "web-vm-pip"]
        assert ctx.exports["public_ip_address"] == OutputRef("web-vm-pip", "ipAddress")
        assert ctx.exports["availability_zone"] == "2"

    def test_network_options(self, run, azure_vm, azure):
        azure_vm["spec"]["network"] = {
            "enableAcceleratedNetworking": True,
            "networkSecurityGroupId": "/subscriptions/s/nsg/web",
        }
        nic = run(azure_vm, azure).resource(NIC_TYPE_TOKEN, "web-vm-nic")
        assert nic.props["enableAcceleratedNetworking"] is True
        assert nic.props["networkSecurityGroup"] == {"id": "/subscriptions/s/nsg/web"}

    def test_password_auth(self, run, azure_vm, azure):
        del azure_vm["spec"]["sshPublicKey"]
        azure_vm["spec"]["adminPassword"] = "S3cret!pass"
        os_profile = run(azure_vm, azure).resource(VM_TYPE_TOKEN, "web-vm").props["osProfile"]
        assert os_profile["adminPassword"] == "S3cret!pass"
        assert "linuxConfiguration" not in os_profile

    def test_overrides(self, run, azure_vm, azure):
        azure_vm["spec"].update(
            vmSize="Standard_B2s",
            adminUsername="ops",
            osDiskSizeGb=64,
            enableBootDiagnostics=False,
            enableSystemAssignedIdentity=False,
            tags={"team": "web", "resource_kind": "spoofed"},
        )
        ctx = run(azure_vm, azure)
        vm = ctx.resource(VM_TYPE_TOKEN, "web-vm")
        assert vm.props["hardwareProfile"] == {"vmSize": "Standard_B2s"}
        assert vm.props["osProfile"]["adminUsername"] == "ops"
        assert vm.props["storageProfile"]["osDisk"]["diskSizeGB"] == 64
        assert "diagnosticsProfile" not in vm.props
        assert "identity" not in vm.props
        assert vm.props["tags"]["team"] == "web"
        assert vm.props["tags"]["resource_kind"] == "AzureVirtualMachine"
        assert "system_assigned_identity_principal_id" not in ctx.exports

    def test_spot_instance(self, run, azure_vm, azure):
        azure_vm["spec"].update(isSpotInstance=True, spotMaxPrice=-1)
        vm = run(azure_vm, azure).resource(VM_TYPE_TOKEN, "web-vm")
        assert vm.props["priority"] == "Spot"
        assert vm.props["evictionPolicy"] == "Deallocate"
        assert vm.props["billingProfile"] == {"maxPrice": -1}

    def test_data_disks(self, run, azure_vm, azure):
        azure_vm["spec"]["dataDisks"] = [{"name": "data", "sizeGb": 128, "lun": 0}]
        vm = run(azure_vm, azure).resource(VM_TYPE_TOKEN, "web-vm")
        assert vm.props["storageProfile"]["dataDisks"] == [
            {
                "name": "data",
                "lun": 0,
                "diskSizeGB": 128,
                "createOption": "Empty",
                "caching": "ReadWrite",
                "managedDisk": {"storageAccountType": "Premium_LRS"},
                "deleteOption": "Delete",
            }
        ]

    def test_custom_image(self, run, azure_vm, azure):
        azure_vm["spec"]["image"] = {"customImageId": "/subscriptions/s/images/golden"}
        vm = run(azure_vm, azure).resource(VM_TYPE_TOKEN, "web-vm")
        assert vm.props["storageProfile"]["imageReference"] == {"id": "/subscriptions/s/images/golden"}
