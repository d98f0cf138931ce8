"""Azure virtual machine module.

Creates, in order:
    azure-native:network:NetworkInterface   <name>-nic
    azure-native:network:PublicIPAddress    <name>-pip (only when network.enablePublicIp)
    azure-native:compute:VirtualMachine     <name>
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Type

from ....labels import merge_labels
from ....manifest.base import declared_default, optional_value
from ....manifest.specs.azure import (
    AzureVirtualMachine,
    AzureVirtualMachineDataDisk,
    AzureVirtualMachineImage,
    AzureVirtualMachineNetworkConfig,
    AzureVirtualMachineSpec,
)
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

NIC_TYPE_TOKEN = "azure-native:network:NetworkInterface"
PUBLIC_IP_TYPE_TOKEN = "azure-native:network:PublicIPAddress"
VM_TYPE_TOKEN = "azure-native:compute:VirtualMachine"

OS_DISK_STORAGE_ACCOUNT_TYPE = "Premium_LRS"

OP_VM_ID = "vm_id"
OP_VM_NAME = "vm_name"
OP_PRIVATE_IP_ADDRESS = "private_ip_address"
OP_PUBLIC_IP_ADDRESS = "public_ip_address"
OP_COMPUTER_NAME = "computer_name"
OP_SYSTEM_ASSIGNED_IDENTITY_PRINCIPAL_ID = "system_assigned_identity_principal_id"
OP_NETWORK_INTERFACE_ID = "network_interface_id"
OP_AVAILABILITY_ZONE = "availability_zone"


@dataclass
class AzureVirtualMachineLocals(Locals):
    resource_group: str = ""
    subnet_id: str = ""
    vm_size: str = ""
    admin_username: str = ""
    admin_password: str = ""
    network_security_group_id: str = ""
    tags: Optional[Dict[str, str]] = None


def _default(field_name: str) -> Any:
    return declared_default(AzureVirtualMachineSpec, field_name)


def image_reference(image: AzureVirtualMachineImage) -> Dict[str, Any]:
    if image.custom_image_id:
        return {"id": image.custom_image_id}
    return {
        "publisher": image.publisher,
        "offer": image.offer,
        "sku": image.sku,
        "version": image.version or declared_default(AzureVirtualMachineImage, "version"),
    }


def data_disk(disk: AzureVirtualMachineDataDisk) -> Dict[str, Any]:
    return {
        "name": disk.name,
        "lun": disk.lun,
        "diskSizeGB": disk.size_gb,
        "createOption": "Empty",
        "caching": disk.caching or declared_default(AzureVirtualMachineDataDisk, "caching"),
        "managedDisk": {
            "storageAccountType": disk.storage_account_type
            or declared_default(AzureVirtualMachineDataDisk, "storage_account_type"),
        },
        "deleteOption": "Delete",
    }


def zones(zone: Optional[str]) -> Optional[List[str]]:
    return [zone] if zone else None


@module
class AzureVirtualMachineModule(ResourceModule):
    """Module for Azure virtual machines."""

    MANIFEST: ClassVar[Type[AzureVirtualMachine]] = AzureVirtualMachine
    PROVIDER_PACKAGE: ClassVar[str] = "azure-native"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {
            OP_VM_ID,
            OP_VM_NAME,
            OP_PRIVATE_IP_ADDRESS,
            OP_PUBLIC_IP_ADDRESS,
            OP_COMPUTER_NAME,
            OP_SYSTEM_ASSIGNED_IDENTITY_PRINCIPAL_ID,
            OP_NETWORK_INTERFACE_ID,
            OP_AVAILABILITY_ZONE,
        }
    )

    def initialize_locals(self, ctx, stack_input) -> AzureVirtualMachineLocals:
        spec: AzureVirtualMachineSpec = stack_input.target.spec
        common = base_locals(stack_input)
        network = spec.network or AzureVirtualMachineNetworkConfig()
        return AzureVirtualMachineLocals(
            **common,
            resource_group=spec.resource_group.get_value(),
            subnet_id=spec.subnet_id.get_value(),
            vm_size=spec.vm_size or _default("vm_size"),
            admin_username=spec.admin_username or _default("admin_username"),
            admin_password=optional_value(spec.admin_password),
            network_security_group_id=optional_value(network.network_security_group_id),
            tags=merge_labels(common["labels"], spec.tags),
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: AzureVirtualMachineLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: AzureVirtualMachineSpec = locals_.target.spec
        name = locals_.name

        nic = self.create_network_interface(ctx, locals_, provider)
        public_ip = None
        if spec.network is not None and spec.network.enable_public_ip:
            public_ip = self.create_public_ip(ctx, locals_, provider)
        vm = self.create_virtual_machine(ctx, locals_, provider, nic, public_ip)

        logger.info(f"Azure VM '{name}' ({locals_.vm_size}) in {spec.region}")
        return {
            OP_VM_ID: vm.id,
            OP_VM_NAME: vm.output("name"),
            OP_NETWORK_INTERFACE_ID: nic.id,
            OP_PRIVATE_IP_ADDRESS: nic.output("ipConfigurations", 0, "privateIPAddress"),
            OP_PUBLIC_IP_ADDRESS: public_ip.output("ipAddress") if public_ip else None,
            OP_AVAILABILITY_ZONE: spec.availability_zone,
            OP_COMPUTER_NAME: name,
            OP_SYSTEM_ASSIGNED_IDENTITY_PRINCIPAL_ID: (
                vm.output("identity", "principalId")
                if spec.enable_system_assigned_identity
                else None
            ),
        }

    def create_network_interface(self, ctx, locals_: AzureVirtualMachineLocals, provider):
        spec: AzureVirtualMachineSpec = locals_.target.spec
        nic_name = f"{locals_.name}-nic"
        props: Dict[str, Any] = {
            "networkInterfaceName": nic_name,
            "resourceGroupName": locals_.resource_group,
            "location": spec.region,
            "ipConfigurations": [
                {
                    "name": "primary",
                    "primary": True,
                    "privateIPAllocationMethod": "Dynamic",
                    "subnet": {"id": locals_.subnet_id},
                }
            ],
        }
        if spec.network is not None and spec.network.enable_accelerated_networking:
            props["enableAcceleratedNetworking"] = True
        if locals_.network_security_group_id:
            props["networkSecurityGroup"] = {"id": locals_.network_security_group_id}
        return self.create_or_wrap(
            ctx,
            "network interface",
            NIC_TYPE_TOKEN,
            nic_name,
            props,
            provider=provider,
            outputs=["ipConfigurations"],
        )

    def create_public_ip(self, ctx, locals_: AzureVirtualMachineLocals, provider):
        spec: AzureVirtualMachineSpec = locals_.target.spec
        network = spec.network
        pip_name = f"{locals_.name}-pip"
        sku = network.public_ip_sku or declared_default(
            AzureVirtualMachineNetworkConfig, "public_ip_sku"
        )
        allocation = network.public_ip_allocation or declared_default(
            AzureVirtualMachineNetworkConfig, "public_ip_allocation"
        )
        props: Dict[str, Any] = {
            "publicIpAddressName": pip_name,
            "resourceGroupName": locals_.resource_group,
            "location": spec.region,
            "publicIPAllocationMethod": getattr(allocation, "value", allocation),
            "sku": {"name": getattr(sku, "value", sku)},
        }
        if spec.availability_zone:
            props["zones"] = zones(spec.availability_zone)
        return self.create_or_wrap(
            ctx,
            "public IP",
            PUBLIC_IP_TYPE_TOKEN,
            pip_name,
            props,
            provider=provider,
            outputs=["ipAddress"],
        )

    def create_virtual_machine(self, ctx, locals_: AzureVirtualMachineLocals, provider, nic, public_ip):
        spec: AzureVirtualMachineSpec = locals_.target.spec
        name = locals_.name
        username = locals_.admin_username

        os_profile: Dict[str, Any] = {"computerName": name, "adminUsername": username}
        if spec.ssh_public_key:
            os_profile["linuxConfiguration"] = {
                "disablePasswordAuthentication": True,
                "ssh": {
                    "publicKeys": [
                        {
                            "path": f"/home/{username}/.ssh/authorized_keys",
                            "keyData": spec.ssh_public_key,
                        }
                    ]
                },
            }
        if locals_.admin_password:
            os_profile["adminPassword"] = locals_.admin_password

        os_disk: Dict[str, Any] = {
            "name": f"{name}-osdisk",
            "createOption": "FromImage",
            "caching": "ReadWrite",
            "managedDisk": {"storageAccountType": OS_DISK_STORAGE_ACCOUNT_TYPE},
            "deleteOption": "Delete",
        }
        if spec.os_disk_size_gb:
            os_disk["diskSizeGB"] = spec.os_disk_size_gb

        storage_profile: Dict[str, Any] = {
            "imageReference": image_reference(spec.image),
            "osDisk": os_disk,
        }
        if spec.data_disks:
            storage_profile["dataDisks"] = [data_disk(d) for d in spec.data_disks]

        props: Dict[str, Any] = {
            "vmName": name,
            "resourceGroupName": locals_.resource_group,
            "location": spec.region,
            "hardwareProfile": {"vmSize": locals_.vm_size},
            "networkProfile": {"networkInterfaces": [{"id": nic.id, "primary": True}]},
            "osProfile": os_profile,
            "storageProfile": storage_profile,
            "tags": dict(locals_.tags or {}),
        }
        if spec.availability_zone:
            props["zones"] = zones(spec.availability_zone)
        if spec.enable_system_assigned_identity:
            props["identity"] = {"type": "SystemAssigned"}
        if spec.is_spot_instance:
            props["priority"] = "Spot"
            props["evictionPolicy"] = "Deallocate"
            if spec.spot_max_price > 0 or spec.spot_max_price == -1:
                props["billingProfile"] = {"maxPrice": spec.spot_max_price}

        boot_diagnostics = spec.enable_boot_diagnostics
        if boot_diagnostics is None:
            boot_diagnostics = _default("enable_boot_diagnostics")
        if boot_diagnostics:
            props["diagnosticsProfile"] = {"bootDiagnostics": {"enabled": True}}

        depends_on = [nic] + ([public_ip] if public_ip is not None else [])
        return self.create_or_wrap(
            ctx,
            "virtual machine",
            VM_TYPE_TOKEN,
            name,
            props,
            provider=provider,
            depends_on=depends_on,
            outputs=["name", "identity"],
        )
