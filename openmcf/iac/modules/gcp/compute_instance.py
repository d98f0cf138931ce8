"""GCP Compute Engine instance module.

Creates: gcp:compute/instance:Instance
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Type

from ....labels import merge_labels
from ....manifest.base import optional_value
from ....manifest.specs.gcp import (
    GcpComputeInstance,
    GcpComputeInstanceNetworkInterface,
    GcpComputeInstanceSpec,
)
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

INSTANCE_TYPE_TOKEN = "gcp:compute/instance:Instance"

DEFAULT_SERVICE_ACCOUNT_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

OP_INSTANCE_NAME = "instance_name"
OP_INSTANCE_ID = "instance_id"
OP_SELF_LINK = "self_link"
OP_INTERNAL_IP = "internal_ip"
OP_EXTERNAL_IP = "external_ip"
OP_ZONE = "zone"
OP_MACHINE_TYPE = "machine_type"
OP_CPU_PLATFORM = "cpu_platform"


@dataclass
class GcpComputeInstanceLocals(Locals):
    project_id: str = ""


def network_interface(ni: GcpComputeInstanceNetworkInterface) -> Dict[str, Any]:
    props: Dict[str, Any] = {}
    network = optional_value(ni.network)
    if network:
        props["network"] = network
    subnetwork = optional_value(ni.subnetwork)
    if subnetwork:
        props["subnetwork"] = subnetwork
    if ni.access_configs:
        access_configs = []
        for ac in ni.access_configs:
            access_config = {}
            if ac.nat_ip:
                access_config["natIp"] = ac.nat_ip
            if ac.network_tier:
                access_config["networkTier"] = ac.network_tier
            access_configs.append(access_config)
        props["accessConfigs"] = access_configs
    if ni.alias_ip_ranges:
        ranges = []
        for air in ni.alias_ip_ranges:
            alias_range = {"ipCidrRange": air.ip_cidr_range}
            if air.subnetwork_range_name:
                alias_range["subnetworkRangeName"] = air.subnetwork_range_name
            ranges.append(alias_range)
        props["aliasIpRanges"] = ranges
    return props


def scheduling(spec: GcpComputeInstanceSpec) -> Optional[Dict[str, Any]]:
    if spec.scheduling is not None:
        s = spec.scheduling
        props: Dict[str, Any] = {
            "preemptible": s.preemptible,
            "automaticRestart": s.automatic_restart,
        }
        if s.on_host_maintenance:
            props["onHostMaintenance"] = s.on_host_maintenance
        if s.provisioning_model:
            props["provisioningModel"] = s.provisioning_model
        if s.instance_termination_action:
            props["instanceTerminationAction"] = s.instance_termination_action
        return props
    if spec.preemptible or spec.spot:
        props = {
            "preemptible": True,
            "automaticRestart": False,
            "onHostMaintenance": "TERMINATE",
        }
        if spec.spot:
            props["provisioningModel"] = "SPOT"
        return props
    return None


def instance_metadata(spec: GcpComputeInstanceSpec) -> Dict[str, str]:
    metadata = dict(spec.metadata)
    if spec.ssh_keys:
        metadata["ssh-keys"] = "\n".join(spec.ssh_keys)
    return metadata


def attached_disks(spec: GcpComputeInstanceSpec) -> List[Dict[str, Any]]:
    disks = []
    for i, disk in enumerate(spec.attached_disks):
        props = {
            "source": disk.source,
            "deviceName": disk.device_name or f"attached-disk-{i}",
        }
        if disk.mode:
            props["mode"] = disk.mode
        disks.append(props)
    return disks


@module
class GcpComputeInstanceModule(ResourceModule):
    """Module for GCP Compute Engine instances."""

    MANIFEST: ClassVar[Type[GcpComputeInstance]] = GcpComputeInstance
    PROVIDER_PACKAGE: ClassVar[str] = "gcp"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {
            OP_INSTANCE_NAME,
            OP_INSTANCE_ID,
            OP_SELF_LINK,
            OP_INTERNAL_IP,
            OP_EXTERNAL_IP,
            OP_ZONE,
            OP_MACHINE_TYPE,
            OP_CPU_PLATFORM,
        }
    )
    LOWERCASE_KIND_LABEL: ClassVar[bool] = True

    def initialize_locals(self, ctx, stack_input) -> GcpComputeInstanceLocals:
        spec: GcpComputeInstanceSpec = stack_input.target.spec
        common = base_locals(stack_input, lowercase_kind=True)
        common["labels"] = merge_labels(common["labels"], spec.labels)
        return GcpComputeInstanceLocals(**common, project_id=spec.project_id.get_value())

    def provision(
        self,
        ctx: EngineContext,
        locals_: GcpComputeInstanceLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: GcpComputeInstanceSpec = locals_.target.spec

        initialize_params: Dict[str, Any] = {"image": spec.boot_disk.image}
        if spec.boot_disk.size_gb > 0:
            initialize_params["size"] = spec.boot_disk.size_gb
        if spec.boot_disk.type:
            initialize_params["type"] = spec.boot_disk.type

        props: Dict[str, Any] = {
            "name": locals_.name,
            "project": locals_.project_id,
            "zone": spec.zone,
            "machineType": spec.machine_type,
            "bootDisk": {
                "autoDelete": spec.boot_disk.auto_delete,
                "initializeParams": initialize_params,
            },
            "networkInterfaces": [network_interface(ni) for ni in spec.network_interfaces],
            "labels": dict(locals_.labels),
            "deletionProtection": spec.deletion_protection,
            "allowStoppingForUpdate": spec.allow_stopping_for_update,
        }
        if spec.tags:
            props["tags"] = list(spec.tags)
        metadata = instance_metadata(spec)
        if metadata:
            props["metadata"] = metadata
        if spec.startup_script:
            props["metadataStartupScript"] = spec.startup_script
        if spec.service_account is not None:
            account: Dict[str, Any] = {
                "scopes": list(spec.service_account.scopes) or list(DEFAULT_SERVICE_ACCOUNT_SCOPES)
            }
            email = optional_value(spec.service_account.email)
            if email:
                account["email"] = email
            props["serviceAccount"] = account
        schedule = scheduling(spec)
        if schedule is not None:
            props["scheduling"] = schedule
        if spec.attached_disks:
            props["attachedDisks"] = attached_disks(spec)

        instance = self.create_or_wrap(
            ctx,
            "compute instance",
            INSTANCE_TYPE_TOKEN,
            locals_.name,
            props,
            provider=provider,
            outputs=["instanceId", "selfLink", "cpuPlatform", "networkInterfaces"],
        )
        logger.info(f"Compute instance '{locals_.name}' ({spec.machine_type}) in {spec.zone}")

        has_external_ip = bool(spec.network_interfaces[0].access_configs)
        return {
            OP_INSTANCE_NAME: instance.output("name"),
            OP_INSTANCE_ID: instance.output("instanceId"),
            OP_SELF_LINK: instance.output("selfLink"),
            OP_ZONE: instance.output("zone"),
            OP_MACHINE_TYPE: instance.output("machineType"),
            OP_CPU_PLATFORM: instance.output("cpuPlatform"),
            OP_INTERNAL_IP: instance.output("networkInterfaces", 0, "networkIp"),
            OP_EXTERNAL_IP: (
                instance.output("networkInterfaces", 0, "accessConfigs", 0, "natIp")
                if has_external_ip
                else None
            ),
        }
