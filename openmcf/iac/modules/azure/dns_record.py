"""Azure DNS record module.

Creates one of the classic azure:dns record resources, selected by record type:
ARecord, AaaaRecord, CNameRecord, MxRecord, TxtRecord, NsRecord, SrvRecord,
CaaRecord or PtrRecord.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Type

from ....manifest.base import declared_default
from ....manifest.enums import DnsRecordType
from ....manifest.specs.azure import AzureDnsRecord, AzureDnsRecordSpec
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

RECORD_TYPE_TOKENS = {
    DnsRecordType.A: "azure:dns/aRecord:ARecord",
    DnsRecordType.AAAA: "azure:dns/aaaaRecord:AaaaRecord",
    DnsRecordType.CNAME: "azure:dns/cNameRecord:CNameRecord",
    DnsRecordType.MX: "azure:dns/mxRecord:MxRecord",
    DnsRecordType.TXT: "azure:dns/txtRecord:TxtRecord",
    DnsRecordType.NS: "azure:dns/nsRecord:NsRecord",
    DnsRecordType.SRV: "azure:dns/srvRecord:SrvRecord",
    DnsRecordType.CAA: "azure:dns/caaRecord:CaaRecord",
    DnsRecordType.PTR: "azure:dns/ptrRecord:PtrRecord",
}

# SRV values that are not "priority weight port target" get these
SRV_DEFAULT_PRIORITY = 10
SRV_DEFAULT_WEIGHT = 10
SRV_DEFAULT_PORT = 80

OP_RECORD_ID = "record_id"
OP_FQDN = "fqdn"


@dataclass
class AzureDnsRecordLocals(Locals):
    zone_name: str = ""
    resource_group: str = ""
    record_name: str = ""
    ttl: int = 0
    mx_priority: int = 0


def srv_record(value: str) -> Dict[str, Any]:
    parts = value.split()
    if len(parts) == 4 and all(p.isdigit() for p in parts[:3]):
        priority, weight, port, target = parts
        return {
            "priority": int(priority),
            "weight": int(weight),
            "port": int(port),
            "target": target,
        }
    return {
        "priority": SRV_DEFAULT_PRIORITY,
        "weight": SRV_DEFAULT_WEIGHT,
        "port": SRV_DEFAULT_PORT,
        "target": value,
    }


def caa_record(value: str) -> Dict[str, Any]:
    parts = value.split(None, 2)
    if len(parts) == 3 and parts[0].isdigit():
        flags, tag, rest = parts
        return {"flags": int(flags), "tag": tag, "value": rest.strip('"')}
    return {"flags": 0, "tag": "issue", "value": value}


def record_values(record_type: DnsRecordType, values: List[str], mx_priority: int) -> Dict[str, Any]:
    """The type-specific props carrying the record's values."""
    if record_type == DnsRecordType.CNAME:
        return {"record": values[0]}
    if record_type == DnsRecordType.MX:
        return {
            "records": [{"preference": str(mx_priority), "exchange": v} for v in values]
        }
    if record_type == DnsRecordType.TXT:
        return {"records": [{"value": v} for v in values]}
    if record_type == DnsRecordType.SRV:
        return {"records": [srv_record(v) for v in values]}
    if record_type == DnsRecordType.CAA:
        return {"records": [caa_record(v) for v in values]}
    return {"records": list(values)}


@module
class AzureDnsRecordModule(ResourceModule):
    """Module for Azure DNS records."""

    MANIFEST: ClassVar[Type[AzureDnsRecord]] = AzureDnsRecord
    PROVIDER_PACKAGE: ClassVar[str] = "azure"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset({OP_RECORD_ID, OP_FQDN})
    LOWERCASE_KIND_LABEL: ClassVar[bool] = True

    def initialize_locals(self, ctx, stack_input) -> AzureDnsRecordLocals:
        spec: AzureDnsRecordSpec = stack_input.target.spec
        return AzureDnsRecordLocals(
            **base_locals(stack_input, lowercase_kind=True),
            zone_name=spec.zone_name.get_value(),
            resource_group=spec.resource_group,
            record_name=spec.name,
            ttl=spec.ttl_seconds or declared_default(AzureDnsRecordSpec, "ttl_seconds"),
            mx_priority=(
                spec.mx_priority
                if spec.mx_priority is not None
                else declared_default(AzureDnsRecordSpec, "mx_priority")
            ),
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: AzureDnsRecordLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec = locals_.target.spec
        props = {
            "name": locals_.record_name,
            "zoneName": locals_.zone_name,
            "resourceGroupName": locals_.resource_group,
            "ttl": locals_.ttl,
            "tags": dict(locals_.labels),
        }
        props.update(record_values(spec.record_type, spec.values, locals_.mx_priority))

        record = self.create_or_wrap(
            ctx,
            f"{spec.record_type.value} record {locals_.record_name}",
            RECORD_TYPE_TOKENS[spec.record_type],
            locals_.name,
            props,
            provider=provider,
            outputs=["fqdn"],
        )
        logger.debug(
            f"Azure DNS {spec.record_type.value} record '{locals_.record_name}' in zone {locals_.zone_name}"
        )
        return {OP_RECORD_ID: record.id, OP_FQDN: record.output("fqdn")}
