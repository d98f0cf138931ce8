"""Cloudflare DNS record module.

Creates: cloudflare:index/dnsRecord:DnsRecord
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type

from ....manifest.enums import DnsRecordType, accepts_priority, accepts_proxied
from ....manifest.specs.cloudflare import (
    CLOUDFLARE_AUTO_TTL,
    CloudflareDnsRecord,
    CloudflareDnsRecordSpec,
)
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

DNS_RECORD_TYPE_TOKEN = "cloudflare:index/dnsRecord:DnsRecord"

OP_RECORD_ID = "record_id"
OP_HOSTNAME = "hostname"
OP_RECORD_TYPE = "record_type"
OP_PROXIED = "proxied"


def cloudflare_ttl(ttl: int) -> int:
    """0 and 1 both mean automatic, which Cloudflare spells 1."""
    return ttl if ttl > CLOUDFLARE_AUTO_TTL else CLOUDFLARE_AUTO_TTL


def record_props(
    record_type: DnsRecordType,
    name: str,
    value: str,
    ttl: int,
    proxied: bool,
    priority: Optional[int],
    comment: Optional[str],
) -> Dict[str, Any]:
    """Record arguments shared by the record and zone modules (zoneId excluded).

    proxied is sent only for A/AAAA/CNAME; priority always for MX/SRV.
    """
    props: Dict[str, Any] = {
        "name": name,
        "type": record_type.value,
        "content": value,
        "ttl": cloudflare_ttl(ttl),
    }
    if accepts_proxied(record_type):
        props["proxied"] = proxied
    if accepts_priority(record_type):
        props["priority"] = priority or 0
    if comment:
        props["comment"] = comment
    return props


@dataclass
class CloudflareDnsRecordLocals(Locals):
    zone_id: str = ""


@module
class CloudflareDnsRecordModule(ResourceModule):
    """Module for Cloudflare DNS records."""

    MANIFEST: ClassVar[Type[CloudflareDnsRecord]] = CloudflareDnsRecord
    PROVIDER_PACKAGE: ClassVar[str] = "cloudflare"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {OP_RECORD_ID, OP_HOSTNAME, OP_RECORD_TYPE, OP_PROXIED}
    )

    def initialize_locals(self, ctx, stack_input) -> CloudflareDnsRecordLocals:
        spec: CloudflareDnsRecordSpec = stack_input.target.spec
        return CloudflareDnsRecordLocals(
            **base_locals(stack_input), zone_id=spec.zone_id.get_value()
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: CloudflareDnsRecordLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: CloudflareDnsRecordSpec = locals_.target.spec
        props = {"zoneId": locals_.zone_id}
        props.update(
            record_props(
                spec.type,
                spec.name,
                spec.value,
                spec.ttl,
                spec.proxied,
                spec.priority,
                spec.comment,
            )
        )
        record = self.create_or_wrap(
            ctx,
            f"DNS record {spec.name}",
            DNS_RECORD_TYPE_TOKEN,
            locals_.name.lower(),
            props,
            provider=provider,
        )
        return {
            OP_RECORD_ID: record.id,
            OP_HOSTNAME: record.output("name"),
            OP_RECORD_TYPE: spec.type.value,
            OP_PROXIED: record.output("proxied") if accepts_proxied(spec.type) else False,
        }
