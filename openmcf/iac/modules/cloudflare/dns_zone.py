"""Cloudflare DNS zone module with inline records.

Creates:
    cloudflare:index/zone:Zone              <metadata.name>
    cloudflare:index/dnsRecord:DnsRecord    <name>-<TYPE>-<idx> per spec.records entry
"""

import logging
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Type

from ....manifest.enums import accepts_proxied
from ....manifest.specs.cloudflare import (
    CloudflareDnsZone,
    CloudflareDnsZoneRecord,
    CloudflareDnsZoneSpec,
)
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle, ResourceHandle
from ...locals import Locals
from .. import module
from .dns_record import DNS_RECORD_TYPE_TOKEN, record_props

logger = logging.getLogger(__name__)

ZONE_TYPE_TOKEN = "cloudflare:index/zone:Zone"

OP_ZONE_ID = "zone_id"
OP_NAMESERVERS = "nameservers"


def record_logical_name(record: CloudflareDnsZoneRecord, index: int) -> str:
    """Engine name of an inline record; stable as long as the list order is."""
    return f"{record.name}-{record.type.value}-{index}"


@module
class CloudflareDnsZoneModule(ResourceModule):
    """Module for Cloudflare zones and their inline records."""

    MANIFEST: ClassVar[Type[CloudflareDnsZone]] = CloudflareDnsZone
    PROVIDER_PACKAGE: ClassVar[str] = "cloudflare"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset({OP_ZONE_ID, OP_NAMESERVERS})

    def provision(
        self,
        ctx: EngineContext,
        locals_: Locals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: CloudflareDnsZoneSpec = locals_.target.spec
        zone = self.create_or_wrap(
            ctx,
            f"zone {spec.zone_name}",
            ZONE_TYPE_TOKEN,
            locals_.name.lower(),
            {
                "account": {"id": spec.account_id},
                "name": spec.zone_name,
                "paused": spec.paused,
                "plan": spec.plan.value,
            },
            provider=provider,
            outputs=["nameServers"],
        )
        records = self.create_records(ctx, spec, zone, provider)
        logger.info(f"Cloudflare zone '{spec.zone_name}' with {len(records)} record(s)")
        return {
            OP_ZONE_ID: zone.id,
            OP_NAMESERVERS: zone.output("nameServers"),
        }

    def create_records(
        self,
        ctx: EngineContext,
        spec: CloudflareDnsZoneSpec,
        zone: ResourceHandle,
        provider: Optional[ProviderHandle],
    ) -> List[ResourceHandle]:
        created = []
        for index, record in enumerate(spec.records):
            name = record_logical_name(record, index)
            proxied = record.proxied or (spec.default_proxied and accepts_proxied(record.type))
            props = {"zoneId": zone.id}
            props.update(
                record_props(
                    record.type,
                    record.name,
                    record.value,
                    record.ttl,
                    proxied,
                    record.priority,
                    record.comment,
                )
            )
            created.append(
                self.create_or_wrap(
                    ctx,
                    f"DNS record {name}",
                    DNS_RECORD_TYPE_TOKEN,
                    name,
                    props,
                    provider=provider,
                    depends_on=[zone],
                )
            )
        return created
