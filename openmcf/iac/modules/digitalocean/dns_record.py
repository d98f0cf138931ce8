"""DigitalOcean DNS record module.

Creates: digitalocean:index/dnsRecord:DnsRecord
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type

from ....manifest.base import declared_default
from ....manifest.enums import accepts_flags_and_tag, accepts_priority, accepts_weight_and_port
from ....manifest.specs.digitalocean import DigitalOceanDnsRecord, DigitalOceanDnsRecordSpec
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

DNS_RECORD_TYPE_TOKEN = "digitalocean:index/dnsRecord:DnsRecord"

APEX = "@"

OP_RECORD_ID = "record_id"
OP_HOSTNAME = "hostname"
OP_RECORD_TYPE = "record_type"
OP_DOMAIN = "domain"
OP_TTL_SECONDS = "ttl_seconds"


@dataclass
class DigitalOceanDnsRecordLocals(Locals):
    domain: str = ""
    value: str = ""
    ttl_seconds: int = 0


def hostname(record_name: str, domain: str) -> str:
    """Fully qualified hostname of a record; the apex is the domain itself."""
    if record_name == APEX:
        return domain
    return f"{record_name}.{domain}"


@module
class DigitalOceanDnsRecordModule(ResourceModule):
    """Module for DigitalOcean DNS records."""

    MANIFEST: ClassVar[Type[DigitalOceanDnsRecord]] = DigitalOceanDnsRecord
    PROVIDER_PACKAGE: ClassVar[str] = "digitalocean"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {OP_RECORD_ID, OP_HOSTNAME, OP_RECORD_TYPE, OP_DOMAIN, OP_TTL_SECONDS}
    )

    def initialize_locals(self, ctx, stack_input) -> DigitalOceanDnsRecordLocals:
        spec: DigitalOceanDnsRecordSpec = stack_input.target.spec
        return DigitalOceanDnsRecordLocals(
            **base_locals(stack_input),
            domain=spec.domain.get_value(),
            value=spec.value.get_value(),
            ttl_seconds=spec.ttl_seconds
            or declared_default(DigitalOceanDnsRecordSpec, "ttl_seconds"),
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: DigitalOceanDnsRecordLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: DigitalOceanDnsRecordSpec = locals_.target.spec
        props: Dict[str, Any] = {
            "domain": locals_.domain,
            "name": spec.name,
            "type": spec.type.value,
            "value": locals_.value,
            "ttl": locals_.ttl_seconds,
        }
        if accepts_priority(spec.type):
            props["priority"] = spec.priority
        if accepts_weight_and_port(spec.type):
            props["weight"] = spec.weight
            props["port"] = spec.port
        if accepts_flags_and_tag(spec.type):
            props["flags"] = spec.flags
            props["tag"] = spec.tag

        record = self.create_or_wrap(
            ctx,
            f"DNS record {spec.name}",
            DNS_RECORD_TYPE_TOKEN,
            locals_.name,
            props,
            provider=provider,
        )
        fqdn = hostname(spec.name, locals_.domain)
        logger.debug(f"DigitalOcean {spec.type.value} record '{fqdn}'")
        return {
            OP_RECORD_ID: record.id,
            OP_HOSTNAME: fqdn,
            OP_RECORD_TYPE: spec.type.value,
            OP_DOMAIN: locals_.domain,
            OP_TTL_SECONDS: locals_.ttl_seconds,
        }
