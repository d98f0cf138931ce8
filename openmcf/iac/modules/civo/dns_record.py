"""Civo DNS record module.

Creates: civo:index/dnsDomainRecord:DnsDomainRecord
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type

from ....manifest.enums import accepts_priority
from ....manifest.specs.civo import CivoDnsRecord, CivoDnsRecordSpec
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

DNS_DOMAIN_RECORD_TYPE_TOKEN = "civo:index/dnsDomainRecord:DnsDomainRecord"

DEFAULT_TTL_SECONDS = 3600

OP_RECORD_ID = "record_id"
OP_HOSTNAME = "hostname"
OP_RECORD_TYPE = "record_type"
OP_ACCOUNT_ID = "account_id"


@dataclass
class CivoDnsRecordLocals(Locals):
    zone_id: str = ""
    ttl: int = DEFAULT_TTL_SECONDS


@module
class CivoDnsRecordModule(ResourceModule):
    """Module for Civo DNS domain records."""

    MANIFEST: ClassVar[Type[CivoDnsRecord]] = CivoDnsRecord
    PROVIDER_PACKAGE: ClassVar[str] = "civo"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {OP_RECORD_ID, OP_HOSTNAME, OP_RECORD_TYPE, OP_ACCOUNT_ID}
    )

    def initialize_locals(self, ctx, stack_input) -> CivoDnsRecordLocals:
        spec: CivoDnsRecordSpec = stack_input.target.spec
        return CivoDnsRecordLocals(
            **base_locals(stack_input),
            zone_id=spec.zone_id.get_value(),
            ttl=spec.ttl or DEFAULT_TTL_SECONDS,
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: CivoDnsRecordLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: CivoDnsRecordSpec = locals_.target.spec
        props: Dict[str, Any] = {
            "domainId": locals_.zone_id,
            "name": spec.name,
            "type": spec.type.value,
            "value": spec.value,
            "ttl": locals_.ttl,
        }
        if accepts_priority(spec.type):
            props["priority"] = spec.priority

        record = self.create_or_wrap(
            ctx,
            f"DNS record {spec.name}",
            DNS_DOMAIN_RECORD_TYPE_TOKEN,
            locals_.name.lower(),
            props,
            provider=provider,
            outputs=["accountId"],
        )
        return {
            OP_RECORD_ID: record.id,
            OP_HOSTNAME: record.output("name"),
            OP_RECORD_TYPE: spec.type.value,
            OP_ACCOUNT_ID: record.output("accountId"),
        }
