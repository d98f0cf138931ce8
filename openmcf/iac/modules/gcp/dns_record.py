"""GCP Cloud DNS record set module.

Creates: gcp:dns/recordSet:RecordSet
"""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Type

from ....manifest.base import declared_default
from ....manifest.specs.gcp import GcpDnsRecord, GcpDnsRecordSpec
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

RECORD_SET_TYPE_TOKEN = "gcp:dns/recordSet:RecordSet"

OP_FQDN = "fqdn"
OP_RECORD_TYPE = "record_type"
OP_MANAGED_ZONE = "managed_zone"
OP_PROJECT_ID = "project_id"
OP_TTL_SECONDS = "ttl_seconds"


@dataclass
class GcpDnsRecordLocals(Locals):
    project_id: str = ""
    managed_zone: str = ""
    record_type: str = ""
    record_name: str = ""
    values: List[str] = field(default_factory=list)
    ttl_seconds: int = 0


@module
class GcpDnsRecordModule(ResourceModule):
    """Module for GCP Cloud DNS record sets."""

    MANIFEST: ClassVar[Type[GcpDnsRecord]] = GcpDnsRecord
    PROVIDER_PACKAGE: ClassVar[str] = "gcp"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {OP_FQDN, OP_RECORD_TYPE, OP_MANAGED_ZONE, OP_PROJECT_ID, OP_TTL_SECONDS}
    )
    LOWERCASE_KIND_LABEL: ClassVar[bool] = True

    def initialize_locals(self, ctx, stack_input) -> GcpDnsRecordLocals:
        spec: GcpDnsRecordSpec = stack_input.target.spec
        return GcpDnsRecordLocals(
            **base_locals(stack_input, lowercase_kind=True),
            project_id=spec.project_id.get_value(),
            managed_zone=spec.managed_zone.get_value(),
            record_type=spec.type.value,
            record_name=spec.name,
            values=list(spec.values),
            ttl_seconds=spec.ttl_seconds or declared_default(GcpDnsRecordSpec, "ttl_seconds"),
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: GcpDnsRecordLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        self.create_or_wrap(
            ctx,
            f"DNS record {locals_.record_name}",
            RECORD_SET_TYPE_TOKEN,
            locals_.name,
            {
                "project": locals_.project_id,
                "managedZone": locals_.managed_zone,
                "name": locals_.record_name,
                "type": locals_.record_type,
                "ttl": locals_.ttl_seconds,
                "rrdatas": list(locals_.values),
            },
            provider=provider,
        )
        logger.debug(
            f"Cloud DNS {locals_.record_type} record '{locals_.record_name}' in {locals_.managed_zone}"
        )
        return {
            OP_FQDN: locals_.record_name,
            OP_RECORD_TYPE: locals_.record_type,
            OP_MANAGED_ZONE: locals_.managed_zone,
            OP_PROJECT_ID: locals_.project_id,
            OP_TTL_SECONDS: locals_.ttl_seconds,
        }
