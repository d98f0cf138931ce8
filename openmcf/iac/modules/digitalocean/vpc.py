"""DigitalOcean VPC module.

Creates: digitalocean:index/vpc:Vpc
"""

import logging
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type

from ....manifest.specs.digitalocean import DigitalOceanVpc, DigitalOceanVpcSpec
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals
from .. import module

logger = logging.getLogger(__name__)

VPC_TYPE_TOKEN = "digitalocean:index/vpc:Vpc"

OP_VPC_ID = "vpc_id"
OP_VPC_URN = "vpc_urn"
OP_IP_RANGE = "ip_range"
OP_REGION = "region"
OP_IS_DEFAULT = "is_default"


@module
class DigitalOceanVpcModule(ResourceModule):
    """Module for DigitalOcean VPCs.

    The VPC name is metadata.name. Without ip_range_cidr DigitalOcean picks
    the range, which is then only known as an engine output.
    """

    MANIFEST: ClassVar[Type[DigitalOceanVpc]] = DigitalOceanVpc
    PROVIDER_PACKAGE: ClassVar[str] = "digitalocean"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {OP_VPC_ID, OP_VPC_URN, OP_IP_RANGE, OP_REGION, OP_IS_DEFAULT}
    )

    def provision(
        self,
        ctx: EngineContext,
        locals_: Locals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec: DigitalOceanVpcSpec = locals_.target.spec
        region = spec.region.value
        props: Dict[str, Any] = {"name": locals_.name, "region": region}
        if spec.ip_range_cidr:
            props["ipRange"] = spec.ip_range_cidr
        if spec.description:
            props["description"] = spec.description

        vpc = self.create_or_wrap(
            ctx,
            "VPC",
            VPC_TYPE_TOKEN,
            locals_.name,
            props,
            provider=provider,
            outputs=["urn", "ipRange", "default"],
        )
        logger.info(f"DigitalOcean VPC '{locals_.name}' in {region}")
        return {
            OP_VPC_ID: vpc.id,
            OP_VPC_URN: vpc.output("urn"),
            OP_IP_RANGE: spec.ip_range_cidr or vpc.output("ipRange"),
            OP_REGION: region,
            OP_IS_DEFAULT: vpc.output("default"),
        }
