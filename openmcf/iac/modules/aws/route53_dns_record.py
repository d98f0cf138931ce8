"""AWS Route53 DNS record module.

Creates: aws:route53/record:Record

A record is either an alias (pointing at a CloudFront distribution, load
balancer, S3 website, ...) or a basic record carrying TTL and values. At most
one routing policy applies; every policy except simple needs a set identifier.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type

from ....manifest.specs.aws import (
    AwsRoute53DnsRecord,
    AwsRoute53DnsRecordSpec,
    FailoverRoutingPolicy,
    GeolocationRoutingPolicy,
    LatencyRoutingPolicy,
    WeightedRoutingPolicy,
)
from ...base_module import ResourceModule
from ...engine import EngineContext, ProviderHandle
from ...locals import Locals, base_locals
from .. import module

logger = logging.getLogger(__name__)

RECORD_TYPE_TOKEN = "aws:route53/record:Record"

DEFAULT_TTL_SECONDS = 300

OP_FQDN = "fqdn"
OP_RECORD_TYPE = "record_type"
OP_HOSTED_ZONE_ID = "hosted_zone_id"
OP_IS_ALIAS = "is_alias"
OP_SET_IDENTIFIER = "set_identifier"
OP_RECORD_ID = "record_id"


@dataclass
class Route53DnsRecordLocals(Locals):
    hosted_zone_id: str = ""


def routing_policy_props(spec: AwsRoute53DnsRecordSpec) -> Dict[str, Any]:
    """Engine props for the record's routing policy; empty for simple routing."""
    policy = spec.routing_policy
    if isinstance(policy, WeightedRoutingPolicy):
        return {"weightedRoutingPolicies": [{"weight": policy.weight}]}
    if isinstance(policy, LatencyRoutingPolicy):
        return {"latencyRoutingPolicies": [{"region": policy.region}]}
    if isinstance(policy, FailoverRoutingPolicy):
        return {"failoverRoutingPolicies": [{"type": policy.failover_type}]}
    if isinstance(policy, GeolocationRoutingPolicy):
        location = {}
        if policy.continent:
            location["continent"] = policy.continent
        if policy.country:
            location["country"] = policy.country
        if policy.subdivision:
            location["subdivision"] = policy.subdivision
        return {"geolocationRoutingPolicies": [location]}
    return {}


def record_props(spec: AwsRoute53DnsRecordSpec, hosted_zone_id: str) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        "zoneId": hosted_zone_id,
        "name": spec.name,
        "type": spec.type.value,
    }
    if spec.set_identifier:
        props["setIdentifier"] = spec.set_identifier
    if spec.health_check_id:
        props["healthCheckId"] = spec.health_check_id

    if spec.is_alias:
        props["aliases"] = [
            {
                "name": spec.alias_target.dns_name,
                "zoneId": spec.alias_target.hosted_zone_id,
                "evaluateTargetHealth": spec.alias_target.evaluate_target_health,
            }
        ]
    else:
        props["ttl"] = spec.ttl or DEFAULT_TTL_SECONDS
        props["records"] = list(spec.values)

    props.update(routing_policy_props(spec))
    return props


@module
class AwsRoute53DnsRecordModule(ResourceModule):
    """Module for AWS Route53 DNS records."""

    MANIFEST: ClassVar[Type[AwsRoute53DnsRecord]] = AwsRoute53DnsRecord
    PROVIDER_PACKAGE: ClassVar[str] = "aws"
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset(
        {
            OP_FQDN,
            OP_RECORD_TYPE,
            OP_HOSTED_ZONE_ID,
            OP_IS_ALIAS,
            OP_SET_IDENTIFIER,
            OP_RECORD_ID,
        }
    )

    def initialize_locals(self, ctx, stack_input) -> Route53DnsRecordLocals:
        return Route53DnsRecordLocals(
            **base_locals(stack_input),
            hosted_zone_id=stack_input.target.spec.hosted_zone_id.get_value(),
        )

    def provision(
        self,
        ctx: EngineContext,
        locals_: Route53DnsRecordLocals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        spec = locals_.target.spec
        record = self.create_or_wrap(
            ctx,
            f"DNS record {spec.name}",
            RECORD_TYPE_TOKEN,
            locals_.name,
            record_props(spec, locals_.hosted_zone_id),
            provider=provider,
            outputs=["fqdn"],
        )
        logger.debug(
            f"Route53 record '{spec.name}' ({spec.type.value}) alias={spec.is_alias}"
        )
        return {
            OP_FQDN: record.output("fqdn"),
            OP_RECORD_TYPE: spec.type.value,
            OP_HOSTED_ZONE_ID: locals_.hosted_zone_id,
            OP_IS_ALIAS: spec.is_alias,
            OP_SET_IDENTIFIER: spec.set_identifier or "",
            OP_RECORD_ID: record.id,
        }
