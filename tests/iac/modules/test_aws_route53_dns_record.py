import pytest

from openmcf.iac.engine import OutputRef
from openmcf.iac.modules.aws.route53_dns_record import RECORD_TYPE_TOKEN


@pytest.fixture
def aws(provider_configs):
    return provider_configs["aws"]


class TestRoute53DnsRecordModule:
    """Tests for the Route53 record module."""

    def test_basic_record(self, run, route53_record, aws):
        ctx = run(route53_record, aws)
        record = ctx.resource(RECORD_TYPE_TOKEN, "api-record")
        assert record.props == {
            "zoneId": "Z123",
            "name": "api.example.com",
            "type": "A",
            "ttl": 300,
            "records": ["1.2.3.4"],
        }
        assert record.provider.package == "aws"
        assert ctx.exports == {
            "fqdn": OutputRef("api-record", "fqdn"),
            "hosted_zone_id": "Z123",
            "is_alias": False,
            "record_id": OutputRef("api-record", "id"),
            "record_type": "A",
            "set_identifier": "",
        }

    def test_explicit_ttl(self, run, route53_record, aws):
        route53_record["spec"]["ttl"] = 60
        ctx = run(route53_record, aws)
        assert ctx.resource(RECORD_TYPE_TOKEN, "api-record").props["ttl"] == 60

    def test_weighted_record(self, run, route53_record, aws):
        route53_record["spec"]["routingPolicy"] = {"weighted": {"weight": 40}}
        route53_record["spec"]["setIdentifier"] = "blue"
        ctx = run(route53_record, aws)
        props = ctx.resource(RECORD_TYPE_TOKEN, "api-record").props
        assert props["weightedRoutingPolicies"] == [{"weight": 40}]
        assert props["setIdentifier"] == "blue"
        assert props["ttl"] == 300
        assert ctx.exports["is_alias"] is False
        assert ctx.exports["set_identifier"] == "blue"

    @pytest.mark.parametrize(
        "policy, key, expected",
        [
            ({"latency": {"region": "eu-west-1"}}, "latencyRoutingPolicies", [{"region": "eu-west-1"}]),
            ({"failover": {"failoverType": "PRIMARY"}}, "failoverRoutingPolicies", [{"type": "PRIMARY"}]),
            (
                {"geolocation": {"continent": "EU", "country": "DE"}},
                "geolocationRoutingPolicies",
                [{"continent": "EU", "country": "DE"}],
            ),
        ],
    )
    def test_routing_policies(self, run, route53_record, aws, policy, key, expected):
        route53_record["spec"]["routingPolicy"] = policy
        route53_record["spec"]["setIdentifier"] = "primary"
        props = run(route53_record, aws).resource(RECORD_TYPE_TOKEN, "api-record").props
        assert props[key] == expected

    def test_alias_record(self, run, route53_record, aws):
        route53_record["spec"]["values"] = []
        route53_record["spec"]["aliasTarget"] = {
            "dnsName": "d111111abcdef8.cloudfront.net",
            "hostedZoneId": "Z2FDTNDATAQYW2",
        }
        ctx = run(route53_record, aws)
        props = ctx.resource(RECORD_TYPE_TOKEN, "api-record").props
        assert props["aliases"] == [
            {
                "name": "d111111abcdef8.cloudfront.net",
                "zoneId": "Z2FDTNDATAQYW2",
                "evaluateTargetHealth": False,
            }
        ]
        assert "ttl" not in props
        assert "records" not in props
        assert ctx.exports["is_alias"] is True

    def test_health_check(self, run, route53_record, aws):
        route53_record["spec"]["healthCheckId"] = "hc-1"
        props = run(route53_record, aws).resource(RECORD_TYPE_TOKEN, "api-record").props
        assert props["healthCheckId"] == "hc-1"

    def test_resolved_reference_passes_through(self, run, route53_record, aws):
        route53_record["spec"]["hostedZoneId"] = {"value": "Z999"}
        ctx = run(route53_record, aws)
        assert ctx.resource(RECORD_TYPE_TOKEN, "api-record").props["zoneId"] == "Z999"
        assert ctx.exports["hosted_zone_id"] == "Z999"
