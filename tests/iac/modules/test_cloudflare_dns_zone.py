import pytest

from openmcf.iac.engine import OutputRef
from openmcf.iac.modules.cloudflare.dns_record import DNS_RECORD_TYPE_TOKEN
from openmcf.iac.modules.cloudflare.dns_zone import ZONE_TYPE_TOKEN
from openmcf.manifest.enums import DnsRecordType, accepts_priority, accepts_proxied


@pytest.fixture
def cloudflare(provider_configs):
    return provider_configs["cloudflare"]


class TestCloudflareDnsZoneModule:
    """Tests for the Cloudflare zone module with inline records."""

    def test_zone_and_record(self, run, cloudflare_dns_zone, cloudflare):
        ctx = run(cloudflare_dns_zone, cloudflare)
        assert [r.name for r in ctx.resources] == ["example-zone", "www-A-0"]

        zone = ctx.resource(ZONE_TYPE_TOKEN, "example-zone")
        assert zone.props == {
            "account": {"id": "acct-1"},
            "name": "example.com",
            "paused": False,
            "plan": "free",
        }

        record = ctx.resource(DNS_RECORD_TYPE_TOKEN, "www-A-0")
        assert record.props == {
            "zoneId": OutputRef("example-zone", "id"),
            "name": "www",
            "type": "A",
            "content": "1.2.3.4",
            "ttl": 300,
            "proxied": True,
        }
        assert record.depends_on == ["example-zone"]

        assert ctx.exports == {
            "nameservers": OutputRef("example-zone", "nameServers"),
            "zone_id": OutputRef("example-zone", "id"),
        }

    def test_record_names_are_indexed(self, run, cloudflare_dns_zone, cloudflare):
        cloudflare_dns_zone["spec"]["records"] = [
            {"name": "www", "type": "A", "value": "1.2.3.4"},
            {"name": "www", "type": "A", "value": "5.6.7.8"},
            {"name": "@", "type": "MX", "value": "mail.example.com", "priority": 10},
        ]
        ctx = run(cloudflare_dns_zone, cloudflare)
        assert [r.name for r in ctx.resources_of_type(DNS_RECORD_TYPE_TOKEN)] == [
            "www-A-0",
            "www-A-1",
            "@-MX-2",
        ]

    def test_default_proxied_applies_to_proxiable_types(self, run, cloudflare_dns_zone, cloudflare):
        cloudflare_dns_zone["spec"]["defaultProxied"] = True
        cloudflare_dns_zone["spec"]["records"] = [
            {"name": "app", "type": "CNAME", "value": "example.com"},
            {"name": "txt", "type": "TXT", "value": "hello"},
        ]
        ctx = run(cloudflare_dns_zone, cloudflare)
        assert ctx.resource(DNS_RECORD_TYPE_TOKEN, "app-CNAME-0").props["proxied"] is True
        assert "proxied" not in ctx.resource(DNS_RECORD_TYPE_TOKEN, "txt-TXT-1").props

    def test_zone_without_records(self, run, cloudflare_dns_zone, cloudflare):
        cloudflare_dns_zone["spec"]["records"] = []
        ctx = run(cloudflare_dns_zone, cloudflare)
        assert len(ctx.resources) == 1
        assert set(ctx.exports) == {"zone_id", "nameservers"}

    def test_plan_and_pause(self, run, cloudflare_dns_zone, cloudflare):
        cloudflare_dns_zone["spec"].update(plan="pro", paused=True)
        zone = run(cloudflare_dns_zone, cloudflare).resource(ZONE_TYPE_TOKEN, "example-zone")
        assert zone.props["plan"] == "pro"
        assert zone.props["paused"] is True

    def test_srv_priority_defaults_to_zero(self, run, cloudflare_dns_zone, cloudflare):
        cloudflare_dns_zone["spec"]["records"] = [
            {"name": "_sip._tcp", "type": "SRV", "value": "10 5060 sip.example.com"}
        ]
        ctx = run(cloudflare_dns_zone, cloudflare)
        assert ctx.resource(DNS_RECORD_TYPE_TOKEN, "_sip._tcp-SRV-0").props["priority"] == 0


@pytest.mark.parametrize("record_type", list(DnsRecordType))
def test_zone_record_fields_follow_type(run, cloudflare_dns_zone, cloudflare, record_type):
    record = {"name": "r", "type": record_type.value, "value": "example"}
    if record_type == DnsRecordType.MX:
        record["priority"] = 5
    cloudflare_dns_zone["spec"].update(defaultProxied=True, records=[record])

    props = run(cloudflare_dns_zone, cloudflare).resource(
        DNS_RECORD_TYPE_TOKEN, f"r-{record_type.value}-0"
    ).props
    assert ("proxied" in props) is accepts_proxied(record_type)
    assert ("priority" in props) is accepts_priority(record_type)
    if accepts_proxied(record_type):
        assert props["proxied"] is True
