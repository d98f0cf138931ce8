"""Enumerations shared by manifest specs.

String values match the wire format the providers expect.
"""

from enum import Enum


class CloudResourceProvider(str, Enum):
    """Cloud providers a resource kind can belong to."""

    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"
    DIGITAL_OCEAN = "digitalocean"
    CIVO = "civo"
    CLOUDFLARE = "cloudflare"
    CONFLUENT = "confluent"
    KUBERNETES = "kubernetes"


class DnsRecordType(str, Enum):
    """DNS record types."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    MX = "MX"
    TXT = "TXT"
    SRV = "SRV"
    NS = "NS"
    CAA = "CAA"
    PTR = "PTR"
    SOA = "SOA"


PROXIABLE_RECORD_TYPES = frozenset({DnsRecordType.A, DnsRecordType.AAAA, DnsRecordType.CNAME})
PRIORITY_RECORD_TYPES = frozenset({DnsRecordType.MX, DnsRecordType.SRV})


def accepts_proxied(record_type: DnsRecordType) -> bool:
    return record_type in PROXIABLE_RECORD_TYPES


def accepts_priority(record_type: DnsRecordType) -> bool:
    return record_type in PRIORITY_RECORD_TYPES


def accepts_weight_and_port(record_type: DnsRecordType) -> bool:
    return record_type == DnsRecordType.SRV


def accepts_flags_and_tag(record_type: DnsRecordType) -> bool:
    return record_type == DnsRecordType.CAA


class DigitalOceanRegion(str, Enum):
    """DigitalOcean region slugs."""

    NYC1 = "nyc1"
    NYC3 = "nyc3"
    AMS3 = "ams3"
    SFO2 = "sfo2"
    SFO3 = "sfo3"
    SGP1 = "sgp1"
    LON1 = "lon1"
    FRA1 = "fra1"
    TOR1 = "tor1"
    BLR1 = "blr1"
    SYD1 = "syd1"
