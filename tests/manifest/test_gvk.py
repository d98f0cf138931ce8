import pytest

from openmcf.exceptions import ValidationFailed
from openmcf.manifest import GVK, extract_gvk


def test_extract_gvk():
    gvk = extract_gvk(
        "apiVersion: aws.openmcf.org/v1\nkind: AwsRoute53DnsRecord\nmetadata:\n  name: api\n"
    )
    assert gvk == GVK(api_version="aws.openmcf.org/v1", kind="AwsRoute53DnsRecord")
    assert gvk.group == "aws.openmcf.org"
    assert gvk.version == "v1"


def test_extract_gvk_ignores_rest_of_document():
    """Custom tags in the spec do not break kind detection."""
    text = (
        "apiVersion: gcp.openmcf.org/v1\n"
        "kind: GcpDnsRecord\n"
        "spec:\n"
        "  type: !RecordType A\n"
    )
    assert extract_gvk(text).kind == "GcpDnsRecord"


@pytest.mark.parametrize(
    "text, field",
    [
        ("kind: GcpDnsRecord\n", "apiVersion"),
        ("apiVersion: gcp.openmcf.org/v1\n", "kind"),
        ("apiVersion: gcp\nkind: GcpDnsRecord\n", "apiVersion"),
        ("- a\n- b\n", "manifest"),
        ("apiVersion: [unclosed\n", "manifest"),
    ],
)
def test_extract_gvk_failures(text, field):
    with pytest.raises(ValidationFailed) as exc_info:
        extract_gvk(text)
    assert exc_info.value.field == field
