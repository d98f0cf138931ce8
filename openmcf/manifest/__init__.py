"""Resource manifest model: envelope, kinds, specs and foreign-key references."""

from .base import (
    CloudResourceMetadata,
    Manifest,
    SpecModel,
    StringValueOrRef,
    ValueFromRef,
    declared_default,
    default_field,
    optional_value,
    to_string_array,
)
from .enums import CloudResourceProvider, DnsRecordType
from .gvk import GVK, extract_gvk
from .kinds import KindRegistry, ensure_kinds_registered, register_kind
from .loader import load_manifest, manifest_to_dict, parse_manifest
from .references import collect_references, resolve_references

__all__ = [
    "CloudResourceMetadata",
    "CloudResourceProvider",
    "DnsRecordType",
    "GVK",
    "KindRegistry",
    "Manifest",
    "SpecModel",
    "StringValueOrRef",
    "ValueFromRef",
    "collect_references",
    "declared_default",
    "default_field",
    "ensure_kinds_registered",
    "extract_gvk",
    "load_manifest",
    "manifest_to_dict",
    "optional_value",
    "parse_manifest",
    "register_kind",
    "resolve_references",
    "to_string_array",
]
