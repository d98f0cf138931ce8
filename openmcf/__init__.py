"""
OpenMCF

A catalog of single-resource infrastructure modules. Every resource is
described by a manifest (apiVersion, kind, metadata, spec); one module per
kind turns the manifest plus provider credentials into engine resources and
exports a fixed set of named outputs.
"""

__version__ = "0.1.0"
