"""Manifest models, one module per provider."""
