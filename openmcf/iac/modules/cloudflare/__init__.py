"""Cloudflare resource modules."""
