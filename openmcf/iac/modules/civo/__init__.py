"""Civo resource modules."""
