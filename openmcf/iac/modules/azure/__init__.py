"""Azure resource modules."""
