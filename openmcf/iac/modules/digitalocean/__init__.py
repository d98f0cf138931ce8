"""DigitalOcean resource modules."""
