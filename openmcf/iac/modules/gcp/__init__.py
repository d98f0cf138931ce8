"""GCP resource modules."""
