"""AWS resource modules."""
