"""Standard labels derived from manifest metadata."""

from .builder import build_labels, merge_labels, stack_fqdn, stack_labels

__all__ = ["build_labels", "merge_labels", "stack_fqdn", "stack_labels"]
