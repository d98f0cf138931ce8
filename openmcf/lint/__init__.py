"""Static lint of manifest schema definitions."""

from .checker import check_models, lint_all_kinds, lint_models
from .rules import DEFAULT_REQUIRES_OPTIONAL, RULES, RuleSpec

__all__ = [
    "DEFAULT_REQUIRES_OPTIONAL",
    "RULES",
    "RuleSpec",
    "check_models",
    "lint_all_kinds",
    "lint_models",
]
