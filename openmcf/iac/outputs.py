"""Output contract registry.

Each module declares its output keys as constants next to its code and lists
them in OUTPUT_KEYS. Registering the module records (kind -> keys) here so a
reference can be checked against the keys its target kind actually exports
before any module runs.
"""

import logging
from typing import Dict, FrozenSet, Iterable, Optional

from ..exceptions import ValidationFailed
from ..manifest.base import ValueFromRef

logger = logging.getLogger(__name__)


class OutputRegistry:
    """Registry of exported output keys per kind."""

    _outputs: Dict[str, FrozenSet[str]] = {}

    @classmethod
    def register(cls, kind: str, keys: Iterable[str]) -> None:
        cls._outputs[kind] = frozenset(keys)
        logger.debug(f"Registered {len(cls._outputs[kind])} output keys for {kind}")

    @classmethod
    def keys_for(cls, kind: str) -> Optional[FrozenSet[str]]:
        from .modules import ensure_modules_registered

        ensure_modules_registered()
        return cls._outputs.get(kind)

    @classmethod
    def validate_reference(
        cls, ref: ValueFromRef, field: str = "valueFrom", strict: bool = False
    ) -> None:
        """Check that the referenced kind exports the referenced output key.

        Args:
            ref: The reference to check
            field: Field path reported on failure
            strict: Also reject kinds that register no outputs

        Raises:
            ValidationFailed: if the reference cannot be satisfied
        """
        keys = cls.keys_for(ref.kind)
        if keys is None:
            if strict:
                raise ValidationFailed(field, f"kind {ref.kind} exports no registered outputs")
            return
        if ref.output_key not in keys:
            raise ValidationFailed(
                field,
                f"{ref.kind} does not export '{ref.output_key}' (exports: {', '.join(sorted(keys))})",
            )

    @classmethod
    def clear(cls) -> None:
        """Clear all registered outputs.

        Primarily for testing. Shipped modules record their keys again on the
        next lookup.
        """
        from .modules import reset_registration

        cls._outputs = {}
        reset_registration()
