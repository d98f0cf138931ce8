"""Kind registry.

Maps each resource kind to the manifest model that defines it. The set of
kinds is closed: models register themselves with @register_kind when the
spec modules are imported, and lookups trigger that import lazily.
"""

import logging
from typing import Dict, List, Optional, Type

from .base import Manifest

logger = logging.getLogger(__name__)


class KindRegistry:
    """Registry of manifest models keyed by kind.

    Usage:
        @register_kind
        class DigitalOceanVpc(Manifest):
            KIND = "DigitalOceanVpc"
            API_VERSION = "digital-ocean.openmcf.org/v1"
            ...

        model = KindRegistry.get("DigitalOceanVpc")
    """

    _kinds: Dict[str, Type[Manifest]] = {}

    @classmethod
    def register(cls, model: Type[Manifest]) -> Type[Manifest]:
        """Register a manifest model.

        Raises:
            ValueError: if the kind is empty or already taken by another model
        """
        if not model.KIND or not model.API_VERSION:
            raise ValueError(f"{model.__name__} must declare KIND and API_VERSION")
        existing = cls._kinds.get(model.KIND)
        if existing is not None and existing is not model:
            raise ValueError(
                f"kind {model.KIND} already registered by {existing.__name__}"
            )
        cls._kinds[model.KIND] = model
        logger.debug(f"Registered kind {model.KIND} ({model.API_VERSION})")
        return model

    @classmethod
    def get(cls, kind: str) -> Optional[Type[Manifest]]:
        """Get the manifest model for a kind, or None if unknown."""
        ensure_kinds_registered()
        return cls._kinds.get(kind)

    @classmethod
    def get_by_gvk(cls, api_version: str, kind: str) -> Optional[Type[Manifest]]:
        """Get the manifest model selected by (apiVersion, kind)."""
        model = cls.get(kind)
        if model is None or model.API_VERSION != api_version:
            return None
        return model

    @classmethod
    def all_kinds(cls) -> List[str]:
        """Sorted list of every registered kind."""
        ensure_kinds_registered()
        return sorted(cls._kinds)

    @classmethod
    def all_models(cls) -> List[Type[Manifest]]:
        ensure_kinds_registered()
        return [cls._kinds[k] for k in sorted(cls._kinds)]


def register_kind(model: Type[Manifest]) -> Type[Manifest]:
    """Decorator to register a manifest model."""
    return KindRegistry.register(model)


_kinds_registered = False


def ensure_kinds_registered() -> None:
    """Import every spec module so that all kinds are registered."""
    global _kinds_registered
    if _kinds_registered:
        return
    _kinds_registered = True
    from .specs import aws, azure, civo, cloudflare, digitalocean, gcp  # noqa: F401
