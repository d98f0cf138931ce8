"""Module registry for kind dispatch.

Modules register themselves with @module when their file is imported; lookups
import every module file lazily on first use.
"""

import logging
from typing import Dict, List, Optional, Type

from ..base_module import ResourceModule
from ..outputs import OutputRegistry

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """Registry of resource modules keyed by kind.

    Usage:
        @module
        class CivoDnsRecordModule(ResourceModule):
            MANIFEST = CivoDnsRecord
            ...

        module_ = ModuleRegistry.get_module("CivoDnsRecord")
    """

    _modules: Dict[str, Type[ResourceModule]] = {}

    @classmethod
    def register(cls, module_class: Type[ResourceModule]) -> Type[ResourceModule]:
        """Register a module class and its output keys.

        Raises:
            ValueError: if another module already handles the kind
        """
        kind = module_class.kind()
        existing = cls._modules.get(kind)
        if existing is not None and existing is not module_class:
            raise ValueError(f"kind {kind} already handled by {existing.__name__}")
        cls._modules[kind] = module_class
        OutputRegistry.register(kind, module_class.OUTPUT_KEYS)
        logger.debug(f"Registered module {module_class.__name__} for {kind}")
        return module_class

    @classmethod
    def get_module(cls, kind: str) -> Optional[ResourceModule]:
        """Get a module instance for a kind, or None if no module handles it."""
        ensure_modules_registered()
        module_class = cls._modules.get(kind)
        return module_class() if module_class else None

    @classmethod
    def get_all_kinds(cls) -> List[str]:
        ensure_modules_registered()
        return sorted(cls._modules)

    @classmethod
    def get_all_modules(cls) -> List[Type[ResourceModule]]:
        ensure_modules_registered()
        return [cls._modules[k] for k in sorted(cls._modules)]


def module(cls: Type[ResourceModule]) -> Type[ResourceModule]:
    """Decorator to register a module class."""
    return ModuleRegistry.register(cls)


_modules_registered = False


def ensure_modules_registered() -> None:
    """Import every module file so that all modules are registered.

    Output keys of modules imported before an OutputRegistry.clear() are
    recorded again.
    """
    global _modules_registered
    if _modules_registered:
        return

    from .aws import route53_dns_record  # noqa: F401
    from .azure import dns_record, virtual_machine  # noqa: F401
    from .civo import dns_record as civo_dns_record  # noqa: F401
    from .cloudflare import dns_record as cloudflare_dns_record  # noqa: F401
    from .cloudflare import dns_zone  # noqa: F401
    from .digitalocean import dns_record as digitalocean_dns_record  # noqa: F401
    from .digitalocean import vpc  # noqa: F401
    from .gcp import compute_instance  # noqa: F401
    from .gcp import dns_record as gcp_dns_record  # noqa: F401
    for kind, module_class in ModuleRegistry._modules.items():
        OutputRegistry.register(kind, module_class.OUTPUT_KEYS)
    _modules_registered = True


def reset_registration() -> None:
    """Make the next lookup run ensure_modules_registered() again."""
    global _modules_registered
    _modules_registered = False

