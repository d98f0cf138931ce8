"""Module runtime: locals, provider construction, the module runner and the modules themselves.

The Pulumi entry point lives in pulumi_program and is not imported here, so
the rest of the runtime works without a Pulumi engine.
"""

from .base_module import ResourceModule
from .locals import Locals, base_locals
from .modules import ModuleRegistry, ensure_modules_registered, module
from .outputs import OutputRegistry
from .providers import build_provider
from .runner import run_module

__all__ = [
    "Locals",
    "ModuleRegistry",
    "OutputRegistry",
    "ResourceModule",
    "base_locals",
    "build_provider",
    "ensure_modules_registered",
    "module",
    "run_module",
]
