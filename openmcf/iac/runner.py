"""Uniform module entry point.

    load stack input -> initialize locals -> build provider -> provision -> export

Every step that fails is wrapped with a prefix naming the step and re-raised;
nothing is retried and nothing already created is cleaned up.
"""

from typing import Any, Dict

import structlog

from ..exceptions import ModuleExecutionError, OpenMCFError, ProviderSetupFailed
from ..stackinput import load_stack_input
from .base_module import ResourceModule
from .engine import EngineContext
from .providers import build_provider

logger = structlog.get_logger(__name__)


def run_module(ctx: EngineContext, module: ResourceModule) -> Dict[str, Any]:
    """Run a module against an engine context.

    Returns:
        The exported outputs, keyed by output constant

    Raises:
        ModuleExecutionError: wrapping the failing step's error
    """
    kind = module.kind()
    try:
        stack_input = load_stack_input(ctx.stack_input(), module.MANIFEST)
    except OpenMCFError as e:
        raise ModuleExecutionError("failed to load stack-input", e) from e

    name = stack_input.target.metadata.name
    log = logger.bind(kind=kind, name=name)

    try:
        locals_ = module.initialize_locals(ctx, stack_input)
    except OpenMCFError as e:
        raise ModuleExecutionError("failed to initialize locals", e) from e

    try:
        provider = build_provider(ctx, module.PROVIDER_PACKAGE, stack_input.provider_config)
    except ProviderSetupFailed as e:
        raise ModuleExecutionError(f"failed to setup {module.provider_name()} provider", e) from e

    outputs = module.provision(ctx, locals_, provider)

    undeclared = set(outputs) - module.OUTPUT_KEYS
    if undeclared:
        raise OpenMCFError(
            f"{kind} module returned undeclared outputs: {', '.join(sorted(undeclared))}",
            error_code="UNDECLARED_OUTPUT",
        )

    exported = {}
    for key in sorted(outputs):
        value = outputs[key]
        if value is None:
            continue
        ctx.export(key, value)
        exported[key] = value

    log.info("Module provisioned", outputs=sorted(exported))
    return exported
