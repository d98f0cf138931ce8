"""Pulumi program entry point.

Pulumi.yaml for a module project:

    name: openmcf-module
    runtime: python
    main: __main__.py        # from openmcf.iac.pulumi_program import main; main()

The serialized stack input is read from the `stackInput` stack config key.
"""

from typing import Any, Dict, Mapping

import pulumi
import structlog

from ..exceptions import BadStackInput, OpenMCFError
from ..labels import stack_fqdn, stack_labels
from .engine.pulumi_engine import PulumiContext
from .modules import ModuleRegistry
from .runner import run_module

logger = structlog.get_logger(__name__)


def current_stack_labels() -> Dict[str, str]:
    return stack_labels(pulumi.get_organization(), pulumi.get_project(), pulumi.get_stack())


def target_kind(stack_input: Mapping[str, Any]) -> str:
    target = stack_input.get("target")
    if not isinstance(target, Mapping) or not target.get("kind"):
        raise BadStackInput("stack input has no target kind")
    return target["kind"]


def main() -> Dict[str, Any]:
    """Run the module for the stack input's target kind.

    Raises:
        OpenMCFError: unknown kind, or any wrapped module failure
    """
    ctx = PulumiContext()
    stack_input = ctx.stack_input()
    kind = target_kind(stack_input)

    module = ModuleRegistry.get_module(kind)
    if module is None:
        raise OpenMCFError(f"no module handles kind {kind}", error_code="UNKNOWN_KIND")

    running = current_stack_labels()
    metadata_labels = (stack_input["target"].get("metadata") or {}).get("labels") or {}
    requested = stack_fqdn(metadata_labels)
    running_fqdn = stack_fqdn(running)
    if requested and requested != running_fqdn:
        logger.warning(
            "Manifest names a different stack", requested=requested, running=running_fqdn
        )
    logger.info("Running module", kind=kind, stack=running_fqdn)
    return run_module(ctx, module)
