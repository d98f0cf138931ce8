"""Base class for resource modules.

Each module turns one manifest kind into engine resources. A module is a
pure builder of a resource graph: it reads nothing but its Locals and the
provider handle, and hands every resource to the engine context.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type

from ..exceptions import ModuleExecutionError, OpenMCFError
from ..manifest.base import Manifest
from ..stackinput import StackInput
from .engine import EngineContext, ProviderHandle
from .locals import Locals, base_locals

logger = logging.getLogger(__name__)


class ResourceModule(ABC):
    """Abstract base class for resource modules.

    Usage:
        @module
        class DigitalOceanVpcModule(ResourceModule):
            MANIFEST = DigitalOceanVpc
            PROVIDER_PACKAGE = "digitalocean"
            OUTPUT_KEYS = frozenset({OP_VPC_ID})

            def provision(self, ctx, locals_, provider):
                vpc = ctx.create_resource("digitalocean:index/vpc:Vpc", ...)
                return {OP_VPC_ID: vpc.id}
    """

    # Manifest model this module consumes
    # Subclasses MUST override this
    MANIFEST: ClassVar[Type[Manifest]]

    # Engine provider package ("aws", "azure-native", "gcp", ...)
    PROVIDER_PACKAGE: ClassVar[str] = ""

    # Output keys the module exports; nothing else is exported
    OUTPUT_KEYS: ClassVar[FrozenSet[str]] = frozenset()

    # GCP label values must be lower case
    LOWERCASE_KIND_LABEL: ClassVar[bool] = False

    @classmethod
    def kind(cls) -> str:
        return cls.MANIFEST.KIND

    @classmethod
    def provider_name(cls) -> str:
        return cls.MANIFEST.PROVIDER.value

    def initialize_locals(self, ctx: EngineContext, stack_input: StackInput) -> Locals:
        """Derive Locals from the stack input.

        Override to resolve foreign keys and extract spec fields; the default
        carries the target, its labels and the provider config.
        """
        return Locals(**base_locals(stack_input, lowercase_kind=self.LOWERCASE_KIND_LABEL))

    @abstractmethod
    def provision(
        self,
        ctx: EngineContext,
        locals_: Locals,
        provider: Optional[ProviderHandle],
    ) -> Dict[str, Any]:
        """Create the module's resources.

        Returns:
            Output values keyed by the module's output constants. None values
            are not exported.

        Raises:
            ModuleExecutionError: wrapping the failure with a prefix naming
                the resource that could not be created
        """
        raise NotImplementedError

    # Utility methods available to all modules

    @staticmethod
    def create_or_wrap(
        ctx: EngineContext,
        description: str,
        type_token: str,
        name: str,
        props: Dict[str, Any],
        **kwargs: Any,
    ):
        """ctx.create_resource(), wrapping failures as "failed to create <description>"."""
        try:
            return ctx.create_resource(type_token, name, props, **kwargs)
        except OpenMCFError as e:
            raise ModuleExecutionError(f"failed to create {description}", e) from e
