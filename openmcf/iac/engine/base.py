"""Engine interface.

Modules describe resources through an EngineContext and never talk to a
provisioning engine directly. Creation calls return handles whose id and
outputs are future-shaped: modules compose them into other resources' props
and into exports, and never wait on them.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Sequence


class ProviderHandle(ABC):
    """A configured provider instance resources are created under."""

    package: str
    name: str


class ResourceHandle(ABC):
    """A resource registered with the engine."""

    type_token: str
    name: str

    @property
    @abstractmethod
    def id(self) -> Any:
        """Provider-native id of the resource (future-shaped)."""

    @abstractmethod
    def output(self, key: str, *path: Any) -> Any:
        """An output property of the resource, optionally indexed by `path`.

        Example: nic.output("ipConfigurations", 0, "privateIPAddress")
        """


class EngineContext(ABC):
    """What a module may ask of the provisioning engine."""

    @abstractmethod
    def stack_input(self) -> Mapping[str, Any]:
        """Serialized stack input supplied by the orchestrator."""

    @abstractmethod
    def create_provider(
        self, package: str, name: str, props: Optional[Dict[str, Any]] = None
    ) -> ProviderHandle:
        """Register a provider instance for `package` (e.g. "aws", "azure-native")."""

    @abstractmethod
    def create_resource(
        self,
        type_token: str,
        name: str,
        props: Dict[str, Any],
        provider: Optional[ProviderHandle] = None,
        depends_on: Sequence[ResourceHandle] = (),
        outputs: Sequence[str] = (),
    ) -> ResourceHandle:
        """Register a resource.

        Args:
            type_token: Engine type, e.g. "aws:route53/record:Record"
            name: Logical name; stable across runs for the same resource
            props: Input properties (camelCase, as the provider schema names them)
            provider: Provider instance to create the resource under
            depends_on: Explicit ordering edges
            outputs: Output properties the caller will read besides id and inputs

        Raises:
            ResourceCreationFailed: if the engine rejects the registration
        """

    @abstractmethod
    def export(self, key: str, value: Any) -> None:
        """Export a stack output."""
