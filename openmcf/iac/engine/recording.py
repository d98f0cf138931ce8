"""In-memory engine that records the resource graph a module builds.

Used by `openmcf preview` and by the test suite. Nothing is provisioned;
outputs are OutputRef placeholders naming the resource and property they
stand for.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ...exceptions import ResourceCreationFailed
from .base import EngineContext, ProviderHandle, ResourceHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputRef:
    """Placeholder for a value the engine only knows after provisioning."""

    resource: str
    key: str
    path: Tuple[Any, ...] = ()

    def __str__(self) -> str:
        suffix = "".join(f"[{p}]" if isinstance(p, int) else f".{p}" for p in self.path)
        return f"${{{self.resource}.{self.key}{suffix}}}"


@dataclass
class RecordedProvider(ProviderHandle):
    package: str
    name: str
    props: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RecordedResource(ResourceHandle):
    type_token: str
    name: str
    props: Dict[str, Any]
    provider: Optional[RecordedProvider] = None
    depends_on: List[str] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)

    @property
    def id(self) -> OutputRef:
        return OutputRef(self.name, "id")

    def output(self, key: str, *path: Any) -> OutputRef:
        return OutputRef(self.name, key, tuple(path))


class RecordingContext(EngineContext):
    """EngineContext that records providers, resources and exports in order.

    Usage:
        ctx = RecordingContext(stack_input={"target": {...}, "providerConfig": {...}})
        run_module(ctx, module)
        ctx.resource("aws:route53/record:Record", "api").props["ttl"]
    """

    def __init__(self, stack_input: Optional[Mapping[str, Any]] = None) -> None:
        self._stack_input = dict(stack_input or {})
        self.providers: List[RecordedProvider] = []
        self.resources: List[RecordedResource] = []
        self.exports: Dict[str, Any] = {}

    def stack_input(self) -> Mapping[str, Any]:
        return self._stack_input

    def create_provider(
        self, package: str, name: str, props: Optional[Dict[str, Any]] = None
    ) -> RecordedProvider:
        provider = RecordedProvider(package=package, name=name, props=copy.deepcopy(props or {}))
        self.providers.append(provider)
        logger.debug(f"Recorded provider {package}/{name}")
        return provider

    def create_resource(
        self,
        type_token: str,
        name: str,
        props: Dict[str, Any],
        provider: Optional[ProviderHandle] = None,
        depends_on: Sequence[ResourceHandle] = (),
        outputs: Sequence[str] = (),
    ) -> RecordedResource:
        if self.find_resource(type_token, name) is not None:
            raise ResourceCreationFailed(
                type_token,
                name,
                context={"reason": "duplicate logical name"},
            )
        known = {r.name for r in self.resources}
        for dep in depends_on:
            if dep.name not in known:
                raise ResourceCreationFailed(
                    type_token,
                    name,
                    context={"reason": f"depends on unknown resource '{dep.name}'"},
                )
        resource = RecordedResource(
            type_token=type_token,
            name=name,
            props=copy.deepcopy(props),
            provider=provider,
            depends_on=[dep.name for dep in depends_on],
            outputs=list(outputs),
        )
        self.resources.append(resource)
        logger.debug(f"Recorded resource {type_token} '{name}'")
        return resource

    def export(self, key: str, value: Any) -> None:
        self.exports[key] = value

    # Inspection helpers

    def find_resource(self, type_token: str, name: str) -> Optional[RecordedResource]:
        for resource in self.resources:
            if resource.type_token == type_token and resource.name == name:
                return resource
        return None

    def resource(self, type_token: str, name: str) -> RecordedResource:
        """Return a recorded resource.

        Raises:
            KeyError: if no such resource was recorded
        """
        resource = self.find_resource(type_token, name)
        if resource is None:
            raise KeyError(f"{type_token} '{name}' was not recorded")
        return resource

    def resources_of_type(self, type_token: str) -> List[RecordedResource]:
        return [r for r in self.resources if r.type_token == type_token]
