"""Pulumi adapter for the engine interface.

Resources are registered as generic pulumi.CustomResource instances under
their provider type token, so no per-provider Pulumi SDK package is needed.
Output properties a module reads are declared up front and registered as
None-valued props, which is how Pulumi exposes them as attributes.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

import pulumi

from ...exceptions import ResourceCreationFailed
from .base import EngineContext, ProviderHandle, ResourceHandle

logger = logging.getLogger(__name__)

STACK_INPUT_CONFIG_KEY = "stackInput"


def _dig(value: Any, path: Sequence[Any]) -> Any:
    for step in path:
        if value is None:
            return None
        if isinstance(step, int):
            value = value[step] if len(value) > step else None
        else:
            value = value.get(step)
    return value


class PulumiProvider(ProviderHandle):
    def __init__(self, package: str, name: str, resource: pulumi.ProviderResource) -> None:
        self.package = package
        self.name = name
        self.resource = resource


class PulumiResource(ResourceHandle):
    def __init__(self, type_token: str, name: str, resource: pulumi.CustomResource) -> None:
        self.type_token = type_token
        self.name = name
        self.resource = resource

    @property
    def id(self) -> pulumi.Output:
        return self.resource.id

    def output(self, key: str, *path: Any) -> pulumi.Output:
        value = getattr(self.resource, key)
        if not path:
            return value
        return value.apply(lambda v: _dig(v, path))


class PulumiContext(EngineContext):
    """EngineContext backed by the running Pulumi program."""

    def __init__(self, config: Optional[pulumi.Config] = None) -> None:
        self._config = config or pulumi.Config()

    def stack_input(self) -> Mapping[str, Any]:
        return self._config.require_object(STACK_INPUT_CONFIG_KEY)

    def create_provider(
        self, package: str, name: str, props: Optional[Dict[str, Any]] = None
    ) -> PulumiProvider:
        try:
            resource = pulumi.ProviderResource(package, name, props or {})
        except Exception as e:
            raise ResourceCreationFailed(f"pulumi:providers:{package}", name, cause=e) from e
        return PulumiProvider(package, name, resource)

    def create_resource(
        self,
        type_token: str,
        name: str,
        props: Dict[str, Any],
        provider: Optional[ProviderHandle] = None,
        depends_on: Sequence[ResourceHandle] = (),
        outputs: Sequence[str] = (),
    ) -> PulumiResource:
        all_props = dict(props)
        for key in outputs:
            all_props.setdefault(key, None)
        opts = pulumi.ResourceOptions(
            provider=provider.resource if isinstance(provider, PulumiProvider) else None,
            depends_on=[d.resource for d in depends_on if isinstance(d, PulumiResource)],
        )
        try:
            resource = pulumi.CustomResource(type_token, name, all_props, opts=opts)
        except Exception as e:
            raise ResourceCreationFailed(type_token, name, cause=e) from e
        logger.debug(f"Registered {type_token} '{name}'")
        return PulumiResource(type_token, name, resource)

    def export(self, key: str, value: Any) -> None:
        pulumi.export(key, value)
