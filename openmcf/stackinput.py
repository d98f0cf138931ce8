"""Stack input loader.

The orchestrator serializes a stack input with two fields and hands it to the
engine:

    providerConfig:        # credential record for the target's provider, optional
      client_id: ...
    target:                # the manifest this module handles
      apiVersion: azure.openmcf.org/v1
      kind: AzureDnsRecord
      ...

load_stack_input() turns that mapping into a typed StackInput.
"""

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import BadStackInput, ValidationFailed
from .manifest.base import Manifest
from .manifest.loader import parse_manifest, validation_failed
from .provider.catalog import get_provider_info

M = TypeVar("M", bound=Manifest)

PROVIDER_CONFIG_KEYS = ("providerConfig", "provider_config")


@dataclass
class StackInput(Generic[M]):
    target: M
    provider_config: Optional[BaseModel] = None


def load_stack_input(data: Any, model: Type[M]) -> StackInput[M]:
    """Build a typed StackInput for `model` from its serialized form.

    Raises:
        BadStackInput: if the target is absent or invalid, or the provider
            config does not match the provider's credential record. The
            underlying ValidationFailed is kept as the cause.
    """
    if not isinstance(data, Mapping):
        raise BadStackInput("stack input must be a mapping")

    raw_target = data.get("target")
    if raw_target is None:
        raise BadStackInput("stack input has no target")
    try:
        target = parse_manifest(raw_target, model)
    except ValidationFailed as e:
        raise BadStackInput(f"invalid target: {e.message}", cause=e) from e

    raw_config = next(
        (data[key] for key in PROVIDER_CONFIG_KEYS if data.get(key) is not None), None
    )
    provider_config = None
    if raw_config is not None:
        info = get_provider_info(model.PROVIDER)
        if not isinstance(raw_config, Mapping):
            raise BadStackInput(f"{info.display_name} provider config must be a mapping")
        try:
            provider_config = info.credential_model.model_validate(dict(raw_config))
        except ValidationError as e:
            failure = validation_failed(e, prefix="providerConfig")
            raise BadStackInput(
                f"invalid {info.display_name} provider config: {failure.message}",
                cause=failure,
            ) from failure

    return StackInput(target=target, provider_config=provider_config)
