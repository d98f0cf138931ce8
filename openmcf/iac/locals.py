"""Locals: convenience values derived once at module entry."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import BaseModel

from ..labels import build_labels
from ..manifest.base import Manifest
from ..stackinput import StackInput


@dataclass
class Locals:
    """Values every module needs.

    Modules subclass this to add resolved foreign keys and frequently used
    spec fields.
    """

    target: Manifest
    labels: Dict[str, str] = field(default_factory=dict)
    provider_config: Optional[BaseModel] = None

    @property
    def name(self) -> str:
        return self.target.metadata.name


def base_locals(stack_input: StackInput, lowercase_kind: bool = False) -> Dict[str, object]:
    """Keyword arguments for the Locals fields shared by every module."""
    target = stack_input.target
    return {
        "target": target,
        "labels": build_labels(target.metadata, target.KIND, lowercase_kind=lowercase_kind),
        "provider_config": stack_input.provider_config,
    }
