"""Schema lint rules.

A rule inspects one field of one manifest model and returns the violations
it finds. Rules never see manifest instances, only their definitions.
"""

import typing
from dataclasses import dataclass
from typing import Callable, List, Type

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaLintFailed
from ..manifest.base import DEFAULT_MARKER

FieldCheck = Callable[[Type[BaseModel], str, FieldInfo], List[SchemaLintFailed]]


@dataclass(frozen=True)
class RuleSpec:
    """A named lint rule."""

    id: str
    purpose: str
    check: FieldCheck


def allows_none(annotation: object) -> bool:
    return type(None) in typing.get_args(annotation)


def declares_default(info: FieldInfo) -> bool:
    extra = info.json_schema_extra
    return isinstance(extra, dict) and DEFAULT_MARKER in extra


def check_default_requires_optional(
    model: Type[BaseModel], field_name: str, info: FieldInfo
) -> List[SchemaLintFailed]:
    if not declares_default(info):
        return []
    location = f"{model.__name__}.{field_name}"
    problems = []
    if info.is_required():
        problems.append("the field is required")
    elif info.default is not None:
        problems.append(f"the field defaults to {info.default!r} instead of None")
    if not allows_none(info.annotation):
        problems.append("the field type does not allow None")
    return [
        SchemaLintFailed(
            DEFAULT_REQUIRES_OPTIONAL.id,
            location,
            f"{location} declares a default but {problem}",
        )
        for problem in problems
    ]


DEFAULT_REQUIRES_OPTIONAL = RuleSpec(
    id="DefaultRequiresOptional",
    purpose="A field that declares a default must be optional, or the default never applies",
    check=check_default_requires_optional,
)

# Rules run by `openmcf lint`, in order
RULES: List[RuleSpec] = [DEFAULT_REQUIRES_OPTIONAL]
