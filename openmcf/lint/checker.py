"""Schema linter: runs every rule over every manifest model definition."""

import logging
import typing
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Type

from pydantic import BaseModel

from ..exceptions import SchemaLintFailed
from ..manifest.kinds import KindRegistry
from .rules import RULES, RuleSpec

logger = logging.getLogger(__name__)


def nested_models(annotation: object) -> Iterator[Type[BaseModel]]:
    """Yield the pydantic models inside a field annotation (List[X], Optional[X], Dict[str, X], ...)."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        yield annotation
        return
    for arg in typing.get_args(annotation):
        yield from nested_models(arg)


def walk_models(roots: Iterable[Type[BaseModel]]) -> List[Type[BaseModel]]:
    """All models reachable from roots through field annotations, each once."""
    seen: Set[Type[BaseModel]] = set()
    ordered: List[Type[BaseModel]] = []
    stack = list(roots)
    while stack:
        model = stack.pop(0)
        if model in seen:
            continue
        seen.add(model)
        ordered.append(model)
        for info in model.model_fields.values():
            stack.extend(nested_models(info.annotation))
    return ordered


def lint_models(
    models: Iterable[Type[BaseModel]], rules: Optional[Sequence[RuleSpec]] = None
) -> List[SchemaLintFailed]:
    """Return every violation found in the models and the models they nest."""
    rules = RULES if rules is None else rules
    violations: List[SchemaLintFailed] = []
    for model in walk_models(models):
        for field_name, info in model.model_fields.items():
            for rule in rules:
                violations.extend(rule.check(model, field_name, info))
    logger.debug(f"Linted {len(violations)} violation(s)")
    return violations


def lint_all_kinds(rules: Optional[Sequence[RuleSpec]] = None) -> List[SchemaLintFailed]:
    return lint_models(KindRegistry.all_models(), rules)


def check_models(
    models: Iterable[Type[BaseModel]], rules: Optional[Sequence[RuleSpec]] = None
) -> None:
    """Raise the first violation, if any.

    Raises:
        SchemaLintFailed: naming the rule and "Model.field" location
    """
    violations = lint_models(models, rules)
    if violations:
        raise violations[0]
