"""Foreign-key reference discovery and resolution over manifest models."""

from typing import Any, Callable, List, Tuple

from pydantic import BaseModel

from .base import Manifest, StringValueOrRef, ValueFromRef


def _walk(node: Any, path: str, found: List[Tuple[str, StringValueOrRef]]) -> None:
    if isinstance(node, StringValueOrRef):
        if node.is_reference:
            found.append((path, node))
        return
    if isinstance(node, BaseModel):
        for name in type(node).model_fields:
            _walk(getattr(node, name), f"{path}.{name}" if path else name, found)
    elif isinstance(node, (list, tuple)):
        for i, item in enumerate(node):
            _walk(item, f"{path}[{i}]", found)
    elif isinstance(node, dict):
        for key, item in node.items():
            _walk(item, f"{path}.{key}", found)


def collect_references(manifest: Manifest) -> List[Tuple[str, StringValueOrRef]]:
    """Return (field path, reference) for every unresolved reference in the spec.

    Paths use snake_case field names rooted at "spec", e.g. "spec.zone_id".
    """
    found: List[Tuple[str, StringValueOrRef]] = []
    _walk(getattr(manifest, "spec", None), "spec", found)
    return found


def _rebuild(node: Any, resolve: Callable[[ValueFromRef], str]) -> Any:
    if isinstance(node, StringValueOrRef):
        if node.is_reference:
            return node.resolved(resolve(node.value_from))
        return node
    if isinstance(node, BaseModel):
        updates = {}
        for name in type(node).model_fields:
            value = getattr(node, name)
            rebuilt = _rebuild(value, resolve)
            if rebuilt is not value:
                updates[name] = rebuilt
        return node.model_copy(update=updates) if updates else node
    if isinstance(node, list):
        items = [_rebuild(item, resolve) for item in node]
        if any(a is not b for a, b in zip(items, node)):
            return items
        return node
    return node


def resolve_references(manifest: Manifest, resolve: Callable[[ValueFromRef], str]) -> Manifest:
    """Return a copy of the manifest with every reference replaced by its value.

    `resolve` maps a reference to the output value exported by the referenced
    stack. Whatever it raises propagates unchanged.
    """
    return _rebuild(manifest, resolve)
