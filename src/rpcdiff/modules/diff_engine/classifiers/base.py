"""Shared building blocks for criticality classifiers."""

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from rpcdiff.types import (
    Change,
    ChangeObject,
    ChangeType,
    Criticality,
    DiffOptions,
    Document,
)

# Fields whose changes never affect callers.
DESCRIPTIVE_FIELDS = frozenset({"summary", "description", "title"})

# The only sanctioned widening: integer values are valid numbers.
_WIDENINGS = {
    ("integer", "number"),
    ("integer", "float"),
    ("int", "number"),
    ("int", "float"),
}


class DiffContext(BaseModel):
    """Both documents under comparison plus the options in effect."""

    model_config = ConfigDict(frozen=True)

    old: Document
    new: Document
    options: DiffOptions = DiffOptions()


class Comparator(Protocol):
    def __call__(
        self,
        path: list[str],
        old: Any,
        new: Any,
        *,
        tag: ChangeObject,
        context: DiffContext,
    ) -> Change: ...


def change_type(old: Any, new: Any) -> ChangeType:
    """Infer the change type from which side is absent."""
    if old is None:
        return ChangeType.ADDED
    if new is None:
        return ChangeType.REMOVED
    return ChangeType.CHANGED


def make_change(
    path: list[str],
    old: Any,
    new: Any,
    tag: ChangeObject,
    criticality: Criticality,
    kind: ChangeType | None = None,
) -> Change:
    return Change(
        path=list(path),
        type=kind or change_type(old, new),
        object=tag,
        criticality=criticality,
        old=old,
        new=new,
    )


def last(path: list[str]) -> str:
    return path[-1] if path else ""


def schema_field(path: list[str]) -> str:
    """Schema keyword the path ends at; empty when it ends at a property name."""
    if len(path) >= 2 and path[-2] == "properties":
        return ""
    return last(path)


def plain_compare(path, old, new, *, tag, context) -> Change:
    """Everything is non breaking unless a rule says otherwise."""
    return make_change(path, old, new, tag, Criticality.NON_BREAKING)


def strict_compare(path, old, new, *, tag, context) -> Change:
    """Removing or changing is breaking, adding is not."""
    kind = change_type(old, new)
    criticality = Criticality.NON_BREAKING if kind == ChangeType.ADDED else Criticality.BREAKING
    return make_change(path, old, new, tag, criticality, kind)


def breaking_compare(path, old, new, *, tag, context) -> Change:
    """Any difference is breaking."""
    return make_change(path, old, new, tag, Criticality.BREAKING)


def reference_compare(path, old, new, *, tag, context) -> Change:
    """A reference pointing elsewhere, or swapped with an inline definition."""
    return make_change(path, old, new, tag, Criticality.BREAKING, ChangeType.CHANGED)


def shape_compare(path, old, new, *, tag, context) -> Change:
    """Values changed shape in a way no rule understands."""
    return make_change(path, old, new, tag, Criticality.NON_BREAKING, ChangeType.CHANGED)


def simple_type_criticality(old: Any, new: Any) -> Criticality:
    """Criticality of a primitive type change.

    Either side may be one type name or a list of them. The change is
    non breaking only when the new types are exactly the old ones, with
    integer possibly widened to number. Adding a type (e.g. "null") is
    not treated as safe.
    """
    old_types = _type_names(old)
    new_types = _type_names(new)
    if old_types is None or new_types is None:
        return Criticality.BREAKING

    if {_widened(name, new_types) for name in old_types} == new_types:
        return Criticality.NON_BREAKING
    return Criticality.BREAKING


def _type_names(value: Any) -> set[str] | None:
    if isinstance(value, str):
        return {value}
    if isinstance(value, list) and value and all(isinstance(item, str) for item in value):
        return set(value)
    return None


def _widened(name: str, targets: set[str]) -> str:
    if name in targets:
        return name
    for source, target in _WIDENINGS:
        if source == name and target in targets:
            return target
    return name


def type_compare(path, old, new, *, tag, context) -> Change:
    """Changes to a value's schema: breaking except for safe widening."""
    if schema_field(path) in DESCRIPTIVE_FIELDS:
        return plain_compare(path, old, new, tag=tag, context=context)

    criticality = Criticality.BREAKING
    if schema_field(path) == "type":
        criticality = simple_type_criticality(old, new)
    return make_change(path, old, new, tag, criticality)
