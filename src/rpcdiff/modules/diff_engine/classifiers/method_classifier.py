"""Method Classifiers.

Decide how risky a change to a method's parameters, parameter structure,
result or errors is for existing callers.
"""

from typing import Any

from rpcdiff.types import (
    Change,
    ChangeObject,
    ChangeType,
    Criticality,
    Document,
    ParamStructure,
    Reference,
)

from .base import (
    DESCRIPTIVE_FIELDS,
    DiffContext,
    change_type,
    make_change,
    plain_compare,
    schema_field,
    strict_compare,
)


def params_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Classify a change to a method parameter.

    Making a parameter required breaks callers that omit it; relaxing it
    does not. A new parameter is only breaking when it is required.
    Removing a parameter is tolerated, since callers sending it are
    expected to have it ignored. A parameter given as a reference to a
    shared content descriptor is judged by that descriptor.
    """
    if tag == ChangeObject.METHOD_PARAM_REQUIRED:
        return make_change(path, old, new, tag, required_criticality(old, new))

    kind = change_type(old, new)
    criticality = Criticality.NON_BREAKING
    if kind == ChangeType.ADDED and _param_required(new, context.new):
        criticality = Criticality.BREAKING
    return make_change(path, old, new, tag, criticality, kind)


def param_structure_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Classify a move within the by-position / by-name / either lattice."""
    to_value = _param_structure(new)
    from_value = _param_structure(old)

    if to_value == ParamStructure.EITHER:
        criticality = Criticality.NON_BREAKING
    elif from_value == ParamStructure.EITHER:
        # Callers may be using either style; one of them stops working.
        criticality = Criticality.DANGEROUS
    elif from_value != to_value:
        criticality = Criticality.BREAKING
    else:
        criticality = Criticality.NON_BREAKING

    return make_change(path, old, new, tag, criticality, ChangeType.CHANGED)


def result_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Result docs may change freely; anything else is strict."""
    if tag == ChangeObject.METHOD_RESULT_DESC:
        return plain_compare(path, old, new, tag=tag, context=context)
    if tag == ChangeObject.METHOD_RESULT_TYPE and schema_field(path) in DESCRIPTIVE_FIELDS:
        return plain_compare(path, old, new, tag=tag, context=context)
    return strict_compare(path, old, new, tag=tag, context=context)


def error_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """A new error code is dangerous: callers may not handle it."""
    if tag == ChangeObject.METHOD_ERROR_MSG:
        return plain_compare(path, old, new, tag=tag, context=context)

    if change_type(old, new) == ChangeType.ADDED:
        return make_change(path, old, new, tag, Criticality.DANGEROUS, ChangeType.ADDED)
    return plain_compare(path, old, new, tag=tag, context=context)


def required_criticality(old: Any, new: Any) -> Criticality:
    """Only turning a flag on breaks callers that omit the value."""
    if not _is_true(old) and _is_true(new):
        return Criticality.BREAKING
    return Criticality.NON_BREAKING


def _is_true(value: Any) -> bool:
    return value is True


def _param_required(value: Any, document: Document) -> bool:
    """Required flag of a parameter, following a descriptor reference."""
    if not isinstance(value, dict):
        return False
    if "$ref" in value:
        target = Reference(ref=value["$ref"]).target
        descriptor = document.content_descriptors.get(target)
        return descriptor is not None and descriptor.required
    return _is_true(value.get("required"))


def _param_structure(value: Any) -> ParamStructure:
    # An absent mode means the permissive default.
    try:
        return ParamStructure(value)
    except ValueError:
        return ParamStructure.EITHER
