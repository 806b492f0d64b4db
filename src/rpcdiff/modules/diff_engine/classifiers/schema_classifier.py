"""Schema Classifiers.

Decide how risky a change to a shared schema, one of its properties or
a shared content descriptor is.
"""

import logging
from typing import Any

from rpcdiff.types import Change, ChangeObject, ChangeType, Criticality

from ..reachability import is_required_input
from .base import (
    DESCRIPTIVE_FIELDS,
    DiffContext,
    change_type,
    make_change,
    plain_compare,
    schema_field,
    simple_type_criticality,
    strict_compare,
)
from .method_classifier import required_criticality

logger = logging.getLogger("rpcdiff.diff_engine")

# components.schemas.<name>
_SCHEMA_DEPTH = 3
# components.schemas.<name>.properties.<property>
_PROPERTY_DEPTH = 5
# components.contentDescriptors.<name>.<field>
_DESCRIPTOR_FIELD_DEPTH = 4


def schema_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Classify a change to a shared schema itself.

    Adding or removing a whole shared schema is not breaking on its own:
    anything that used it shows up as a reference change elsewhere.
    """
    if len(path) <= _SCHEMA_DEPTH or schema_field(path) in DESCRIPTIVE_FIELDS:
        return plain_compare(path, old, new, tag=tag, context=context)

    kind = change_type(old, new)
    if kind == ChangeType.CHANGED and schema_field(path) == "type":
        return make_change(path, old, new, tag, simple_type_criticality(old, new), kind)

    # Same as removing each remaining property one by one.
    if kind == ChangeType.REMOVED and len(path) == _SCHEMA_DEPTH + 1 and path[-1] == "properties":
        return make_change(path, old, new, tag, Criticality.DANGEROUS, kind)

    return strict_compare(path, old, new, tag=tag, context=context)


def schema_required_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Classify a field added to or dropped from a schema's required set.

    A newly required field only breaks callers that have to send the
    schema, so the new document is searched for a required input path.
    """
    kind = change_type(old, new)
    if kind != ChangeType.ADDED:
        return make_change(path, old, new, tag, Criticality.NON_BREAKING, kind)

    schema_name = path[2]
    required_input = is_required_input(schema_name, context.new)
    logger.debug(f"Schema {schema_name} is required input: {required_input}")

    criticality = Criticality.BREAKING if required_input else Criticality.NON_BREAKING
    return make_change(path, old, new, tag, criticality, kind)


def schema_property_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Classify a change to a schema property or anything inside it."""
    if len(path) > _PROPERTY_DEPTH and schema_field(path) in DESCRIPTIVE_FIELDS:
        return plain_compare(path, old, new, tag=tag, context=context)

    kind = change_type(old, new)
    if kind == ChangeType.ADDED:
        criticality = Criticality.NON_BREAKING
    elif kind == ChangeType.REMOVED and schema_field(path) == "":
        # Readers relying on the property may silently break.
        criticality = Criticality.DANGEROUS
    elif kind == ChangeType.CHANGED and schema_field(path) == "type":
        criticality = simple_type_criticality(old, new)
    else:
        criticality = Criticality.BREAKING

    return make_change(path, old, new, tag, criticality, kind)


def descriptor_compare(
    path: list[str],
    old: Any,
    new: Any,
    *,
    tag: ChangeObject,
    context: DiffContext,
) -> Change:
    """Classify a change inside a shared content descriptor."""
    if tag == ChangeObject.COMPONENTS_DESCRIPTOR_SUMMARY:
        return plain_compare(path, old, new, tag=tag, context=context)

    if len(path) == _DESCRIPTOR_FIELD_DEPTH and path[-1] == "required":
        return make_change(path, old, new, tag, required_criticality(old, new))

    # TODO: tell descriptors used only as results apart from input ones
    return strict_compare(path, old, new, tag=tag, context=context)
