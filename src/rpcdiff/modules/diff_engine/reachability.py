"""Transitive Required-Input Detector.

A newly required field on a schema only breaks callers that must supply
that schema. This module answers whether a shared schema is reachable as
a required input from any method parameter.
"""

from rpcdiff.types import ContentDescriptor, Document, Reference, Schema

# Shared schemas may reference each other; the search stops here.
MAX_DEPTH = 5


def is_required_input(
    schema_name: str,
    document: Document,
    depth: int = 0,
    checked: set[str] | None = None,
) -> bool:
    """Check whether a shared schema must be supplied by some caller.

    At the top level a method parameter only counts when it is required.
    Deeper in the search any parameter counts: the chain of required
    properties that led here already proves the schema is mandatory.

    Args:
        schema_name: Name of the schema under ``components.schemas``.
        document: The document to search.
        depth: Current search depth.
        checked: Schema names already on the current search path.

    Returns:
        True if a required input path was found within the depth bound.
    """
    if depth > MAX_DEPTH:
        return False

    checked = set(checked or ())
    checked.add(schema_name)

    for method in document.methods:
        for param in method.params:
            descriptor = _resolve_descriptor(param, document)
            if descriptor is None:
                continue
            if not _references(descriptor.schema_, schema_name):
                continue
            if depth > 0 or descriptor.required:
                return True

    for name, schema in document.schemas.items():
        if name in checked or not isinstance(schema, Schema):
            continue
        for property_name, property_schema in (schema.properties or {}).items():
            if property_name not in schema.required:
                continue
            if not _references(property_schema, schema_name):
                continue
            if is_required_input(name, document, depth + 1, checked):
                return True

    return False


def _resolve_descriptor(
    param: ContentDescriptor | Reference,
    document: Document,
) -> ContentDescriptor | None:
    if isinstance(param, Reference):
        return document.content_descriptors.get(param.target)
    return param


def _references(schema: Schema | Reference | None, schema_name: str) -> bool:
    """True if the schema points at ``schema_name`` directly or as array items."""
    if isinstance(schema, Reference):
        return schema.target == schema_name
    if isinstance(schema, Schema) and isinstance(schema.items, Reference):
        return schema.items.target == schema_name
    return False
