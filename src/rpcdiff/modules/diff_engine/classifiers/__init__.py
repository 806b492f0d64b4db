"""Criticality Classifiers - one comparator per kind of contract location."""

from .base import (
    Comparator,
    DiffContext,
    breaking_compare,
    plain_compare,
    reference_compare,
    shape_compare,
    strict_compare,
    type_compare,
)
from .method_classifier import (
    error_compare,
    param_structure_compare,
    params_compare,
    result_compare,
)
from .schema_classifier import (
    descriptor_compare,
    schema_compare,
    schema_property_compare,
    schema_required_compare,
)

__all__ = [
    "Comparator",
    "DiffContext",
    "breaking_compare",
    "descriptor_compare",
    "error_compare",
    "param_structure_compare",
    "params_compare",
    "plain_compare",
    "reference_compare",
    "result_compare",
    "schema_compare",
    "schema_property_compare",
    "schema_required_compare",
    "shape_compare",
    "strict_compare",
    "type_compare",
]
