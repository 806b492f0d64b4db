"""Path Pattern Rule Engine.

Maps structural locations in a document to a semantic tag and the
comparator that assigns criticality there.

Patterns are dot-separated segments where ``*`` matches exactly one
segment. A path matches when it is at least as long as the pattern and
every pattern segment matches. RULES is evaluated top to bottom and the
first match wins, so more specific patterns must come before the broader
ones that would otherwise swallow them (``methods.*.params.*.schema``
before ``methods.*.params``).
"""

from typing import NamedTuple

from rpcdiff.types import ChangeObject

from .classifiers import (
    Comparator,
    breaking_compare,
    descriptor_compare,
    error_compare,
    param_structure_compare,
    params_compare,
    plain_compare,
    result_compare,
    schema_compare,
    schema_property_compare,
    schema_required_compare,
    strict_compare,
    type_compare,
)

WILDCARD = "*"


class Rule(NamedTuple):
    """One row of the rule table.

    ``field_tags`` refines the tag by the path segment found at
    ``field_index`` (e.g. the field of a parameter that changed).
    """

    pattern: str
    tag: ChangeObject
    comparator: Comparator
    field_index: int = -1
    field_tags: dict[str, ChangeObject] = {}

    def tag_for(self, path: list[str]) -> ChangeObject:
        if 0 <= self.field_index < len(path):
            return self.field_tags.get(path[self.field_index], self.tag)
        return self.tag


RULES: tuple[Rule, ...] = (
    Rule("openrpc", ChangeObject.OPEN_RPC_VERSION, breaking_compare),
    Rule("info.version", ChangeObject.SCHEMA_VERSION, plain_compare),
    Rule("info", ChangeObject.SCHEMA_INFO, plain_compare),
    Rule("servers", ChangeObject.SCHEMA_SERVERS, plain_compare),
    Rule("methods.*.params.*.schema", ChangeObject.METHOD_PARAM_TYPE, type_compare),
    Rule(
        "methods.*.params",
        ChangeObject.METHOD_PARAM,
        params_compare,
        field_index=4,
        field_tags={
            "required": ChangeObject.METHOD_PARAM_REQUIRED,
            "summary": ChangeObject.METHOD_PARAM_DESC,
            "description": ChangeObject.METHOD_PARAM_DESC,
        },
    ),
    Rule("methods.*.paramStructure", ChangeObject.METHOD_PARAM_STRUCTURE, param_structure_compare),
    Rule("methods.*.tags", ChangeObject.METHOD_TAGS, plain_compare),
    Rule("methods.*.summary", ChangeObject.METHOD_SUMMARY, plain_compare),
    Rule("methods.*.description", ChangeObject.METHOD_DESC, plain_compare),
    Rule("methods.*.deprecated", ChangeObject.METHOD_DESC, plain_compare),
    Rule("methods.*.externalDocs", ChangeObject.METHOD_DESC, plain_compare),
    Rule("methods.*.examples", ChangeObject.METHOD_DESC, plain_compare),
    Rule(
        "methods.*.result",
        ChangeObject.METHOD_RESULT,
        result_compare,
        field_index=3,
        field_tags={
            "schema": ChangeObject.METHOD_RESULT_TYPE,
            "summary": ChangeObject.METHOD_RESULT_DESC,
            "description": ChangeObject.METHOD_RESULT_DESC,
        },
    ),
    Rule(
        "methods.*.errors",
        ChangeObject.METHOD_ERROR,
        error_compare,
        field_index=4,
        field_tags={"message": ChangeObject.METHOD_ERROR_MSG},
    ),
    Rule("methods", ChangeObject.METHOD, strict_compare),
    Rule("components.schemas.*.required", ChangeObject.COMPONENTS_SCHEMA_REQUIRED, schema_required_compare),
    Rule(
        "components.schemas.*.properties.*.*",
        ChangeObject.COMPONENTS_SCHEMA_PROPERTY_TYPE,
        schema_property_compare,
        field_index=5,
        field_tags={"description": ChangeObject.COMPONENTS_SCHEMA_PROPERTY_DESC},
    ),
    Rule("components.schemas.*.properties.*", ChangeObject.COMPONENTS_SCHEMA_PROPERTY, schema_property_compare),
    Rule("components.schemas", ChangeObject.COMPONENTS_SCHEMA, schema_compare),
    Rule(
        "components.contentDescriptors.*.*",
        ChangeObject.COMPONENTS_DESCRIPTOR_TYPE,
        descriptor_compare,
        field_index=3,
        field_tags={
            "summary": ChangeObject.COMPONENTS_DESCRIPTOR_SUMMARY,
            "description": ChangeObject.COMPONENTS_DESCRIPTOR_SUMMARY,
        },
    ),
    Rule("components.contentDescriptors.*", ChangeObject.COMPONENTS_DESCRIPTOR, plain_compare),
    Rule("components.contentDescriptors", ChangeObject.COMPONENTS_DESCRIPTOR, strict_compare),
)

FALLBACK = Rule("", ChangeObject.OTHER, plain_compare)


def match_path(path: list[str], pattern: str) -> bool:
    """Check whether a path matches a dotted pattern.

    Examples:
        match_path(["methods", "X", "params", "p"], "methods.*.params") -> True
        match_path(["methods", "X", "params", "p"], "methods.methods") -> False
        match_path(["methods", "X", "params", "p"], "methods.*.*.*.*.*") -> False
    """
    segments = pattern.split(".")
    if len(path) < len(segments):
        return False

    for path_seg, pattern_seg in zip(path, segments):
        if pattern_seg == WILDCARD:
            continue
        if path_seg != pattern_seg:
            return False

    return True


def find_rule(path: list[str]) -> Rule:
    """First rule whose pattern matches the path, or the fallback rule."""
    for rule in RULES:
        if match_path(path, rule.pattern):
            return rule
    return FALLBACK


def classify(path: list[str]) -> tuple[ChangeObject, Comparator]:
    """Semantic tag and comparator governing a change at ``path``."""
    rule = find_rule(path)
    return rule.tag_for(path), rule.comparator
