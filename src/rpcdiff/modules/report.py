"""Text report for a diff.

Groups changes by criticality (breaking, dangerous, non breaking) and
describes each one as a single line.
"""

import json
from typing import Any

from rpcdiff.types import Change, ChangeType, Criticality, Diff

# Order of sections in the report.
REPORT_ORDER = (Criticality.BREAKING, Criticality.DANGEROUS, Criticality.NON_BREAKING)

NO_CHANGES = "There is no difference between schemas"


def group_by_criticality(diff: Diff) -> dict[Criticality, list[Change]]:
    """Non-empty change groups in report order."""
    groups: dict[Criticality, list[Change]] = {}
    for level in REPORT_ORDER:
        changes = diff.by_criticality(level)
        if changes:
            groups[level] = changes
    return groups


def render_text(diff: Diff) -> str:
    """Render a human-readable report.

    Example:
        New schema has breaking change(s)
        Breaking changes (1):
        - added user param to methods: user.create: {...}
    """
    if not diff.changes:
        return NO_CHANGES

    lines = [f"New schema has {diff.criticality.label} change(s)"]
    for level, changes in group_by_criticality(diff).items():
        lines.append(f"{level.label.capitalize()} changes ({len(changes)}):")
        for change in changes:
            lines.append(f"- {describe_change(change)}")

    return "\n".join(lines) + "\n"


def describe_change(change: Change) -> str:
    """One-line description of where a change happened and how."""
    element, section, location = _split_path(change.path)
    if location:
        location = f": {location}"

    if change.type == ChangeType.ADDED:
        if element.isdigit():
            return f"added {_dump(change.new)} to {section}{location}"
        return f"added {element} to {section}{location}: {_dump(change.new)}"

    if change.type == ChangeType.REMOVED:
        if element.isdigit():
            return f"removed {_dump(change.old)} from {section}{location}"
        return f"removed {element} from {section}{location}: {_dump(change.old)}"

    return f"changed {element} at {section}{location}: from {_dump(change.old)} to {_dump(change.new)}"


def _split_path(path: list[str]) -> tuple[str, str, str]:
    """Split a path into (element, section, location) for display.

    Method params and errors read as ``<name> param`` / ``<code> error``
    with the method (and parameter) as location.
    """
    if not path:
        return "", "document", ""
    if len(path) == 1:
        return path[0], "document", ""

    section, middle, element = path[0], path[1:-1], path[-1]
    location = ".".join(middle)

    if section == "methods" and middle:
        if "params" in middle:
            if middle[-1] == "params":
                element = f"{element} param"
                location = middle[0]
            if len(middle) > 2:
                location = f"{middle[0]}({middle[2]})"
        if middle[-1] == "errors":
            element = f"{element} error"
            location = middle[0]

    return element, section, location


def _dump(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)
