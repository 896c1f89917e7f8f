"""
Renders a described change set as human readable lines for review.
"""

from typing import Any, Dict, List, Union

REPLACEMENT_ANNOTATIONS = {
    "Conditionally": " (conditional replacement)",
    "Always": " (forces replacement)",
}

REFERENCE_SOURCES = {
    "ResourceAttribute": "!GetAtt",
    "ResourceReference": "!Ref",
    "ParameterReference": "!Ref",
}


def _describe_source(detail: Dict[str, Any]) -> str:
    causing_entity = detail.get("CausingEntity")
    change_source = detail.get("ChangeSource", "")

    tag = REFERENCE_SOURCES.get(change_source)
    if tag and causing_entity:
        return f"{tag} {causing_entity}"

    return causing_entity or change_source


def format_detail(detail: Dict[str, Any]) -> str:
    """Format one ResourceChangeDetail as an indented Change line"""
    target = detail.get("Target", {})

    name = target.get("Attribute", "")
    if target.get("Name"):
        name = f"{name}.{target['Name']}"

    line = f"    Change: {name} <- {_describe_source(detail)}"
    return line + REPLACEMENT_ANNOTATIONS.get(target.get("RequiresRecreation"), "")


def format_resource_change(change: Dict[str, Any]) -> List[str]:
    """Format one ResourceChange entry"""
    action = change.get("Action")
    resource = f"{change.get('ResourceType')} {change.get('LogicalResourceId')}"
    physical_id = change.get("PhysicalResourceId")

    if action == "Add":
        return [f"+ {resource}"]

    if action == "Modify" and change.get("Replacement") != "True":
        lines = [f"~ {resource}"]
        lines.extend(format_detail(detail) for detail in change.get("Details", []))
        return lines

    if action == "Modify":
        lines = [f"- {resource}", f"+ {resource}"]
    elif action == "Remove":
        lines = [f"- {resource}"]
    else:
        lines = [f"? {resource} ({action})"]

    if physical_id:
        lines.append(f"  Resource: {physical_id}")

    return lines


def format_change_set(
    changes: Union[Dict[str, Any], List[Dict[str, Any]]]
) -> List[str]:
    """
    Format the changes of a change set, in their original order.
    Accepts either a describe_change_set response or its Changes list.
    Entries are separated by a blank line.
    """
    if isinstance(changes, dict):
        changes = changes.get("Changes", [])

    lines: List[str] = []
    for change in changes:
        if change.get("Type") != "Resource" or "ResourceChange" not in change:
            continue

        if lines:
            lines.append("")
        lines.extend(format_resource_change(change["ResourceChange"]))

    return lines


def render_change_set(
    changes: Union[Dict[str, Any], List[Dict[str, Any]]]
) -> str:
    lines = format_change_set(changes)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
