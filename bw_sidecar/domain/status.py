"""Unlock predicate over the loosely-structured `bw serve` status payload."""

from __future__ import annotations

from typing import Any, Final

UNLOCKED_STATUS: Final[str] = "unlocked"


def domain_is_unlocked(payload: Any) -> bool:
    """Return whether a decoded status payload reports an unlocked vault.

    Recognized placements, checked in order: `data.template.status`,
    `data.status`, top-level `status`. Only the exact string `"unlocked"`
    matches. Any other shape, including non-object intermediate nodes and
    non-string status values, yields False.

    Args:
        payload: Value decoded from the status response JSON body.

    Returns:
        bool: True when one of the recognized placements is `"unlocked"`.

    Raises:
        RuntimeError: This predicate does not raise for any payload shape.
    """

    if not isinstance(payload, dict):
        return False

    data_node = payload.get("data")
    if isinstance(data_node, dict):
        template_node = data_node.get("template")
        if isinstance(template_node, dict) and _domain_status_is_unlocked(template_node):
            return True
        if _domain_status_is_unlocked(data_node):
            return True

    return _domain_status_is_unlocked(payload)


def _domain_status_is_unlocked(node: dict[str, Any]) -> bool:
    status_value = node.get("status")
    return isinstance(status_value, str) and status_value == UNLOCKED_STATUS
