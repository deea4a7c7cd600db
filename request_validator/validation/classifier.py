"""
Request Validator Nesting Classifier
====================================

Decides whether a settings node describes one field or a nested group.

Field names are arbitrary, so the only reliable signal is structure:

    {"rules": {"require": {"message": "..."}}}                depth 3, a field
    {"age": {"rules": {"require": {"message": "..."}}}}       depth 4, a group

Values under an ``option`` key are arguments (``[5, 10]`` for a range) and
count as leaves; so do sequences anywhere in the tree.
"""

from __future__ import annotations

from typing import Any, Mapping

# Rule-set depth above which a settings node is a nested group
NESTED_RULE_THRESHOLD = 3

# Error-set depth above which a field's errors come from a nested group
NESTED_ERROR_THRESHOLD = 2

OPTION_KEY = "option"


def depth(node: Any) -> int:
    """
    Structural depth of a settings or error node.

    Args:
        node: Mapping to measure; anything else is a leaf

    Returns:
        0 for leaves and empty mappings, otherwise 1 + the deepest child.
        An empty mapping below the top (``{"isInteger": {}}``, a rule with
        every setting omitted) spans one level, like ``{"message": "x"}``.

    Example:
        >>> depth({"rules": {"maxLength": {"option": [5, 10], "message": "x"}}})
        3
        >>> depth({"rules": {"isInteger": {}}})
        3
    """
    if not isinstance(node, Mapping) or not node:
        return 0

    deepest = 0
    for key, child in node.items():
        if key == OPTION_KEY or not isinstance(child, Mapping):
            deepest = max(deepest, 1)
        elif not child:
            deepest = max(deepest, 2)
        else:
            deepest = max(deepest, 1 + depth(child))
    return deepest


def is_nested(node: Any, threshold: int = NESTED_RULE_THRESHOLD) -> bool:
    """Whether the node is deeper than the threshold."""
    return depth(node) > threshold
