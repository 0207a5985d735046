# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Presentation of component trees.

Turns a walked ComponentNode tree into a display tree of plain dictionaries
(`{"label": ..., "children": [...]}`) ready for rendering. The mapping is
pure: the component tree is never modified, so it can be presented any
number of times with different options.
"""

import posixpath
from typing import Any, Dict, List, Optional
from dataclasses import dataclass

from component_hierarchy.tree_walker import ComponentNode, NodeStatus


DEFAULT_CONTAINER_MARKER = "Container"
DEFAULT_CONTAINER_SUFFIX = " (*)"
CYCLE_SUFFIX = " (cycle)"


@dataclass
class PresentationOptions:
    """
    Options for building the display tree.

    Attributes:
        hide_containers: Collapse container components into their child
        container_marker: Substring identifying container component names
        container_suffix: Appended to a child that replaced its container
    """
    hide_containers: bool = False
    container_marker: str = DEFAULT_CONTAINER_MARKER
    container_suffix: str = DEFAULT_CONTAINER_SUFFIX


def _specifier_basename(specifier: str) -> str:
    """Last path segment of a specifier with any extension removed."""
    segment = posixpath.basename(specifier.rstrip('/'))
    stem, _ = posixpath.splitext(segment)
    return stem or segment


def compute_label(node: ComponentNode) -> str:
    """
    Compute the display label of a node.

    Nodes with a specifier are shown as `specifier/name` unless the name
    already matches the component's directory or the last segment of the
    specifier, which would only repeat it (`Button/Button`).

    Args:
        node: Component node

    Returns:
        Display label
    """
    if not node.specifier:
        return node.name

    if node.resolved_path is not None and node.resolved_path.parent.name == node.name:
        return node.name
    if _specifier_basename(node.specifier) == node.name:
        return node.name

    return f"{node.specifier.rstrip('/')}/{node.name}"


def _sort_key(node: ComponentNode) -> str:
    return ((node.specifier or '') + node.name).lower()


def _visible_children(node: ComponentNode) -> List[ComponentNode]:
    return [child for child in node.children if not child.hidden]


def _present(node: ComponentNode, options: PresentationOptions, suffix: str) -> Dict[str, Any]:
    if options.hide_containers and options.container_marker in node.name:
        visible = _visible_children(node)
        # A container with nothing to collapse into is shown as-is
        if visible:
            return _present(visible[0], options, suffix + options.container_suffix)

    label = compute_label(node) + suffix
    if node.status == NodeStatus.CYCLE:
        label += CYCLE_SUFFIX

    children = sorted(_visible_children(node), key=_sort_key)
    if not children:
        return {"label": label}

    return {
        "label": label,
        "children": [_present(child, options, '') for child in children],
    }


def present(
    node: ComponentNode,
    options: Optional[PresentationOptions] = None
) -> Dict[str, Any]:
    """
    Map a component tree to a display tree.

    Args:
        node: Root of the component tree
        options: Presentation options

    Returns:
        Display tree; leaves are `{"label": str}`, inner nodes also carry
        an ordered `"children"` list
    """
    return _present(node, options or PresentationOptions(), '')
