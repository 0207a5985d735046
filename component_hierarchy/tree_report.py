# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Component tree report generator.

Renders a display tree (see presentation.present) as box-drawing text or
JSON and writes it to stdout or a file.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional


OUTPUT_FORMATS = ('text', 'json')


class TreeReportError(Exception):
    """Raised when tree report generation fails."""
    pass


def _render_children(children: List[Dict[str, Any]], prefix: str, lines: List[str]) -> None:
    """
    Append the lines for a list of sibling nodes.

    Args:
        children: Display nodes at this level
        prefix: Continuation prefix inherited from ancestors
        lines: Output accumulator
    """
    for i, child in enumerate(children):
        is_last = (i == len(children) - 1)
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{child['label']}")

        if child.get("children"):
            extension = "    " if is_last else "│   "
            _render_children(child["children"], prefix + extension, lines)


def render_text(tree: Dict[str, Any]) -> str:
    """
    Render a display tree as indented text.

    Args:
        tree: Display tree with 'label' and optional 'children'

    Returns:
        Text with the root label on the first line and one line per node
    """
    lines = [tree['label']]
    _render_children(tree.get("children", []), "", lines)
    return "\n".join(lines)


def render_json(tree: Dict[str, Any]) -> str:
    """Render a display tree as indented JSON."""
    return json.dumps(tree, indent=2, ensure_ascii=False)


def render_tree(tree: Dict[str, Any], output_format: str = 'text') -> str:
    """
    Render a display tree in the requested format.

    Raises:
        TreeReportError: If the format is not supported
    """
    if output_format == 'text':
        return render_text(tree)
    if output_format == 'json':
        return render_json(tree)
    raise TreeReportError(f"Unsupported output format: {output_format}")


def write_tree_report(
    tree: Dict[str, Any],
    output_path: Optional[Path] = None,
    output_format: str = 'text'
) -> None:
    """
    Write the rendered tree to a file or stdout.

    Args:
        tree: Display tree
        output_path: Destination file; None writes to stdout
        output_format: 'text' or 'json'

    Raises:
        TreeReportError: If rendering or writing fails
    """
    content = render_tree(tree, output_format)

    if output_path is None:
        print(content)
        return

    try:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
            f.write("\n")
        print(f"Component tree written: {output_path}", file=sys.stderr)
    except IOError as e:
        raise TreeReportError(f"Failed to write {output_path}: {e}")


def count_nodes(tree: Dict[str, Any]) -> int:
    """Count total nodes in a display tree."""
    count = 1
    for child in tree.get("children", []):
        count += count_nodes(child)
    return count
