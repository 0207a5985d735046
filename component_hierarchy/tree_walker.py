# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Component tree walker.

Starting from a root component file, repeatedly parses a file, finds the
components it renders and resolves each of them to a file, producing a
tree of ComponentNode objects.

A node moves through these states:

    pending -> resolved    (beyond the scan depth, never opened)
            -> scanned     (opened, children discovered)
            -> unresolved  (no file found, or unreadable / unparsable)
            -> cycle       (file already open further up the current branch)

Failures below the root never abort the walk; they turn the node into an
unresolved leaf and are recorded as error messages.
"""

from typing import Iterator, List, Optional, Set
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from component_hierarchy.import_classifier import classify_imports
from component_hierarchy.parser_adapters import ParseError, parse_source
from component_hierarchy.path_resolver import SCRIPT_EXTENSIONS, resolve_component_path
from component_hierarchy.usage_detector import DEFAULT_MARKUP_LIBRARY, detect_used_components


class ComponentTreeError(Exception):
    """Raised when the component tree cannot be built."""
    pass


class RootNotFoundError(ComponentTreeError):
    """Raised when the root component cannot be resolved, read or parsed."""
    pass


class NodeStatus(Enum):
    """Lifecycle state of a ComponentNode."""
    PENDING = "pending"
    RESOLVED = "resolved"
    SCANNED = "scanned"
    UNRESOLVED = "unresolved"
    CYCLE = "cycle"


@dataclass
class ComponentNode:
    """
    A component in the hierarchy.

    Attributes:
        name: Local import name, or the root file's name without extension
        specifier: Import path as written; None for the root
        resolved_path: File the component was resolved to; None if unresolved
        depth: Distance from the root (root is 0)
        children: Rendered child components in discovery order
        hidden: True when unresolved and third-party hiding is enabled
        status: Lifecycle state
    """
    name: str
    specifier: Optional[str] = None
    resolved_path: Optional[Path] = None
    depth: int = 0
    children: List['ComponentNode'] = field(default_factory=list)
    hidden: bool = False
    status: NodeStatus = NodeStatus.PENDING

    def iter_nodes(self) -> Iterator['ComponentNode']:
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class WalkOptions:
    """
    Options controlling the walk.

    Attributes:
        scan_depth: Deepest level whose files are opened (None for unlimited,
            values below 1 are clamped to 1)
        module_dir: Alternate root for resolving child imports
        hide_third_party: Mark unresolved nodes as hidden
        markup_library: Import name that signals a file renders JSX
    """
    scan_depth: Optional[int] = None
    module_dir: Optional[Path] = None
    hide_third_party: bool = False
    markup_library: str = DEFAULT_MARKUP_LIBRARY

    def __post_init__(self):
        if self.scan_depth is not None and self.scan_depth < 1:
            self.scan_depth = 1


@dataclass
class WalkResult:
    """
    Outcome of a walk.

    Attributes:
        root: Root of the component tree
        errors: Messages for files that could not be read or parsed
    """
    root: ComponentNode
    errors: List[str] = field(default_factory=list)

    def iter_nodes(self) -> Iterator[ComponentNode]:
        """Yield every node of the tree in pre-order."""
        return self.root.iter_nodes()

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def unresolved_count(self) -> int:
        return sum(1 for node in self.iter_nodes() if node.status == NodeStatus.UNRESOLVED)

    @property
    def cycle_count(self) -> int:
        return sum(1 for node in self.iter_nodes() if node.status == NodeStatus.CYCLE)

    def has_resolved_children(self) -> bool:
        """Check whether the root renders at least one resolvable component."""
        return any(child.resolved_path is not None for child in self.root.children)


def component_name_from_path(path: Path) -> str:
    """
    Derive a display name from a component file path.

    Args:
        path: Path as given (e.g., 'src/App.jsx' or 'src/App')

    Returns:
        Basename without a .js/.jsx extension
    """
    name = path.name
    for extension in SCRIPT_EXTENSIONS:
        if name.lower().endswith(extension):
            return name[:-len(extension)]
    return name


class TreeWalker:
    """
    Builds a component tree by recursively scanning component files.

    The walk is synchronous: each file is read, parsed and scanned before
    its children are visited. Files currently open on the recursion path
    are tracked so import cycles terminate.
    """

    def __init__(self, options: Optional[WalkOptions] = None):
        self.options = options or WalkOptions()
        self.errors: List[str] = []
        self._active_paths: Set[Path] = set()

    def walk(self, root_file: Path) -> WalkResult:
        """
        Walk the hierarchy rooted at a component file.

        Args:
            root_file: Root component path; the extension may be omitted

        Returns:
            WalkResult with the populated tree and collected errors

        Raises:
            RootNotFoundError: If the root cannot be resolved, read or parsed
        """
        self.errors = []
        self._active_paths = set()

        root = ComponentNode(name=component_name_from_path(Path(root_file)), depth=0)
        resolved = resolve_component_path(str(root_file))
        if resolved is None:
            raise RootNotFoundError(f"Could not find any components in {root_file}")

        root.resolved_path = resolved
        try:
            self._scan(root)
        except (OSError, UnicodeDecodeError, ParseError) as e:
            raise RootNotFoundError(f"Could not read root component {resolved}: {e}")

        self._visit_children(root)
        return WalkResult(root=root, errors=list(self.errors))

    def _within_scan_depth(self, depth: int) -> bool:
        scan_depth = self.options.scan_depth
        return scan_depth is None or depth <= scan_depth

    def _scan(self, node: ComponentNode) -> None:
        """
        Read and parse a resolved node's file and create its children.

        Raises:
            OSError, UnicodeDecodeError: If the file cannot be read
            ParseError: If the file cannot be parsed
        """
        content = node.resolved_path.read_text(encoding='utf-8')
        parsed = parse_source(content)
        bindings = classify_imports(parsed)
        used = detect_used_components(parsed, bindings, self.options.markup_library)

        node.children = [
            ComponentNode(
                name=binding.local_name,
                specifier=binding.specifier,
                depth=node.depth + 1,
            )
            for binding in used
        ]
        node.status = NodeStatus.SCANNED

    def _mark_unresolved(self, node: ComponentNode) -> None:
        node.resolved_path = None
        node.children = []
        node.status = NodeStatus.UNRESOLVED
        node.hidden = self.options.hide_third_party

    def _visit_children(self, node: ComponentNode) -> None:
        self._active_paths.add(node.resolved_path)
        try:
            for child in node.children:
                self._process_node(child, node)
        finally:
            self._active_paths.discard(node.resolved_path)

    def _process_node(self, node: ComponentNode, parent: ComponentNode) -> None:
        """Resolve, scan and recurse into a non-root node."""
        resolved = resolve_component_path(
            node.specifier,
            importer=parent.resolved_path,
            module_dir=self.options.module_dir,
        )
        if resolved is None:
            self._mark_unresolved(node)
            return

        node.resolved_path = resolved

        if resolved in self._active_paths:
            node.status = NodeStatus.CYCLE
            return

        if not self._within_scan_depth(node.depth):
            node.status = NodeStatus.RESOLVED
            return

        try:
            self._scan(node)
        except (OSError, UnicodeDecodeError, ParseError) as e:
            self.errors.append(f"Error scanning {resolved}: {e}")
            self._mark_unresolved(node)
            return

        self._visit_children(node)


def build_component_tree(
    root_file: Path,
    options: Optional[WalkOptions] = None
) -> WalkResult:
    """
    Build the component tree for a root component file.

    Args:
        root_file: Root component path; the extension may be omitted
        options: Walk options (defaults: unbounded depth, no module dir)

    Returns:
        WalkResult with the populated tree and collected errors

    Raises:
        RootNotFoundError: If the root cannot be resolved, read or parsed
    """
    return TreeWalker(options).walk(root_file)
