# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Detection of rendered child components.

Decides which of a file's imports are components it actually renders. Two
strategies exist and exactly one runs per file:

- Markup scan: the file imports the markup library, so rendered components
  show up as JSX tags (`<Header />`) or as a routing `component={Foo}`
  attribute. Detected by token adjacency.
- Wrapped-export scan: the file renders no markup itself and is assumed to
  default-export a higher-order wrapper such as `connect(mapState)(Foo)`.
  The first imported identifier found in the call chain is the child.
"""

from typing import Dict, List, Optional, Sequence

from enum import Enum
from tree_sitter import Node

from component_hierarchy.import_classifier import ImportBinding
from component_hierarchy.parser_adapters import ParsedSource, Token, TokenKind


DEFAULT_MARKUP_LIBRARY = "React"

# Attribute name routing libraries use to pass a component by reference
ROUTE_COMPONENT_ATTRIBUTE = "component"

# `component` `=` `{` `Foo`
ROUTE_COMPONENT_OFFSET = 3

VARIABLE_DECLARATION_TYPES = {'lexical_declaration', 'variable_declaration'}


class ScanMode(Enum):
    """Strategy used to find rendered children in a file."""
    MARKUP = "markup"
    WRAPPED_EXPORT = "wrapped-export"


def select_scan_mode(
    bindings: Sequence[ImportBinding],
    markup_library: str = DEFAULT_MARKUP_LIBRARY
) -> ScanMode:
    """
    Pick the scan strategy for a file.

    Args:
        bindings: Import bindings of the file
        markup_library: Identifier the markup library is imported as

    Returns:
        ScanMode.MARKUP if the markup library is imported, otherwise
        ScanMode.WRAPPED_EXPORT
    """
    if any(binding.local_name == markup_library for binding in bindings):
        return ScanMode.MARKUP
    return ScanMode.WRAPPED_EXPORT


def _index_bindings(bindings: Sequence[ImportBinding]) -> Dict[str, ImportBinding]:
    """Map local names to bindings, keeping the first binding of a name."""
    by_name: Dict[str, ImportBinding] = {}
    for binding in bindings:
        by_name.setdefault(binding.local_name, binding)
    return by_name


def scan_markup_usage(
    tokens: Sequence[Token],
    bindings: Sequence[ImportBinding]
) -> List[ImportBinding]:
    """
    Find imported components used as JSX tags or routed components.

    Args:
        tokens: Token stream of the file
        bindings: Import bindings of the file

    Returns:
        Used bindings, deduplicated, in order of first use
    """
    by_name = _index_bindings(bindings)
    used: List[ImportBinding] = []
    seen = set()

    def record(name: str) -> None:
        binding = by_name.get(name)
        if binding is not None and name not in seen:
            seen.add(name)
            used.append(binding)

    for i, token in enumerate(tokens):
        if token.kind == TokenKind.TAG_OPEN:
            if i + 1 < len(tokens) and tokens[i + 1].kind == TokenKind.NAME:
                record(tokens[i + 1].value)

        elif token.kind == TokenKind.NAME and token.value == ROUTE_COMPONENT_ATTRIBUTE:
            target = i + ROUTE_COMPONENT_OFFSET
            if target < len(tokens) and tokens[target].kind == TokenKind.NAME:
                record(tokens[target].value)

    return used


def _default_export_value(declarations: Sequence[Node]) -> Optional[Node]:
    """Return the expression exported by `export default <expr>`."""
    for statement in declarations:
        if statement.type != 'export_statement':
            continue
        if not any(child.type == 'default' for child in statement.children):
            continue
        return statement.child_by_field_name('value')
    return None


def _variable_declarations(declarations: Sequence[Node]) -> List[Node]:
    """Top-level variable declarations, including `export const ...`."""
    found = []
    for statement in declarations:
        if statement.type in VARIABLE_DECLARATION_TYPES:
            found.append(statement)
        elif statement.type == 'export_statement':
            declaration = statement.child_by_field_name('declaration')
            if declaration is not None and declaration.type in VARIABLE_DECLARATION_TYPES:
                found.append(declaration)
    return found


def _find_initializer(
    parsed: ParsedSource,
    declarations: Sequence[Node],
    identifier: str
) -> Optional[Node]:
    """Find the call expression a top-level variable is initialized with."""
    for declaration in _variable_declarations(declarations):
        for declarator in declaration.named_children:
            if declarator.type != 'variable_declarator':
                continue
            name = declarator.child_by_field_name('name')
            value = declarator.child_by_field_name('value')
            if name is None or value is None:
                continue
            if parsed.text_of(name) == identifier and value.type == 'call_expression':
                return value
    return None


def _find_import_in_call_chain(
    parsed: ParsedSource,
    call: Node,
    by_name: Dict[str, ImportBinding]
) -> Optional[ImportBinding]:
    """
    Search a call and its callee chain for an imported identifier argument.

    For `connect(mapState)(Foo)` the outer call's arguments are checked
    first (`Foo`), then the callee `connect(mapState)` and so on outward.
    """
    func: Optional[Node] = call
    while func is not None and func.type == 'call_expression':
        arguments = func.child_by_field_name('arguments')
        if arguments is not None:
            for argument in arguments.named_children:
                if argument.type == 'identifier':
                    binding = by_name.get(parsed.text_of(argument))
                    if binding is not None:
                        return binding
        func = func.child_by_field_name('function')
    return None


def scan_wrapped_export(
    parsed: ParsedSource,
    bindings: Sequence[ImportBinding]
) -> List[ImportBinding]:
    """
    Find the component wrapped by a higher-order default export.

    Args:
        parsed: Parsed source file
        bindings: Import bindings of the file

    Returns:
        A list holding the wrapped binding, or an empty list
    """
    exported = _default_export_value(parsed.declarations)
    if exported is None:
        return []

    if exported.type == 'identifier':
        call = _find_initializer(parsed, parsed.declarations, parsed.text_of(exported))
    elif exported.type == 'call_expression':
        call = exported
    else:
        call = None

    if call is None:
        return []

    binding = _find_import_in_call_chain(parsed, call, _index_bindings(bindings))
    return [binding] if binding is not None else []


def detect_used_components(
    parsed: ParsedSource,
    bindings: Sequence[ImportBinding],
    markup_library: str = DEFAULT_MARKUP_LIBRARY
) -> List[ImportBinding]:
    """
    Determine which imports a file renders.

    Args:
        parsed: Parsed source file
        bindings: Import bindings from classify_imports
        markup_library: Identifier the markup library is imported as

    Returns:
        Used bindings in order of first occurrence
    """
    mode = select_scan_mode(bindings, markup_library)
    if mode == ScanMode.MARKUP:
        return scan_markup_usage(parsed.tokens, bindings)
    return scan_wrapped_export(parsed, bindings)
