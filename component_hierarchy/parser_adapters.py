# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Parser adapter for JavaScript/JSX component sources.

This module wraps tree-sitter and the tree-sitter-javascript grammar behind
a small interface: source text goes in, the module's top-level declarations
and a linear token stream come out. The rest of the package never talks to
tree-sitter directly except through the declaration nodes handed out here.

Design Principles:
1. Parsers are built once per dialect and cached
2. Malformed sources raise ParseError instead of yielding partial trees,
   after the dialect's fallback grammar (if any) also failed
   (Flow-annotated components parse with the TSX grammar)
3. Tokens are leaves of the syntax tree in source order, tagged with a kind
   so heuristics can pattern-match JSX without walking the tree
4. Comments never produce tokens
"""

from typing import Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass
from enum import Enum

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser


DEFAULT_DIALECT = "javascript"

# Dialect name -> grammar loader. Both grammars include JSX.
_LANGUAGE_LOADERS: Dict[str, Callable] = {
    "javascript": tree_sitter_javascript.language,
    "tsx": tree_sitter_typescript.language_tsx,
}

# Dialect retried when a source does not parse, for type-annotated components
FALLBACK_DIALECTS: Dict[str, str] = {
    "javascript": "tsx",
}

# Nodes emitted as a single token rather than descended into
ATOMIC_NODE_TYPES = {
    "string",
    "template_string",
    "regex",
    "number",
}

NAME_NODE_TYPES = {
    "identifier",
    "property_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "private_property_identifier",
    "statement_identifier",
    "jsx_identifier",
}

# Parents whose "<" starts a tag that can name a component
JSX_TAG_PARENTS = {
    "jsx_opening_element",
    "jsx_self_closing_element",
}


class ParseError(Exception):
    """Raised when a source file cannot be parsed."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class TokenKind(Enum):
    """Kinds of tokens in the linear token stream."""
    TAG_OPEN = "tag-open"
    NAME = "name"
    LITERAL = "literal"
    TEXT = "text"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    """
    One leaf of the syntax tree.

    Attributes:
        kind: Token classification
        value: Source text of the token
        line: 1-based line number where the token starts
    """
    kind: TokenKind
    value: str
    line: int = 0


@dataclass
class ParsedSource:
    """
    Result of parsing one source file.

    Attributes:
        declarations: Top-level statements of the module (tree-sitter nodes)
        tokens: Linear token stream in source order
        source: Raw UTF-8 source the nodes point into
        dialect: Grammar the source was parsed with
    """
    declarations: List[Node]
    tokens: List[Token]
    source: bytes
    dialect: str = DEFAULT_DIALECT

    def text_of(self, node: Node) -> str:
        """Return the source text spanned by a node."""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


# Cache of constructed parsers, keyed by dialect
_parser_cache: Dict[str, Parser] = {}


def _get_parser(dialect: str) -> Parser:
    """
    Get (or build) the parser for a dialect.

    Args:
        dialect: Dialect name (e.g., "javascript")

    Returns:
        Configured tree-sitter Parser

    Raises:
        ParseError: If no grammar is configured for the dialect
    """
    if dialect in _parser_cache:
        return _parser_cache[dialect]

    loader = _LANGUAGE_LOADERS.get(dialect)
    if loader is None:
        raise ParseError(f"No parser configured for dialect: {dialect}")

    parser = Parser(Language(loader()))
    _parser_cache[dialect] = parser
    return parser


def _first_error_line(root: Node) -> Optional[int]:
    """Find the 1-based line of the first ERROR or missing node."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _classify_leaf(node: Node, parent_type: Optional[str]) -> TokenKind:
    """Map a leaf (or atomic) node to its token kind."""
    if node.type == "<" and parent_type in JSX_TAG_PARENTS:
        return TokenKind.TAG_OPEN
    if node.type in NAME_NODE_TYPES:
        return TokenKind.NAME
    if node.type in ATOMIC_NODE_TYPES:
        return TokenKind.LITERAL
    if node.type == "jsx_text":
        return TokenKind.TEXT
    return TokenKind.PUNCTUATION


def collect_tokens(root: Node, source: bytes) -> List[Token]:
    """
    Flatten a syntax tree into its token stream.

    Args:
        root: Root node of the syntax tree
        source: Source bytes the tree was parsed from

    Returns:
        Tokens in source order
    """
    tokens: List[Token] = []
    # Iterative pre-order walk; deeply nested JSX must not hit the recursion limit
    stack: List[Tuple[Node, Optional[str]]] = [(root, None)]

    while stack:
        node, parent_type = stack.pop()

        if node.type == "comment":
            continue

        if node.child_count == 0 or node.type in ATOMIC_NODE_TYPES:
            value = source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
            tokens.append(Token(
                kind=_classify_leaf(node, parent_type),
                value=value,
                line=node.start_point[0] + 1,
            ))
            continue

        for child in reversed(node.children):
            stack.append((child, node.type))

    return tokens


def _parse_tree(source: bytes, dialect: str) -> Node:
    """
    Parse source bytes with one grammar.

    Raises:
        ParseError: If the tree contains syntax errors
    """
    root = _get_parser(dialect).parse(source).root_node

    if root.has_error:
        line = _first_error_line(root)
        location = f" at line {line}" if line is not None else ""
        raise ParseError(f"Syntax error{location}", line=line)

    return root


def parse_source(text: str, dialect: str = DEFAULT_DIALECT) -> ParsedSource:
    """
    Parse component source text.

    When the source does not parse with the requested dialect and the
    dialect has a fallback (javascript -> tsx), the fallback is tried
    before giving up.

    Args:
        text: Source code
        dialect: Grammar to parse with

    Returns:
        ParsedSource with declarations and tokens

    Raises:
        ParseError: If the source has syntax errors in every grammar tried,
            or the dialect is unknown. The error of the requested dialect
            is reported.
    """
    source = text.encode("utf-8")

    try:
        root = _parse_tree(source, dialect)
    except ParseError as e:
        fallback = FALLBACK_DIALECTS.get(dialect)
        if fallback is None:
            raise
        try:
            root = _parse_tree(source, fallback)
        except ParseError:
            raise e
        dialect = fallback

    declarations = [
        child for child in root.named_children
        if child.type not in ("comment", "hash_bang_line")
    ]

    return ParsedSource(
        declarations=declarations,
        tokens=collect_tokens(root, source),
        source=source,
        dialect=dialect,
    )
