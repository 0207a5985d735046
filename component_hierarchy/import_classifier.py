# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Import classification for component sources.

Maps every local name bound by an import declaration to the specifier it
was imported from. Imports of non-code assets (style sheets, images, fonts,
data files) are skipped so they can never be mistaken for components.
"""

from typing import List, Optional
from dataclasses import dataclass

from tree_sitter import Node

from component_hierarchy.parser_adapters import ParsedSource


STYLE_EXTENSIONS = {'.css', '.scss', '.sass', '.less', '.styl'}
IMAGE_EXTENSIONS = {'.svg', '.png', '.jpg', '.jpeg', '.gif', '.webp', '.ico', '.bmp'}
FONT_EXTENSIONS = {'.woff', '.woff2', '.ttf', '.eot', '.otf'}
DATA_EXTENSIONS = {'.json'}

ASSET_EXTENSIONS = STYLE_EXTENSIONS | IMAGE_EXTENSIONS | FONT_EXTENSIONS | DATA_EXTENSIONS


@dataclass(frozen=True)
class ImportBinding:
    """
    A local name bound by an import declaration.

    Attributes:
        local_name: Name the import is bound to in the importing file
        specifier: Module specifier as written (e.g., './Header')
    """
    local_name: str
    specifier: str


def is_asset_specifier(specifier: str) -> bool:
    """
    Check if an import specifier points at a non-code asset.

    Args:
        specifier: Module specifier (e.g., './styles.css')

    Returns:
        True if the specifier ends with a denylisted asset suffix
    """
    path = specifier.split('?', 1)[0].lower()
    last_segment = path.rsplit('/', 1)[-1]
    if '.' not in last_segment:
        return False
    suffix = '.' + last_segment.rsplit('.', 1)[-1]
    return suffix in ASSET_EXTENSIONS


def _string_value(parsed: ParsedSource, node: Node) -> str:
    """Strip the quotes from a string literal node."""
    text = parsed.text_of(node)
    if len(text) >= 2 and text[0] in '\'"' and text[-1] == text[0]:
        return text[1:-1]
    return text


def _bound_names(parsed: ParsedSource, import_clause: Node) -> List[str]:
    """
    Collect local names from an import clause.

    Handles default (`import A`), namespace (`import * as A`) and named
    (`import { a, b as c }`) forms, in source order.
    """
    names = []
    for child in import_clause.named_children:
        if child.type == 'identifier':
            names.append(parsed.text_of(child))
        elif child.type == 'namespace_import':
            for part in child.named_children:
                if part.type == 'identifier':
                    names.append(parsed.text_of(part))
        elif child.type == 'named_imports':
            for spec in child.named_children:
                if spec.type != 'import_specifier':
                    continue
                local = spec.child_by_field_name('alias') or spec.child_by_field_name('name')
                if local is not None and local.type == 'identifier':
                    names.append(parsed.text_of(local))
    return names


def _import_source(parsed: ParsedSource, statement: Node) -> Optional[str]:
    """Get the specifier of an import statement, if it has one."""
    source_node = statement.child_by_field_name('source')
    if source_node is None:
        return None
    return _string_value(parsed, source_node)


def classify_imports(parsed: ParsedSource) -> List[ImportBinding]:
    """
    Build the import bindings of a parsed file.

    Args:
        parsed: Parsed source file

    Returns:
        One binding per bound local name, in declaration order. Asset imports
        and side-effect imports contribute nothing.
    """
    bindings: List[ImportBinding] = []

    for statement in parsed.declarations:
        if statement.type != 'import_statement':
            continue

        specifier = _import_source(parsed, statement)
        if not specifier or is_asset_specifier(specifier):
            continue

        for child in statement.named_children:
            if child.type == 'import_clause':
                for name in _bound_names(parsed, child):
                    bindings.append(ImportBinding(local_name=name, specifier=specifier))

    return bindings
