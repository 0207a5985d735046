# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Resolution of import specifiers to component files.

Component imports usually omit the extension and may point at a directory
with an index file, so each specifier expands to an ordered list of
candidate paths. The first candidate that exists wins.
"""

import os
from pathlib import Path
from typing import List, Optional


SCRIPT_EXTENSIONS = ('.js', '.jsx')
INDEX_BASENAME = 'index'


def _is_readable_file(path: Path) -> bool:
    """Check that a path is a regular file we are allowed to read."""
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError:
        return False


def candidate_paths(base: Path) -> List[Path]:
    """
    Expand a base path into ordered file candidates.

    Order for `Foo`: Foo.js, Foo.jsx, Foo/index.js, Foo/index.jsx.
    A base that already carries an extension is tried as-is first; for
    `Foo.jsx` the `.js` sibling is tried next.

    Args:
        base: Path as written, joined onto its directory

    Returns:
        Candidates in priority order, without duplicates
    """
    base_str = str(base)
    root, ext = os.path.splitext(base_str)

    candidates: List[str] = []
    if ext:
        candidates.append(base_str)

    stem = root if ext.lower() in SCRIPT_EXTENSIONS else base_str
    for extension in SCRIPT_EXTENSIONS:
        candidates.append(stem + extension)
    for extension in SCRIPT_EXTENSIONS:
        candidates.append(os.path.join(stem, INDEX_BASENAME + extension))

    unique: List[Path] = []
    seen = set()
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            unique.append(Path(candidate))
    return unique


def resolve_component_path(
    specifier: str,
    importer: Optional[Path] = None,
    module_dir: Optional[Path] = None
) -> Optional[Path]:
    """
    Resolve an import specifier to an existing file.

    Args:
        specifier: Import path as written (e.g., './Header'), or the root
            component path when importer is None
        importer: File containing the import; None for the root component
        module_dir: Alternate module root tried after the importer's directory
            (ignored for the root component)

    Returns:
        Real path (symlinks resolved) of the first existing candidate, or
        None if nothing matches (likely a third-party or external module)
    """
    if not specifier:
        return None

    if importer is None:
        candidates = candidate_paths(Path(specifier))
    else:
        candidates = candidate_paths(importer.parent / specifier)
        if module_dir is not None:
            candidates.extend(
                c for c in candidate_paths(module_dir / specifier)
                if c not in candidates
            )

    for candidate in candidates:
        if _is_readable_file(candidate):
            return Path(os.path.realpath(candidate))

    return None
