# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for path_resolver module."""

import os
from pathlib import Path

import pytest

from component_hierarchy.path_resolver import candidate_paths, resolve_component_path


def _touch(path: Path, content: str = "export default 1;\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestCandidatePaths:
    """Tests for candidate_paths."""

    def test_no_extension(self):
        """A bare base expands to extension and index variants in order."""
        assert candidate_paths(Path('src/Foo')) == [
            Path('src/Foo.js'),
            Path('src/Foo.jsx'),
            Path('src/Foo/index.js'),
            Path('src/Foo/index.jsx'),
        ]

    def test_js_extension(self):
        """A .js base is tried as-is first."""
        assert candidate_paths(Path('src/Foo.js')) == [
            Path('src/Foo.js'),
            Path('src/Foo.jsx'),
            Path('src/Foo/index.js'),
            Path('src/Foo/index.jsx'),
        ]

    def test_jsx_extension(self):
        """A .jsx base is tried first, then its .js sibling."""
        assert candidate_paths(Path('src/Foo.jsx')) == [
            Path('src/Foo.jsx'),
            Path('src/Foo.js'),
            Path('src/Foo/index.js'),
            Path('src/Foo/index.jsx'),
        ]

    def test_other_extension(self):
        """Dotted names keep their suffix and gain script extensions."""
        assert candidate_paths(Path('src/app.config')) == [
            Path('src/app.config'),
            Path('src/app.config.js'),
            Path('src/app.config.jsx'),
            Path('src/app.config/index.js'),
            Path('src/app.config/index.jsx'),
        ]


class TestResolveComponentPath:
    """Tests for resolve_component_path."""

    def test_prefers_file_over_index(self, tmp_path):
        """Foo.js wins over Foo/index.js."""
        app = _touch(tmp_path / "App.js")
        expected = _touch(tmp_path / "Button.js")
        _touch(tmp_path / "Button" / "index.js")

        assert resolve_component_path('./Button', importer=app) == expected

    def test_jsx_fallback(self, tmp_path):
        """Foo.jsx is found when Foo.js is missing."""
        app = _touch(tmp_path / "App.js")
        expected = _touch(tmp_path / "Header.jsx")

        assert resolve_component_path('./Header', importer=app) == expected

    def test_index_fallback(self, tmp_path):
        """A directory with index.js resolves to the index file."""
        app = _touch(tmp_path / "App.js")
        expected = _touch(tmp_path / "Nav" / "index.js")

        assert resolve_component_path('./Nav', importer=app) == expected

    def test_index_jsx_fallback(self, tmp_path):
        """index.jsx is the last candidate."""
        app = _touch(tmp_path / "App.js")
        expected = _touch(tmp_path / "Nav" / "index.jsx")

        assert resolve_component_path('./Nav', importer=app) == expected

    def test_parent_directory(self, tmp_path):
        """Specifiers climbing out of the importer's directory are normalised."""
        app = _touch(tmp_path / "src" / "App.js")
        expected = _touch(tmp_path / "lib" / "Widget.js")

        resolved = resolve_component_path('../lib/Widget', importer=app)
        assert resolved == expected
        assert '..' not in resolved.parts

    @pytest.mark.skipif(os.name == 'nt', reason="symlinks need privileges on Windows")
    def test_symlinked_directory_resolves_to_real_path(self, tmp_path):
        """A file reached through a symlinked directory has its real path."""
        app = _touch(tmp_path / "App.js")
        expected = _touch(tmp_path / "Button.js")
        (tmp_path / "self").symlink_to(tmp_path, target_is_directory=True)

        assert resolve_component_path('./self/self/Button', importer=app) == expected

    def test_directory_is_not_a_file(self, tmp_path):
        """A directory matching the specifier is not itself a candidate."""
        app = _touch(tmp_path / "App.js")
        (tmp_path / "Empty").mkdir()

        assert resolve_component_path('./Empty', importer=app) is None

    def test_third_party_unresolved(self, tmp_path):
        """Package imports with no local file resolve to None."""
        app = _touch(tmp_path / "App.js")
        assert resolve_component_path('react-router', importer=app) is None

    def test_module_dir_fallback(self, tmp_path):
        """The module directory is searched after the importer's directory."""
        app = _touch(tmp_path / "src" / "App.js")
        expected = _touch(tmp_path / "shared" / "components" / "Button.js")

        resolved = resolve_component_path(
            'components/Button', importer=app, module_dir=tmp_path / "shared"
        )
        assert resolved == expected

    def test_local_file_beats_module_dir(self, tmp_path):
        """Project-relative candidates come before module directory ones."""
        app = _touch(tmp_path / "src" / "App.js")
        local = _touch(tmp_path / "src" / "components" / "Button" / "index.js")
        _touch(tmp_path / "shared" / "components" / "Button.js")

        resolved = resolve_component_path(
            'components/Button', importer=app, module_dir=tmp_path / "shared"
        )
        assert resolved == local

    def test_root_without_extension(self, tmp_path):
        """The root component may be given without its extension."""
        expected = _touch(tmp_path / "App.jsx")
        assert resolve_component_path(str(tmp_path / "App")) == expected

    def test_root_ignores_module_dir(self, tmp_path):
        """The module directory only applies to child imports."""
        _touch(tmp_path / "shared" / "App.js")
        resolved = resolve_component_path(
            str(tmp_path / "App"), importer=None, module_dir=tmp_path / "shared"
        )
        assert resolved is None

    def test_empty_specifier(self):
        """An empty specifier never resolves."""
        assert resolve_component_path('') is None

    @pytest.mark.skipif(
        os.name == 'nt' or (hasattr(os, 'geteuid') and os.geteuid() == 0),
        reason="permission bits are not enforced"
    )
    def test_unreadable_candidate_skipped(self, tmp_path):
        """An unreadable file is skipped like a missing one."""
        app = _touch(tmp_path / "App.js")
        locked = _touch(tmp_path / "Secret.js")
        expected = _touch(tmp_path / "Secret.jsx")
        locked.chmod(0)
        try:
            assert resolve_component_path('./Secret', importer=app) == expected
        finally:
            locked.chmod(0o644)
