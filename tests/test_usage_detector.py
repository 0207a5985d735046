# Copyright (c) 2025 John Brosnihan
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for usage_detector module."""

from component_hierarchy.import_classifier import ImportBinding, classify_imports
from component_hierarchy.parser_adapters import Token, TokenKind, parse_source
from component_hierarchy.usage_detector import (
    ScanMode,
    detect_used_components,
    scan_markup_usage,
    scan_wrapped_export,
    select_scan_mode,
)


def _tag(name):
    return [Token(TokenKind.TAG_OPEN, '<'), Token(TokenKind.NAME, name)]


def _detect(content):
    parsed = parse_source(content)
    return detect_used_components(parsed, classify_imports(parsed))


HEADER = ImportBinding('Header', './Header')
FOOTER = ImportBinding('Footer', './Footer')
REACT = ImportBinding('React', 'react')


class TestSelectScanMode:
    """Tests for select_scan_mode."""

    def test_markup_when_library_imported(self):
        """Importing React selects the markup scan."""
        assert select_scan_mode([REACT, HEADER]) == ScanMode.MARKUP

    def test_wrapped_export_otherwise(self):
        """Without React the wrapped-export scan is used."""
        assert select_scan_mode([HEADER]) == ScanMode.WRAPPED_EXPORT
        assert select_scan_mode([]) == ScanMode.WRAPPED_EXPORT

    def test_custom_library(self):
        """The markup library identifier is configurable."""
        preact = ImportBinding('h', 'preact')
        assert select_scan_mode([preact], markup_library='h') == ScanMode.MARKUP
        assert select_scan_mode([REACT], markup_library='h') == ScanMode.WRAPPED_EXPORT


class TestScanMarkupUsage:
    """Tests for scan_markup_usage on hand-built token streams."""

    def test_tag_followed_by_import(self):
        """A tag naming an import marks it used."""
        assert scan_markup_usage(_tag('Header'), [HEADER]) == [HEADER]

    def test_tag_not_imported(self):
        """Tags for names that are not imported are ignored."""
        assert scan_markup_usage(_tag('div'), [HEADER]) == []

    def test_name_without_tag(self):
        """A name token alone does not count as usage."""
        tokens = [Token(TokenKind.NAME, 'Header')]
        assert scan_markup_usage(tokens, [HEADER]) == []

    def test_deduplicated_in_first_use_order(self):
        """Repeated tags are reported once, ordered by first use."""
        tokens = _tag('Footer') + _tag('Header') + _tag('Footer')
        assert scan_markup_usage(tokens, [HEADER, FOOTER]) == [FOOTER, HEADER]

    def test_route_component_attribute(self):
        """`component={X}` marks X used."""
        tokens = [
            Token(TokenKind.NAME, 'component'),
            Token(TokenKind.PUNCTUATION, '='),
            Token(TokenKind.PUNCTUATION, '{'),
            Token(TokenKind.NAME, 'Header'),
            Token(TokenKind.PUNCTUATION, '}'),
        ]
        assert scan_markup_usage(tokens, [HEADER]) == [HEADER]

    def test_route_component_at_end_of_stream(self):
        """A trailing `component` token does not read past the stream."""
        tokens = [Token(TokenKind.NAME, 'component')]
        assert scan_markup_usage(tokens, [HEADER]) == []

    def test_tag_at_end_of_stream(self):
        """A trailing tag-open token is ignored."""
        tokens = [Token(TokenKind.TAG_OPEN, '<')]
        assert scan_markup_usage(tokens, [HEADER]) == []


class TestMarkupFiles:
    """Tests for detect_used_components on files that render JSX."""

    def test_rendered_components(self):
        """Components used as tags are detected, others are not."""
        content = """
import React from 'react';
import Header from './Header';
import Footer from './Footer';
import { formatDate } from './utils';

export default function App() {
  return (
    <div>
      <Header title={formatDate(new Date())} />
      <main>content</main>
      <Footer></Footer>
    </div>
  );
}
"""
        assert [b.local_name for b in _detect(content)] == ['Header', 'Footer']

    def test_route_component(self):
        """Components passed to a route are detected."""
        content = """
import React from 'react';
import { Route } from 'react-router';
import UserList from './UserList';

export default () => <Route path="/users" component={UserList} />;
"""
        assert [b.local_name for b in _detect(content)] == ['Route', 'UserList']

    def test_react_itself_not_a_child(self):
        """React is only a discriminator unless rendered as a tag."""
        content = """
import React from 'react';
export default () => <div />;
"""
        assert _detect(content) == []

    def test_asset_never_a_child(self):
        """An asset import is never a child, even if its name appears as a tag."""
        content = """
import React from 'react';
import styles from './styles.css';
export default () => <styles />;
"""
        assert _detect(content) == []

    def test_markup_file_skips_wrapped_export(self):
        """Files importing React do not run the wrapped-export scan."""
        content = """
import React from 'react';
import { connect } from 'react-redux';
import Foo from './Foo';
export default connect(null)(Foo);
"""
        assert _detect(content) == []


class TestScanWrappedExport:
    """Tests for the wrapped-export scan."""

    def test_curried_connect(self):
        """connect(mapState)(Foo) forwards to Foo."""
        content = """
import { connect } from 'react-redux';
import Foo from './Foo';

const mapState = state => ({ user: state.user });
const ConnectedFoo = connect(mapState)(Foo);

export default ConnectedFoo;
"""
        assert _detect(content) == [ImportBinding('Foo', './Foo')]

    def test_walks_outward_through_callee(self):
        """When the outer call has no imported argument the callee chain is searched."""
        content = """
import withTheme from './withTheme';
import Card from './Card';

const options = { dark: true };
const Themed = withTheme(Card)(options);

export default Themed;
"""
        assert _detect(content) == [ImportBinding('Card', './Card')]

    def test_first_matching_argument(self):
        """The first imported argument wins."""
        content = """
import compose from './compose';
import Left from './Left';
import Right from './Right';

const Both = compose(Left, Right);
export default Both;
"""
        assert _detect(content) == [ImportBinding('Left', './Left')]

    def test_direct_call_default_export(self):
        """A call exported directly is scanned like a declared one."""
        content = """
import { connect } from 'react-redux';
import Foo from './Foo';
export default connect(null)(Foo);
"""
        assert _detect(content) == [ImportBinding('Foo', './Foo')]

    def test_exported_declaration(self):
        """Declarations inside `export const` are found."""
        content = """
import { connect } from 'react-redux';
import Foo from './Foo';
export const Connected = connect()(Foo);
export default Connected;
"""
        assert _detect(content) == [ImportBinding('Foo', './Foo')]

    def test_no_default_export(self):
        """Files without a default export have no wrapped child."""
        content = """
import Foo from './Foo';
export const helper = wrap(Foo);
"""
        assert _detect(content) == []

    def test_default_export_not_a_call(self):
        """A default export initialized with a non-call yields nothing."""
        content = """
import Foo from './Foo';
const value = Foo;
export default value;
"""
        assert _detect(content) == []

    def test_utility_module(self):
        """A plain utility module has no children."""
        content = """
import { format } from 'date-fns';
export default function formatDate(d) { return format(d, 'yyyy'); }
"""
        assert _detect(content) == []

    def test_scan_wrapped_export_direct(self):
        """scan_wrapped_export returns at most one binding."""
        parsed = parse_source("""
import wrap from './wrap';
import A from './A';
import B from './B';
const W = wrap(A)(B);
export default W;
""")
        bindings = classify_imports(parsed)
        assert scan_wrapped_export(parsed, bindings) == [ImportBinding('B', './B')]
