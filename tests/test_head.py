# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for HeadNode."""

import re

import pytest

from genro_htmlnodes import (
    CommentNode,
    HeadChildKind,
    HeadNode,
    HtmlNode,
    InvalidChildError,
    TooManyChildrenError,
)
from genro_htmlnodes.head import VIEWPORT_CONTENT


def tags(node):
    return [child.tag for child in node]


class TestHeadCreation:
    """Tests for the default state of a head."""

    def test_defaults(self):
        """Test a default head holds the title and the viewport meta."""
        head = HeadNode()
        assert head.tag == 'head'
        assert tags(head) == ['title', 'meta']
        assert head.get_title() == 'Default'
        assert head.get_base_url() is None
        assert head.get_canonical() is None
        assert head.get_charset() is None

    def test_viewport_meta_once(self):
        """Test the viewport meta is present exactly once."""
        head = HeadNode()
        metas = head.get_meta_nodes()
        assert len(metas) == 1
        assert metas[0].get_attr('name') == 'viewport'
        assert metas[0].get_attr('content') == VIEWPORT_CONTENT

    def test_fresh_head_filtered_views(self):
        """Test the filtered views of a fresh head are empty."""
        head = HeadNode()
        assert head.get_stylesheets() == []
        assert head.get_scripts() == []
        assert head.get_alternates() == []

    def test_constructor_slots(self):
        """Test title, canonical and base from the constructor."""
        head = HeadNode('Home', canonical=' https://example.com/ ', base='https://example.com/')
        assert tags(head) == ['base', 'title', 'link', 'meta']
        assert head.get_canonical() == 'https://example.com/'
        assert head.get_base_url() == 'https://example.com/'

    def test_blank_title_creates_detached_node(self):
        """Test a blank title leaves the title node out of the head."""
        head = HeadNode(title='  ')
        assert head.get_title() == ''
        assert not head.has_child(head.title_node)
        assert head.title_node.tag == 'title'


class TestHeadSlots:
    """Tests for the singleton slot setters."""

    def test_set_title(self):
        """Test set_title trims and reads back."""
        head = HeadNode()
        assert head.set_title('  My Page ') is True
        assert head.get_title() == 'My Page'

    @pytest.mark.parametrize('title', ['a', 'Hello World', 'x y z', 'Ünïcode'])
    def test_set_title_roundtrip(self, title):
        """Test any trimmed non-empty string reads back unchanged."""
        head = HeadNode()
        head.set_title(title)
        assert head.get_title() == title

    def test_set_title_none_removes(self):
        """Test set_title(None) removes the node and clears the text."""
        head = HeadNode()
        assert head.set_title(None) is True
        assert head.get_title() == ''
        assert 'title' not in tags(head)
        assert head.set_title(None) is False

    def test_set_title_blank_rejected(self):
        """Test blank titles leave the old title in place."""
        head = HeadNode('Keep')
        assert head.set_title('   ') is False
        assert head.set_title('') is False
        assert head.get_title() == 'Keep'

    def test_get_title_reads_title_node(self):
        """Test get_title follows the text actually held by the title node."""
        head = HeadNode('Home')
        head.title_node.remove_all_children()
        assert head.get_title() == ''
        assert head.set_title('Again') is True
        assert head.get_title() == 'Again'
        assert len(head.title_node) == 1

    def test_title_reinserted_after_removal(self):
        """Test a removed title comes back once."""
        head = HeadNode()
        head.set_title(None)
        assert head.set_title('Back') is True
        assert head.count_children('title') == 1
        assert head.get_title() == 'Back'

    @pytest.mark.parametrize('setter,value,tag', [
        ('set_title', 'T', 'title'),
        ('set_base', 'https://a/', 'base'),
        ('set_canonical', 'https://a/', 'link'),
        ('set_charset', 'UTF-8', 'meta'),
    ])
    def test_setter_twice_no_duplicates(self, setter, value, tag):
        """Test two valid calls never create a second slot child."""
        head = HeadNode(title=None)
        before = head.count_children(tag)
        assert getattr(head, setter)(value) is True
        assert getattr(head, setter)(value + '2') is True
        assert head.count_children(tag) == before + 1

    def test_set_base(self):
        """Test base set, update and removal."""
        head = HeadNode()
        assert head.set_base('https://a/') is True
        assert head.set_base('https://b/') is True
        assert head.get_base_url() == 'https://b/'
        assert head.set_base(None) is True
        assert head.get_base_url() is None
        assert not head.has_child(head.base_node)
        assert head.set_base(None) is False

    def test_set_canonical(self):
        """Test canonical set and removal clears href but keeps rel."""
        head = HeadNode()
        assert head.set_canonical('https://a/') is True
        node = head.canonical_node
        assert node.get_attr('rel') == 'canonical'
        assert head.set_canonical(None) is True
        assert node.get_attr('href') is None
        assert node.get_attr('rel') == 'canonical'

    def test_set_charset(self):
        """Test charset slot."""
        head = HeadNode()
        assert head.set_charset('  ') is False
        assert head.set_charset(' UTF-8 ') is True
        assert head.get_charset() == 'UTF-8'
        assert head.charset_node in head.get_meta_nodes()
        assert head.set_charset(None) is True
        assert head.get_charset() is None
        assert head.charset_node not in head.get_meta_nodes()

    def test_slot_identity_not_tag(self):
        """Test presence is checked on the slot node, not by tag."""
        head = HeadNode(title=None)
        head.title_node.remove_all_children()
        assert head.set_title('Fresh') is True
        assert head.get_title() == 'Fresh'
        assert head.title_node.text == 'Fresh'


class TestHeadInsertionPolicy:
    """Tests for HeadNode.add_child."""

    def test_kinds(self):
        """Test candidate classification."""
        assert HeadChildKind.of(HtmlNode('base')) is HeadChildKind.BASE
        assert HeadChildKind.of(HtmlNode('title')) is HeadChildKind.TITLE
        assert HeadChildKind.of(HtmlNode('meta', CHARSET='x')) is HeadChildKind.CHARSET_META
        assert HeadChildKind.of(HtmlNode('link', rel=' Canonical ')) is HeadChildKind.CANONICAL
        assert HeadChildKind.of(HtmlNode('meta', name='a')) is HeadChildKind.GENERIC_META
        assert HeadChildKind.of(HtmlNode('script')) is HeadChildKind.EXTENSION
        assert HeadChildKind.TITLE.setter == 'set_title'
        assert HeadChildKind.EXTENSION.setter is None

    @pytest.mark.parametrize('node', [
        HtmlNode('title'),
        HtmlNode('base', href='/'),
        HtmlNode('link', rel='canonical', href='/'),
        HtmlNode('div'),
        HtmlNode('style'),
    ])
    def test_rejected(self, node):
        """Test slot tags and unknown tags are rejected."""
        head = HeadNode()
        before = tags(head)
        assert head.add_child(node) is False
        assert tags(head) == before

    def test_charset_meta_rejected(self):
        """Test a meta with charset never enters the head."""
        head = HeadNode()
        meta = HtmlNode('meta', charset='X')
        assert head.add_child(meta) is False
        assert meta not in head.get_meta_nodes()
        assert head.get_charset() is None

    def test_accepted(self):
        """Test metadata extensions are accepted."""
        head = HeadNode()
        assert head.add_child(HtmlNode('script', src='/a.js')) is True
        assert head.add_child(HtmlNode('noscript')) is True
        assert head.add_child(HtmlNode('link', rel='icon', href='/f.ico')) is True
        assert head.add_child(HtmlNode('meta', name='author', content='me')) is True
        assert head.add_child(CommentNode('generated')) is True
        assert tags(head)[-5:] == ['script', 'noscript', 'link', 'meta', '#comment']

    def test_duplicate_meta_name_rejected(self):
        """Test a second meta with the same name is rejected."""
        head = HeadNode()
        assert head.add_child(HtmlNode('meta', name='VIEWPORT', content='x')) is False
        assert len(head.get_meta_nodes()) == 1

    def test_blank_meta_names_are_not_duplicates(self):
        """Test metas with a blank or missing name never collide."""
        head = HeadNode()
        head.set_charset('utf-8')
        assert head.add_child(HtmlNode('meta', {'name': ''}, content='x')) is True
        assert head.add_child(HtmlNode('meta', {'name': '  '}, content='y')) is True
        assert head.add_child(HtmlNode('meta', property='og:title', content='z')) is True
        assert head.add_child(HtmlNode('meta', property='og:type', content='w')) is True
        assert head.get_meta('') is None
        assert len(head.get_meta_nodes()) == 6

    def test_strict_mode(self):
        """Test raise_on_error turns rejections into exceptions."""
        head = HeadNode(raise_on_error=True)
        with pytest.raises(InvalidChildError, match='use set_title'):
            head.add_child(HtmlNode('title'))
        with pytest.raises(InvalidChildError, match='not a valid child'):
            head.add_child(HtmlNode('div'))
        with pytest.raises(TooManyChildrenError, match="'viewport'"):
            head.add_meta('description', 'a')
            head.add_child(HtmlNode('meta', name='viewport'))

    def test_strict_mode_setters_do_not_raise(self):
        """Test blank setter input is never an exception."""
        head = HeadNode(raise_on_error=True)
        assert head.set_title('') is False
        assert head.set_base(None) is False

    def test_check_is_clean(self):
        """Test a populated head passes the structural check."""
        head = HeadNode('T', canonical='https://a/', base='https://a/')
        head.set_charset('utf-8')
        head.add_css('/a.css')
        assert head.check() == []


class TestHeadMeta:
    """Tests for meta helpers."""

    def test_add_meta(self):
        """Test adding and looking up a meta."""
        head = HeadNode()
        assert head.add_meta(' Description ', 'A page') is True
        meta = head.get_meta('description')
        assert meta.get_attr('name') == 'description'
        assert meta.get_attr('content') == 'A page'
        assert head.has_meta('DESCRIPTION')

    def test_add_meta_blank_name(self):
        """Test blank names are refused."""
        head = HeadNode()
        assert head.add_meta('  ', 'x') is False
        assert head.add_meta(None, 'x') is False

    def test_add_meta_override(self):
        """Test an existing meta is only replaced with override."""
        head = HeadNode()
        assert head.add_meta('viewport', 'other') is False
        assert head.add_meta('viewport', 'other', override=True) is True
        assert head.get_meta('viewport').get_attr('content') == 'other'
        assert len(head.get_meta_nodes()) == 1

    def test_charset_name(self):
        """Test 'charset' addresses the charset slot."""
        head = HeadNode()
        assert head.get_meta('charset') is None
        assert head.has_meta('charset') is False
        assert head.add_meta('charset', 'utf-8') is True
        assert head.get_meta('charset') is head.charset_node
        assert head.add_meta('charset', 'latin-1') is False
        assert head.add_meta('charset', 'latin-1', override=True) is True
        assert head.get_charset() == 'latin-1'


class TestHeadLinksAndScripts:
    """Tests for link and script helpers and the filtered views."""

    def test_add_css(self):
        """Test stylesheet links with cache busting."""
        head = HeadNode()
        assert head.add_css('/css/a.css', {'media': 'print', 'REL': 'x', 'href': 'y'}) is True
        (link,) = head.get_stylesheets()
        assert link.get_attr('rel') == 'stylesheet'
        assert link.get_attr('media') == 'print'
        assert re.fullmatch(r'/css/a\.css\?cv=[0-9a-f]{10}', link.get_attr('href'))

    def test_add_css_plain(self):
        """Test cache busting can be turned off, and blank href refused."""
        head = HeadNode()
        assert head.add_css('/a.css?x=1', cache_bust=False) is True
        assert head.get_stylesheets()[0].get_attr('href') == '/a.css?x=1'
        assert head.add_css('  ') is False

    def test_add_css_query_string(self):
        """Test the version is appended to an existing query string."""
        head = HeadNode()
        head.add_css('/a.css?x=1')
        assert re.fullmatch(r'/a\.css\?x=1&cv=[0-9a-f]{10}', head.get_stylesheets()[0].get_attr('href'))

    def test_add_js(self):
        """Test script nodes."""
        head = HeadNode()
        assert head.add_js('/a.js', {'defer': True, 'src': 'ignored'}) is True
        assert head.add_js('/b.js', cache_bust=False) is True
        assert head.add_js('') is False
        first, second = head.get_scripts()
        assert first.get_attr('type') == 'text/javascript'
        assert first.get_attr('defer') == ''
        assert first.get_attr('src').startswith('/a.js?jv=')
        assert second.get_attr('src') == '/b.js'

    def test_scripts_view_filters_type(self):
        """Test scripts without the javascript type are not listed."""
        head = HeadNode()
        head.add_child(HtmlNode('script', type='module', src='/m.js'))
        assert head.get_scripts() == []

    def test_add_link(self):
        """Test generic links."""
        head = HeadNode()
        assert head.add_link('ICON', '/f.ico', {'type': 'image/x-icon'}) is True
        assert head.add_link('canonical', '/x') is False
        assert head.add_link('', '/x') is False
        assert head.add_link('icon', ' ') is False
        link = head.get_child(len(head) - 1)
        assert link.attr == {'rel': 'icon', 'href': '/f.ico', 'type': 'image/x-icon'}

    def test_add_alternate(self):
        """Test alternate links."""
        head = HeadNode()
        assert head.add_alternate('https://a/fr', 'fr', {'hreflang': 'x', 'title': 'FR'}) is True
        assert head.add_alternate('https://a/de', ' ') is False
        (alt,) = head.get_alternates()
        assert alt.attr == {
            'rel': 'alternate', 'hreflang': 'fr', 'href': 'https://a/fr', 'title': 'FR',
        }

    def test_views_are_snapshots(self):
        """Test mutating a returned view does not change the head."""
        head = HeadNode()
        head.add_css('/a.css')
        view = head.get_stylesheets()
        view.clear()
        assert len(head.get_stylesheets()) == 1
