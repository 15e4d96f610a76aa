# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""HeadNode - the ``<head>`` element of an HTML document.

The head keeps four singleton slots (base, title, charset meta and
canonical link). Slot nodes are owned by the head and can only be changed
through their setters; ``add_child()`` refuses them and accepts the other
metadata tags.

Example:
    Building a head::

        from genro_htmlnodes import HeadNode

        head = HeadNode(title='Home')
        head.set_charset('utf-8')
        head.set_canonical('https://example.com/')
        head.add_css('/css/site.css', cache_bust=False)
        head.add_meta('description', 'Landing page')

        head.get_title()         # 'Home'
        head.get_meta_nodes()    # viewport, charset and description metas
"""

from __future__ import annotations

import logging
import secrets
from enum import Enum
from typing import Any, Callable

from .exceptions import InvalidChildError, TooManyChildrenError
from .node import HtmlNode, TextNode

logger = logging.getLogger(__name__)


VIEWPORT_CONTENT = 'width=device-width, initial-scale=1.0, maximum-scale=1.0, user-scalable=no'


def _clean(value: Any) -> str:
    return '' if value is None else str(value).strip()


def _version_token() -> str:
    """Ten hex characters appended to asset URLs to defeat caching."""
    return secrets.token_hex(5)


def _versioned(url: str, key: str) -> str:
    sep = '&' if '?' in url else '?'
    return f"{url}{sep}{key}={_version_token()}"


class HeadChildKind(Enum):
    """The closed set of roles a candidate child can have inside a head.

    Each kind maps to exactly one insertion rule in ``HeadNode``.
    """

    BASE = 'base'
    TITLE = 'title'
    CHARSET_META = 'charset_meta'
    CANONICAL = 'canonical'
    GENERIC_META = 'generic_meta'
    EXTENSION = 'extension'

    @classmethod
    def of(cls, node: HtmlNode) -> HeadChildKind:
        """Classify a node by its tag and its distinguishing attribute."""
        kind = _KIND_BY_TAG.get(node.tag, cls.EXTENSION)
        if kind is cls.GENERIC_META and node.has_attr('charset'):
            return cls.CHARSET_META
        if node.tag == 'link' and _clean(node.get_attr('rel')).lower() == 'canonical':
            return cls.CANONICAL
        return kind

    @property
    def setter(self) -> str | None:
        """Name of the HeadNode method owning this slot, if it is one."""
        return _SLOT_SETTERS.get(self)


_KIND_BY_TAG = {
    'base': HeadChildKind.BASE,
    'title': HeadChildKind.TITLE,
    'meta': HeadChildKind.GENERIC_META,
}

_SLOT_SETTERS = {
    HeadChildKind.BASE: 'set_base',
    HeadChildKind.TITLE: 'set_title',
    HeadChildKind.CHARSET_META: 'set_charset',
    HeadChildKind.CANONICAL: 'set_canonical',
}


class HeadNode(HtmlNode):
    """The ``<head>`` node.

    A new head contains the viewport meta and, when given non-blank values,
    the title, canonical link and base nodes. Slot nodes for blank values
    are created detached and inserted by their setters later.

    Usage:
        >>> head = HeadNode(title='My Page', base='https://example.com/')
        >>> head.set_title('  Other  ')
        True
        >>> head.get_title()
        'Other'
        >>> head.add_child(HtmlNode('title'))
        False

    Attributes:
        child_specs: base and title at most once, plus meta, link, script,
            noscript and comments.
    """

    __slots__ = ('_base', '_title', '_title_text', '_charset', '_canonical')

    child_specs = ('base[:1]', 'title[:1]', 'meta', 'link', 'script', 'noscript', '#comment')

    def __init__(
        self,
        title: str | None = 'Default',
        canonical: str | None = '',
        base: str | None = '',
        raise_on_error: bool = False,
    ) -> None:
        """Initialize the head.

        Args:
            title: Text of the title node.
            canonical: ``href`` of the canonical link.
            base: ``href`` of the base node.
            raise_on_error: If True, rejected insertions raise.
        """
        super().__init__('head', _raise_on_error=raise_on_error)
        self._base = HtmlNode('base')
        self._title = HtmlNode('title')
        self._title_text = TextNode()
        self._title.add_child(self._title_text)
        self._charset = HtmlNode('meta')
        self._canonical = HtmlNode('link', rel='canonical')

        self.set_base(base)
        self.set_title(title)
        self.set_canonical(canonical)
        self.add_meta('viewport', VIEWPORT_CONTENT)

    # ==================== Insertion policy ====================

    def add_child(self, node: HtmlNode) -> bool:
        """Add a metadata child.

        The node is rejected when:
        - its tag is not base, title, meta, link, script, noscript or a comment
        - it is a title or base node (use ``set_title``/``set_base``)
        - it is a meta with a ``charset`` attribute (use ``set_charset``)
        - it is a link with ``rel=canonical`` (use ``set_canonical``)
        - it is a meta whose ``name`` is already present

        Returns:
            True if the node was added.
        """
        if not isinstance(node, HtmlNode):
            return super().add_child(node)
        kind = HeadChildKind.of(node)
        return self._insertion_rules[kind](self, node, kind)

    def _reject_slot_node(self, node: HtmlNode, kind: HeadChildKind) -> bool:
        return self._reject(
            InvalidChildError,
            f"'{node.tag}' is a head slot ({kind.value}); use {kind.setter}()",
        )

    def _add_generic_meta(self, node: HtmlNode, kind: HeadChildKind) -> bool:
        name = _clean(node.get_attr('name'))
        if name and self._find_named_meta(name) is not None:
            return self._reject(
                TooManyChildrenError, f"a meta named '{name}' is already in 'head'"
            )
        return super().add_child(node)

    def _add_extension(self, node: HtmlNode, kind: HeadChildKind) -> bool:
        return super().add_child(node)

    _insertion_rules: dict[HeadChildKind, Callable[[HeadNode, HtmlNode, HeadChildKind], bool]] = {
        HeadChildKind.BASE: _reject_slot_node,
        HeadChildKind.TITLE: _reject_slot_node,
        HeadChildKind.CHARSET_META: _reject_slot_node,
        HeadChildKind.CANONICAL: _reject_slot_node,
        HeadChildKind.GENERIC_META: _add_generic_meta,
        HeadChildKind.EXTENSION: _add_extension,
    }

    # ==================== Slots ====================

    def _set_slot(
        self,
        node: HtmlNode,
        value: Any,
        write: Callable[[str | None], None],
    ) -> bool:
        """Shared logic of the slot setters.

        None removes the slot node if present; blank strings are refused;
        anything else inserts the node if needed and writes the value.
        Presence is checked on the slot node itself, never by tag.
        """
        if value is None:
            if self.remove_child(node) is None:
                return False
            write(None)
            logger.debug("head: %s slot removed", node.tag)
            return True

        value = _clean(value)
        if not value:
            return False
        if not self.has_child(node) and not HtmlNode.add_child(self, node):
            return False
        write(value)
        logger.debug("head: %s slot set to %r", node.tag, value)
        return True

    def _write_href(self, node: HtmlNode) -> Callable[[str | None], None]:
        return lambda value: node.set_attr(href=value)

    def _write_title(self, value: str | None) -> None:
        if not self._title.has_child(self._title_text):
            self._title.add_child(self._title_text)
        self._title_text.set_text(value)

    def _write_charset(self, value: str | None) -> None:
        self._charset.set_attr(charset=value)

    def set_title(self, title: str | None) -> bool:
        """Set the text of the title node.

        Args:
            title: Non-blank text (trimmed). None removes the title node
                from the head and clears its text.

        Returns:
            True if the title was set or removed.
        """
        return self._set_slot(self._title, title, self._write_title)

    def set_base(self, url: str | None) -> bool:
        """Set the ``href`` of the base node. None removes it."""
        return self._set_slot(self._base, url, self._write_href(self._base))

    def set_canonical(self, url: str | None) -> bool:
        """Set the canonical URL. None removes the canonical link."""
        return self._set_slot(self._canonical, url, self._write_href(self._canonical))

    def set_charset(self, charset: str | None) -> bool:
        """Set the document character set (e.g. 'UTF-8'). None removes it."""
        return self._set_slot(self._charset, charset, self._write_charset)

    def get_title(self) -> str:
        """Return the text held by the title node, or an empty string."""
        return self._title.text

    def get_base_url(self) -> str | None:
        return self._base.get_attr('href')

    def get_canonical(self) -> str | None:
        return self._canonical.get_attr('href')

    def get_charset(self) -> str | None:
        return self._charset.get_attr('charset')

    @property
    def title_node(self) -> HtmlNode:
        return self._title

    @property
    def base_node(self) -> HtmlNode:
        return self._base

    @property
    def canonical_node(self) -> HtmlNode:
        return self._canonical

    @property
    def charset_node(self) -> HtmlNode:
        return self._charset

    # ==================== Meta ====================

    def _find_named_meta(self, name: str) -> HtmlNode | None:
        wanted = _clean(name).lower()
        if not wanted:
            return None
        for child in self._children:
            if child.tag == 'meta' and _clean(child.get_attr('name')).lower() == wanted:
                return child
        return None

    def get_meta(self, name: str) -> HtmlNode | None:
        """Return the meta node with the given ``name`` attribute.

        The name 'charset' returns the charset node if it is in the head.
        """
        if _clean(name).lower() == 'charset':
            return self._charset if self.has_child(self._charset) else None
        return self._find_named_meta(name)

    def has_meta(self, name: str) -> bool:
        return self.get_meta(name) is not None

    def add_meta(self, name: str, content: Any, override: bool = False) -> bool:
        """Add a ``<meta name=... content=...>`` node.

        Args:
            name: Value of the ``name`` attribute. Trimmed and lower-cased,
                must not be blank. 'charset' sets the charset slot.
            content: Value of the ``content`` attribute.
            override: If a meta with this name exists, replace its content.

        Returns:
            True if a meta was added or updated.
        """
        name = _clean(name).lower()
        if not name:
            return False
        content = '' if content is None else str(content)

        if name == 'charset':
            if self.has_meta(name) and not override:
                return False
            return self.set_charset(content)

        meta = self._find_named_meta(name)
        if meta is not None:
            if not override:
                return False
            meta.set_attr(content=content)
            return True
        return self.add_child(HtmlNode('meta', name=name, content=content))

    # ==================== Links and scripts ====================

    def _copy_extra_attrs(self, node: HtmlNode, attrs: dict[str, Any] | None, reserved: tuple[str, ...]) -> None:
        if not attrs:
            return
        node.set_attr({k: v for k, v in attrs.items() if _clean(k).lower() not in reserved})

    def add_css(self, href: str, attrs: dict[str, Any] | None = None, cache_bust: bool = True) -> bool:
        """Add a stylesheet link.

        Args:
            href: Location of the CSS file. Must not be blank.
            attrs: Extra attributes; ``rel`` and ``href`` are ignored.
            cache_bust: Append ``?cv=<token>`` to the URL.
        """
        href = _clean(href)
        if not href:
            return False
        link = HtmlNode('link', rel='stylesheet')
        self._copy_extra_attrs(link, attrs, ('rel', 'href'))
        link.set_attr(href=_versioned(href, 'cv') if cache_bust else href)
        return self.add_child(link)

    def add_js(self, src: str, attrs: dict[str, Any] | None = None, cache_bust: bool = True) -> bool:
        """Add a ``text/javascript`` script; ``?jv=<token>`` when cache_bust."""
        src = _clean(src)
        if not src:
            return False
        script = HtmlNode('script', type='text/javascript')
        self._copy_extra_attrs(script, attrs, ('type', 'src'))
        script.set_attr(src=_versioned(src, 'jv') if cache_bust else src)
        return self.add_child(script)

    def add_link(self, rel: str, href: str, attrs: dict[str, Any] | None = None) -> bool:
        """Add a generic link. ``rel='canonical'`` is refused."""
        rel = _clean(rel).lower()
        href = _clean(href)
        if not rel or not href or rel == 'canonical':
            return False
        link = HtmlNode('link', rel=rel, href=href)
        self._copy_extra_attrs(link, attrs, ('rel', 'href'))
        return self.add_child(link)

    def add_alternate(self, url: str, lang: str, attrs: dict[str, Any] | None = None) -> bool:
        """Add a ``rel=alternate`` link for a translation of the page."""
        url = _clean(url)
        lang = _clean(lang)
        if not url or not lang:
            return False
        link = HtmlNode('link', rel='alternate', hreflang=lang, href=url)
        self._copy_extra_attrs(link, attrs, ('rel', 'hreflang', 'href'))
        return self.add_child(link)

    # ==================== Filtered views ====================

    def _filter(self, tag: str, **attr: str) -> list[HtmlNode]:
        return [
            child for child in self._children
            if child.tag == tag
            and all(_clean(child.get_attr(k)).lower() == v for k, v in attr.items())
        ]

    def get_stylesheets(self) -> list[HtmlNode]:
        """Return the ``<link rel="stylesheet">`` children."""
        return self._filter('link', rel='stylesheet')

    def get_scripts(self) -> list[HtmlNode]:
        """Return the ``<script type="text/javascript">`` children."""
        return self._filter('script', type='text/javascript')

    def get_meta_nodes(self) -> list[HtmlNode]:
        return self._filter('meta')

    def get_alternates(self) -> list[HtmlNode]:
        return self._filter('link', rel='alternate')
