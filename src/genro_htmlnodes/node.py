# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""HtmlNode - generic markup tree node.

This module provides the base node of the library. An HtmlNode holds a tag
name, an ordered attribute mapping and an ordered list of children. Child
insertion goes through ``add_child()``, which enforces the per-class child
rules declared in ``child_specs`` (see ``grammar``).

Key Features:
    - **Permissive mutation**: rejected operations return False and leave
      the node untouched. Pass ``raise_on_error=True`` to get exceptions.
    - **Case-insensitive attributes**: names are trimmed and lower-cased.
    - **Weak parent link**: children reference their parent weakly, so a
      tree never holds reference cycles.
    - **Structural check**: ``check()`` validates a whole subtree.

Example:
    >>> div = HtmlNode('div', class_='container')
    >>> div.add_child(HtmlNode('p'))
    True
    >>> div.add_child(div)
    False
    >>> div.get_attr('class')
    'container'
"""

from __future__ import annotations

import logging
import re
import weakref
from html import escape as _escape
from typing import Any, ClassVar, Iterator

from .exceptions import (
    InvalidChildError,
    InvalidNodeNameError,
    InvalidParentError,
    TooManyChildrenError,
)
from .grammar import parse_child_specs

logger = logging.getLogger(__name__)


TEXT_TAG = '#text'
COMMENT_TAG = '#comment'

VOID_TAGS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
})

_TAG_NAME = re.compile(r'^[a-z][a-z0-9]*(-[a-z0-9]+)*$')
_ATTR_NAME = re.compile(r'^[^\s"\'>/=]+$')


def _normalize_tag(tag: str) -> str:
    if not isinstance(tag, str):
        raise InvalidNodeNameError(f"Tag name must be a string, not {type(tag).__name__}")
    name = tag.strip().lower()
    if name in (TEXT_TAG, COMMENT_TAG) or _TAG_NAME.match(name):
        return name
    raise InvalidNodeNameError(f"Invalid tag name: '{tag}'")


def _normalize_attr_name(name: Any) -> str | None:
    if not isinstance(name, str):
        return None
    name = name.strip().lower()
    if not _ATTR_NAME.match(name):
        return None
    return name


def _keyword_attr_name(name: str) -> str:
    """Map a Python keyword argument to an attribute name.

    A trailing underscore is dropped and inner underscores become dashes:
    ``class_`` -> ``class``, ``http_equiv`` -> ``http-equiv``.
    """
    return name.rstrip('_').replace('_', '-')


class HtmlNode:
    """A node in an HTML tree.

    Each node has:
    - tag: The lower-cased tag name ('div', 'meta', '#text', ...)
    - attr: Ordered mapping of attribute name to value
    - children: Ordered list of child nodes
    - parent: Weak reference to the containing node

    Subclasses restrict their children through ``child_specs``::

        class Menu(HtmlNode):
            child_specs = ('item[1:]', 'separator')

    ``None`` (the default) allows any child, an empty tuple allows none.

    Example:
        >>> node = HtmlNode('meta', name='viewport', content='width=device-width')
        >>> node.tag
        'meta'
        >>> node.get_attr('name')
        'viewport'
    """

    __slots__ = ('_tag', '_attr', '_children', '_parent', '_raise_on_error', '__weakref__')

    child_specs: ClassVar[tuple[str, ...] | None] = None
    _valid_children: ClassVar[frozenset[str] | None] = None
    _child_cardinality: ClassVar[dict[str, tuple[int, int | None]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Parse ``child_specs`` declared on the subclass."""
        super().__init_subclass__(**kwargs)
        if 'child_specs' not in cls.__dict__:
            return
        if cls.child_specs is None:
            cls._valid_children = None
            cls._child_cardinality = {}
        else:
            parsed = parse_child_specs(cls.child_specs)
            cls._valid_children = frozenset(parsed)
            cls._child_cardinality = parsed

    def __init__(
        self,
        tag: str,
        _attr: dict[str, Any] | None = None,
        _raise_on_error: bool = False,
        **attr: Any,
    ) -> None:
        """Initialize an HtmlNode.

        Args:
            tag: The tag name. Trimmed and lower-cased.
            _attr: Optional dictionary of attributes, names used as given.
            _raise_on_error: If True, rejected insertions raise instead of
                returning False.
            **attr: Attributes as keyword arguments (``class_='x'``,
                ``http_equiv='refresh'``).

        Raises:
            InvalidNodeNameError: If the tag name is not a valid element name.
        """
        self._tag = _normalize_tag(tag)
        self._attr: dict[str, str] = {}
        self._children: list[HtmlNode] = []
        self._parent: weakref.ref[HtmlNode] | None = None
        self._raise_on_error = _raise_on_error
        if _attr or attr:
            self.set_attr(_attr, **attr)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._tag!r}, attr={self._attr!r}, children={len(self._children)})"

    # ==================== Properties ====================

    @property
    def tag(self) -> str:
        """The node's tag name. Read-only after construction."""
        return self._tag

    @property
    def attr(self) -> dict[str, str]:
        """A copy of the node's attributes."""
        return dict(self._attr)

    @property
    def parent(self) -> HtmlNode | None:
        """The node containing this one, or None for a root or detached node."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def raise_on_error(self) -> bool:
        return self._raise_on_error

    @property
    def is_void(self) -> bool:
        """True for void elements (br, meta, link, ...)."""
        return self._tag in VOID_TAGS

    @property
    def accepts_children(self) -> bool:
        """False for void elements, text and comment nodes."""
        return not (self._tag in VOID_TAGS or self._tag.startswith('#'))

    @property
    def text(self) -> str:
        """Concatenated text of the direct text children."""
        return ''.join(c.text for c in self._children if isinstance(c, TextNode))

    # ==================== Attributes ====================

    def get_attr(self, name: str | None = None, default: Any = None) -> Any:
        """Get attribute value or all attributes.

        Args:
            name: Attribute name (case-insensitive). If None, returns a copy
                of all attributes.
            default: Default value if attribute not found.
        """
        if name is None:
            return dict(self._attr)
        key = _normalize_attr_name(name)
        if key is None:
            return default
        return self._attr.get(key, default)

    def has_attr(self, name: str) -> bool:
        key = _normalize_attr_name(name)
        return key is not None and key in self._attr

    def set_attr(self, _attr: dict[str, Any] | None = None, **kwargs: Any) -> bool:
        """Set attributes on the node.

        Values are stored as strings. ``True`` sets a boolean attribute
        (empty value); ``None`` and ``False`` remove the attribute.

        Args:
            _attr: Dictionary of attributes to set, names used as given.
            **kwargs: Additional attributes as keyword arguments.

        Returns:
            True if every name was valid. Invalid names are skipped.
        """
        items = list(_attr.items()) if _attr else []
        items.extend((_keyword_attr_name(k), v) for k, v in kwargs.items())
        ok = True
        for name, value in items:
            key = _normalize_attr_name(name)
            if key is None:
                logger.debug("%s: invalid attribute name %r ignored", self._tag, name)
                ok = False
                continue
            if value is None or value is False:
                self._attr.pop(key, None)
            elif value is True:
                self._attr[key] = ''
            else:
                self._attr[key] = str(value)
        return ok

    def remove_attr(self, name: str) -> bool:
        """Remove an attribute. Returns True if it was present."""
        key = _normalize_attr_name(name)
        if key is None or key not in self._attr:
            return False
        del self._attr[key]
        return True

    # ==================== Children ====================

    def __len__(self) -> int:
        """Return the number of direct children."""
        return len(self._children)

    def __iter__(self) -> Iterator[HtmlNode]:
        """Iterate over direct children in insertion order."""
        return iter(self._children)

    def __contains__(self, node: object) -> bool:
        """Identity-based membership, see ``has_child()``."""
        return self.has_child(node)

    def has_child(self, node: object) -> bool:
        """True if this exact node instance is a direct child."""
        return any(child is node for child in self._children)

    def nodes(self) -> list[HtmlNode]:
        """Return a snapshot list of the direct children."""
        return list(self._children)

    def get_child(self, index: int) -> HtmlNode | None:
        """Return the child at ``index`` (0-based), or None if out of range."""
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def count_children(self, tag: str) -> int:
        """Return how many direct children have the given tag."""
        tag = tag.lower()
        return sum(1 for child in self._children if child._tag == tag)

    def add_child(self, node: HtmlNode) -> bool:
        """Append a child node.

        The node is rejected (False, no change) when it is not an HtmlNode,
        when this node cannot have children, when the insertion would create
        a cycle, when the node is already a child, or when the class child
        rules do not allow its tag or its count.

        A node attached to another parent is moved.

        Returns:
            True if the node was appended.

        Raises:
            InvalidChildError, TooManyChildrenError, InvalidParentError:
                Only if the node was created with ``raise_on_error=True``.
        """
        if not isinstance(node, HtmlNode):
            return self._reject(
                InvalidChildError, f"{type(node).__name__!r} is not an HtmlNode"
            )
        if not self.accepts_children:
            return self._reject(InvalidParentError, f"'{self._tag}' cannot have children")
        if self._would_cycle(node):
            return self._reject_cycle(node)
        if self.has_child(node):
            return self._reject(
                InvalidChildError, f"'{node._tag}' is already a child of '{self._tag}'"
            )

        valid = self._valid_children
        if valid is not None and node._tag not in valid:
            if valid:
                return self._reject(
                    InvalidChildError,
                    f"'{node._tag}' is not a valid child of '{self._tag}'. "
                    f"Valid children: {', '.join(sorted(valid))}",
                )
            return self._reject(
                InvalidChildError,
                f"'{node._tag}' is not a valid child of '{self._tag}'. "
                f"'{self._tag}' cannot have children",
            )

        _min_count, max_count = self._child_cardinality.get(node._tag, (0, None))
        if max_count is not None and self.count_children(node._tag) >= max_count:
            return self._reject(
                TooManyChildrenError,
                f"'{self._tag}' allows at most {max_count} '{node._tag}'",
            )

        self._append(node)
        return True

    def add_text_node(self, text: str, escape: bool = True) -> bool:
        """Append a text child. See ``TextNode`` for escaping."""
        return self.add_child(TextNode(text, escape=escape))

    def add_comment(self, text: str) -> bool:
        """Append a comment child."""
        return self.add_child(CommentNode(text))

    def add_content(self, content: Any, escape: bool = False) -> bool:
        """Append a node, or the text of anything else.

        Args:
            content: An HtmlNode (appended as child) or a value whose string
                form becomes a text child.
            escape: Escape the text (only when content is not a node).
        """
        if isinstance(content, HtmlNode):
            return self.add_child(content)
        return self.add_text_node('' if content is None else str(content), escape=escape)

    def remove_child(self, node: HtmlNode) -> HtmlNode | None:
        """Remove a direct child by identity.

        Returns:
            The removed node, or None if it was not a child.
        """
        for i, child in enumerate(self._children):
            if child is node:
                del self._children[i]
                child._parent = None
                return child
        return None

    def remove_all_children(self) -> None:
        """Detach every child."""
        for child in self._children:
            child._parent = None
        self._children.clear()

    def _append(self, node: HtmlNode) -> None:
        """Append without validation, detaching the node from its old parent."""
        old_parent = node.parent
        if old_parent is not None:
            old_parent.remove_child(node)
        node._parent = weakref.ref(self)
        self._children.append(node)

    def _is_ancestor_of(self, node: HtmlNode) -> bool:
        current = node.parent
        while current is not None:
            if current is self:
                return True
            current = current.parent
        return False

    def _would_cycle(self, content: Any) -> bool:
        """True if content is this node or one of its ancestors."""
        return isinstance(content, HtmlNode) and (content is self or content._is_ancestor_of(self))

    def _reject_cycle(self, node: HtmlNode) -> bool:
        return self._reject(
            InvalidParentError,
            f"adding '{node._tag}' to '{self._tag}' would create a cycle",
        )

    def _reject(self, exc_class: type[Exception], message: str) -> bool:
        """Log a rejected mutation; raise it in strict mode, else return False."""
        logger.debug("%s: %s", self._tag, message)
        if self._raise_on_error:
            raise exc_class(message)
        return False

    # ==================== Traversal ====================

    def _labeled_children(self) -> Iterator[tuple[str, HtmlNode]]:
        """Yield (label, child) pairs, labels following the tag_N pattern."""
        counters: dict[str, int] = {}
        for child in self._children:
            n = counters.get(child._tag, 0)
            counters[child._tag] = n + 1
            yield f"{child._tag}_{n}", child

    def walk(self, _prefix: str = '') -> Iterator[tuple[str, HtmlNode]]:
        """Walk the subtree depth first.

        Yields:
            Tuples of (path, node), where path is a dotted sequence of
            ``tag_N`` labels relative to this node.

        Example:
            >>> for path, node in head.walk():
            ...     print(path, node.tag)
            title_0 title
            title_0.#text_0 #text
        """
        for label, child in self._labeled_children():
            path = f"{_prefix}.{label}" if _prefix else label
            yield path, child
            yield from child.walk(path)

    def check(self, _path: str = '') -> list[str]:
        """Check the subtree against each node's child rules.

        Checks the rules declared through ``child_specs``:
        - valid children: which tags can be children of this node
        - cardinality: per-tag min/max constraints

        Returns:
            List of error messages (empty if valid).
        """
        errors: list[str] = []
        valid_children = self._valid_children
        where = _path or self._tag

        child_counts: dict[str, int] = {}
        for label, child in self._labeled_children():
            child_counts[child._tag] = child_counts.get(child._tag, 0) + 1
            node_path = f"{_path}.{label}" if _path else label

            if valid_children is not None and child._tag not in valid_children:
                errors.append(f"'{child._tag}' is not a valid child of '{where}'")

            errors.extend(child.check(node_path))

        for tag, (min_count, max_count) in self._child_cardinality.items():
            actual = child_counts.get(tag, 0)
            if min_count > 0 and actual < min_count:
                errors.append(
                    f"'{where}' requires at least {min_count} '{tag}', but has {actual}"
                )
            if max_count is not None and actual > max_count:
                errors.append(
                    f"'{where}' allows at most {max_count} '{tag}', but has {actual}"
                )

        return errors


class _CharacterData(HtmlNode):
    """Base for leaf nodes that carry only text."""

    __slots__ = ('_text',)

    child_specs = ()
    node_tag: ClassVar[str] = TEXT_TAG

    def __init__(self, text: str = '', escape: bool = False) -> None:
        super().__init__(self.node_tag)
        self._text = ''
        self.set_text(text, escape=escape)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str | None, escape: bool = False) -> None:
        """Replace the text.

        Args:
            text: The new text. None clears it.
            escape: Replace ``&``, ``<`` and ``>`` with HTML entities.
        """
        text = '' if text is None else str(text)
        self._text = _escape(text, quote=False) if escape else text


class TextNode(_CharacterData):
    """A text child.

    Example:
        >>> TextNode('a < b', escape=True).text
        'a &lt; b'
    """

    __slots__ = ()
    node_tag = TEXT_TAG


class CommentNode(_CharacterData):
    """A comment child (tag ``#comment``)."""

    __slots__ = ()
    node_tag = COMMENT_TAG
