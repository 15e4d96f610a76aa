# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""HtmlList and ListItem - ``<ul>``/``<ol>`` with mandatory ``<li>`` wrappers."""

from __future__ import annotations

from typing import Any, Iterable

from .exceptions import InvalidChildError
from .node import HtmlNode


class ListItem(HtmlNode):
    """A ``<li>`` node.

    Args:
        content: Optional HtmlNode (becomes the only child) or text.
        escape: Escape the text when content is not a node.
    """

    __slots__ = ()

    def __init__(self, content: Any = None, escape: bool = True, raise_on_error: bool = False) -> None:
        super().__init__('li', _raise_on_error=raise_on_error)
        if content is not None:
            self.add_content(content, escape=escape)


class HtmlList(HtmlNode):
    """An ordered or unordered list.

    Every child is a ListItem. Content that is not a ListItem is wrapped in a
    new one, so the list never holds unwrapped nodes or text.

    Usage:
        >>> ul = HtmlList(items=['One', 'Two'])
        >>> ul.add_list_item(HtmlNode('a', href='/three'))
        True
        >>> [li.tag for li in ul]
        ['li', 'li', 'li']
        >>> HtmlList('OL').tag
        'ol'
    """

    __slots__ = ()

    child_specs = ('li',)

    def __init__(
        self,
        list_type: str = 'ul',
        items: Iterable[Any] = (),
        escape: bool = True,
        raise_on_error: bool = False,
    ) -> None:
        """Initialize the list.

        Args:
            list_type: 'ol' for an ordered list, anything else gives 'ul'.
            items: Initial items, see ``add_list_item()``.
            escape: Escape text items.
            raise_on_error: If True, rejected insertions raise.
        """
        tag = 'ol' if str(list_type).strip().lower() == 'ol' else 'ul'
        super().__init__(tag, _raise_on_error=raise_on_error)
        self.add_list_items(items, escape=escape)

    def add_child(self, content: Any) -> bool:
        """Add a child, wrapping it in a ListItem unless it is one."""
        return self.add_list_item(content)

    def add_list_item(self, content: Any, escape: bool = True) -> bool:
        """Add one item to the list.

        Args:
            content: A ListItem (added as is), an HtmlNode (wrapped in a new
                ListItem) or text (becomes the text of a new ListItem).
            escape: Escape the text when content is text.

        Returns:
            True if exactly one ListItem was added.
        """
        if isinstance(content, ListItem):
            return super().add_child(content)
        if self._would_cycle(content):
            return self._reject_cycle(content)

        item = ListItem(raise_on_error=self._raise_on_error)
        if not item.add_content(content, escape=escape):
            return False
        return super().add_child(item)

    def add_list_items(self, items: Iterable[Any], escape: bool = True) -> bool:
        """Add several items. Returns True if all of them were added."""
        results = [self.add_list_item(item, escape=escape) for item in items]
        return all(results)

    def add_sub_list(self, sub_list: HtmlList) -> bool:
        """Add a nested list inside a new ListItem."""
        if not isinstance(sub_list, HtmlList):
            return self._reject(
                InvalidChildError, f"{type(sub_list).__name__!r} is not an HtmlList"
            )
        return self.add_list_item(sub_list)

    def get_child(self, index: int) -> ListItem | None:
        child = super().get_child(index)
        return child if isinstance(child, ListItem) else None
