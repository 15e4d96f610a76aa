# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Child rules for node classes.

A node class lists the tags it accepts in ``child_specs``. Each spec is a
tag name with an optional cardinality in slice syntax::

    class HeadNode(HtmlNode):
        child_specs = ('base[:1]', 'title[:1]', 'meta', 'link', '#comment')

The specs are parsed once, when the class is created.
"""

from __future__ import annotations

import re
from typing import Iterable


# Pattern for tag with optional cardinality: tag, tag[n], tag[n:], tag[:m], tag[n:m]
_TAG_PATTERN = re.compile(r'^(#?[a-zA-Z][a-zA-Z0-9_-]*)\s*(?:\[(\d*)(:?)(\d*)\])?$')


def parse_tag_spec(spec: str) -> tuple[str, int, int | None]:
    """Parse a tag specification with optional cardinality.

    Args:
        spec: Tag spec like 'li', 'title[1]', 'td[1:]', 'base[:1]', 'tr[1:3]'

    Returns:
        Tuple of (tag_name, min_count, max_count). Tag names are lower-cased.

    Raises:
        ValueError: If spec format is invalid.

    Examples:
        >>> parse_tag_spec('li')
        ('li', 0, None)
        >>> parse_tag_spec('title[1]')
        ('title', 1, 1)
        >>> parse_tag_spec('td[2:]')
        ('td', 2, None)
        >>> parse_tag_spec('base[:1]')
        ('base', 0, 1)
        >>> parse_tag_spec('#COMMENT')
        ('#comment', 0, None)
    """
    match = _TAG_PATTERN.match(spec.strip())
    if not match:
        raise ValueError(f"Invalid tag specification: '{spec}'")

    tag = match.group(1).lower()
    min_str, colon, max_str = match.group(2), match.group(3), match.group(4)

    # No brackets: unlimited (0..inf)
    if min_str is None:
        return tag, 0, None

    if not colon:
        # tag[n] - exactly n
        n = int(min_str) if min_str else 0
        return tag, n, n

    min_count = int(min_str) if min_str else 0
    max_count = int(max_str) if max_str else None
    if max_count is not None and max_count < min_count:
        raise ValueError(f"Invalid cardinality in '{spec}': max < min")

    return tag, min_count, max_count


def parse_child_specs(specs: Iterable[str]) -> dict[str, tuple[int, int | None]]:
    """Parse a sequence of tag specs into a ``{tag: (min, max)}`` dict."""
    parsed: dict[str, tuple[int, int | None]] = {}
    for spec in specs:
        tag, min_c, max_c = parse_tag_spec(spec)
        parsed[tag] = (min_c, max_c)
    return parsed
