# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""HtmlNode exceptions.

Mutating operations return False on rejection. These exceptions are raised
only by nodes created with ``raise_on_error=True``, and for invalid tag
names at construction time.
"""

from __future__ import annotations


class HtmlNodeError(Exception):
    """Base exception for HtmlNode errors."""

    pass


class InvalidNodeNameError(HtmlNodeError):
    """Raised when a node is created with an invalid tag name."""

    pass


class InvalidChildError(HtmlNodeError):
    """Raised when a child is not allowed inside a node."""

    pass


class TooManyChildrenError(HtmlNodeError):
    """Raised when a child tag exceeds its maximum allowed count."""

    pass


class InvalidParentError(HtmlNodeError):
    """Raised when a node cannot hold the given child at all.

    This covers void elements, text and comment nodes, and insertions
    that would create a cycle.
    """

    pass
