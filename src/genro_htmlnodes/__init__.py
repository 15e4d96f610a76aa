# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-HtmlNodes - An object model for building HTML documents.

A lightweight, zero-dependency library providing a generic markup tree
(HtmlNode) and constrained containers for head, lists and tables that keep
their children valid at every call.
"""

__version__ = "0.1.0"

from .exceptions import (
    HtmlNodeError,
    InvalidChildError,
    InvalidNodeNameError,
    InvalidParentError,
    TooManyChildrenError,
)
from .grammar import parse_child_specs, parse_tag_spec
from .head import HeadChildKind, HeadNode
from .lists import HtmlList, ListItem
from .node import VOID_TAGS, CommentNode, HtmlNode, TextNode
from .table import ColumnSource, HtmlTable, TableCell, TableRow

__all__ = [
    # Core classes
    "HtmlNode",
    "TextNode",
    "CommentNode",
    "VOID_TAGS",
    # Containers
    "HeadNode",
    "HeadChildKind",
    "HtmlList",
    "ListItem",
    "HtmlTable",
    "TableRow",
    "TableCell",
    "ColumnSource",
    # Grammar
    "parse_tag_spec",
    "parse_child_specs",
    # Exceptions
    "HtmlNodeError",
    "InvalidNodeNameError",
    "InvalidChildError",
    "TooManyChildrenError",
    "InvalidParentError",
]
