# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tables - HtmlTable, TableRow and TableCell.

A row placed in a table is *managed*: ``set_data()`` sizes it to the
table's column count, padding with placeholder cells or dropping extra
values. A row with no table parent takes its data as given.

The row finds its column count through ``parent_column_count()``, which
looks for the ``ColumnSource`` capability on its (weakly referenced)
parent instead of depending on HtmlTable.

Example:
    >>> table = HtmlTable(cols=4)
    >>> row = table.add_row(['a', 'b'])
    >>> [cell.text for cell in row]
    ['a', 'b', '-', '-']
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol, runtime_checkable

from .exceptions import InvalidChildError
from .node import HtmlNode

logger = logging.getLogger(__name__)


PLACEHOLDER = '-'
PLACEHOLDER_STYLE = 'text-align:center'
CELL_TYPES = ('td', 'th')


@runtime_checkable
class ColumnSource(Protocol):
    """Anything that declares a number of columns for its rows."""

    @property
    def column_count(self) -> int: ...


class TableCell(HtmlNode):
    """A ``<td>`` or ``<th>`` node.

    Args:
        cell_type: 'td' or 'th'. Anything else gives 'td'.
        content: Optional HtmlNode (becomes the only child) or text.
        escape: Escape the text when content is not a node.
    """

    __slots__ = ()

    def __init__(
        self,
        cell_type: str = 'td',
        content: Any = None,
        escape: bool = False,
        raise_on_error: bool = False,
    ) -> None:
        tag = str(cell_type).strip().lower()
        super().__init__(tag if tag in CELL_TYPES else 'td', _raise_on_error=raise_on_error)
        if content is not None:
            self.add_content(content, escape=escape)


class TableRow(HtmlNode):
    """A ``<tr>`` node holding only TableCell children."""

    __slots__ = ()

    child_specs = CELL_TYPES

    def __init__(self, raise_on_error: bool = False) -> None:
        super().__init__('tr', _raise_on_error=raise_on_error)

    def add_child(self, node: TableCell | str) -> bool:
        """Add a TableCell, or a new empty cell given 'td' or 'th'."""
        if isinstance(node, TableCell):
            return super().add_child(node)
        if isinstance(node, str) and node.strip().lower() in CELL_TYPES:
            return super().add_child(TableCell(node, raise_on_error=self._raise_on_error))
        kind = node.tag if isinstance(node, HtmlNode) else type(node).__name__
        return self._reject(InvalidChildError, f"'tr' accepts only table cells, not {kind!r}")

    def add_cell(
        self,
        content: Any,
        cell_type: str = 'td',
        escape: bool = False,
        attrs: dict[str, Any] | None = None,
    ) -> bool:
        """Add a cell to the row.

        Args:
            content: A TableCell (added as is), an HtmlNode (wrapped in a new
                cell) or text (becomes the text of a new cell).
            cell_type: 'td' or 'th' for new cells.
            escape: Escape the text when content is text.
            attrs: Attributes set on the cell once it is added.

        Returns:
            True if the cell was added.
        """
        if isinstance(content, TableCell):
            cell = content
        elif self._would_cycle(content):
            return self._reject_cycle(content)
        else:
            cell = TableCell(cell_type, raise_on_error=self._raise_on_error)
            if content is not None and not cell.add_content(content, escape=escape):
                return False
        if not self.add_child(cell):
            return False
        if attrs:
            cell.set_attr(attrs)
        return True

    def get_cell(self, index: int) -> TableCell | None:
        child = self.get_child(index)
        return child if isinstance(child, TableCell) else None

    def parent_column_count(self) -> int | None:
        """Column count declared by the parent, or None if it has none."""
        parent = self.parent
        if isinstance(parent, ColumnSource):
            return parent.column_count
        return None

    def set_data(self, data: Iterable[Any], header: bool = False) -> None:
        """Replace the row's cells with the given values.

        Without a column source every value becomes one cell. Inside a
        table, cells are added until the row has exactly as many cells as
        the table has columns: values are taken in order, placeholder cells
        ('-', centered) fill the rest and values past the last column are
        dropped.

        Args:
            data: Values (text or HtmlNode/TableCell) in column order.
            header: Use 'th' cells instead of 'td'.
        """
        cell_type = 'th' if header else 'td'
        values = list(data)
        columns = self.parent_column_count()
        self.remove_all_children()

        if columns is None:
            for value in values:
                self.add_cell(value, cell_type)
            return

        if len(values) > columns:
            logger.debug("tr: %d values dropped to fit %d columns", len(values) - columns, columns)
        index = 0
        while len(self) < columns:
            if index < len(values):
                self.add_cell(values[index], cell_type)
                index += 1
            else:
                self.add_cell(PLACEHOLDER, cell_type, escape=True, attrs={'style': PLACEHOLDER_STYLE})


class HtmlTable(HtmlNode):
    """A ``<table>`` with a fixed number of columns.

    Usage:
        >>> table = HtmlTable(rows=2, cols=3)
        >>> table.set_value(0, 1, 'x')
        True
        >>> table.get_cell(0, 1).text
        'x'
        >>> table.get_cell(1, 0).text
        '-'
    """

    __slots__ = ('_cols',)

    child_specs = ('tr',)

    def __init__(self, rows: int = 0, cols: int = 0, raise_on_error: bool = False) -> None:
        """Initialize the table.

        Args:
            rows: Number of rows to create, filled with placeholder cells.
            cols: Number of columns every managed row is sized to.
            raise_on_error: If True, rejected insertions raise.
        """
        super().__init__('table', _raise_on_error=raise_on_error)
        self._cols = max(0, int(cols))
        for _ in range(max(0, int(rows))):
            self.add_row()

    @property
    def column_count(self) -> int:
        return self._cols

    @property
    def row_count(self) -> int:
        return len(self)

    def add_child(self, node: TableRow) -> bool:
        """Add a TableRow. Its cells are left as they are."""
        if not isinstance(node, TableRow):
            kind = node.tag if isinstance(node, HtmlNode) else type(node).__name__
            return self._reject(InvalidChildError, f"'table' accepts only rows, not {kind!r}")
        return super().add_child(node)

    def add_row(self, data: Iterable[Any] = (), header: bool = False) -> TableRow:
        """Append a managed row holding ``data``."""
        row = TableRow(raise_on_error=self._raise_on_error)
        self.add_child(row)
        row.set_data(data, header=header)
        return row

    def get_row(self, index: int) -> TableRow | None:
        child = self.get_child(index)
        return child if isinstance(child, TableRow) else None

    def get_cell(self, row: int, col: int) -> TableCell | None:
        table_row = self.get_row(row)
        return table_row.get_cell(col) if table_row is not None else None

    def set_value(self, row: int, col: int, value: Any, escape: bool = False) -> bool:
        """Replace the content of one cell.

        A rejected value leaves the cell unchanged. Replacing a placeholder
        also drops its centering style.

        Returns:
            False if the cell does not exist or the value was rejected.
        """
        cell = self.get_cell(row, col)
        if cell is None:
            return False
        if cell._would_cycle(value):
            return cell._reject_cycle(value)
        was_placeholder = (
            cell.text == PLACEHOLDER and cell.get_attr('style') == PLACEHOLDER_STYLE
        )
        cell.remove_all_children()
        if value is not None and not cell.add_content(value, escape=escape):
            return False
        if was_placeholder:
            cell.remove_attr('style')
        return True

    def check(self, _path: str = '') -> list[str]:
        """Check child rules and that every row has ``column_count`` cells."""
        errors = super().check(_path)
        for label, row in self._labeled_children():
            if len(row) != self._cols:
                where = f"{_path}.{label}" if _path else label
                errors.append(
                    f"'{where}' has {len(row)} cells, but the table has {self._cols} columns"
                )
        return errors
