"""
Table layout for writing item sequences as header and data rows.

This module contains the layout resolver shared by both generation modes:
- Header row emission for plain, multiple and paired column mappers
- Data row emission with identical column cursor arithmetic
- Worksheet generation for new worksheets in a workbook
"""

import logging
import time
from collections.abc import Iterable, Sequence
from typing import Any

from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .xlsx_columns import (
    AnyColumnMapper,
    ColumnMapper,
    MultipleColumnMapper,
    TwoColumnsMapper,
    get_total_columns,
    sort_mappers,
)
from .xlsx_common import (
    CancellationToken,
    XLSXCellWriter,
    XLSXGeneratorConfig,
    XLSXSerializationError,
    auto_adjust_columns,
)

logger = logging.getLogger(__name__)


def _value_at(values: list[Any], index: int) -> Any:
    """Value at index, or None when the sequence is too short."""
    if index < len(values):
        return values[index]
    return None


def _materialize(values: Iterable[Any] | None) -> list[Any]:
    if values is None:
        return []
    return list(values)


class XLSXTableFormatter:
    """Lays out column mappers and items as a table on a worksheet."""

    def __init__(self, config: XLSXGeneratorConfig | None = None):
        self.config = config or XLSXGeneratorConfig()
        self.cell_writer = XLSXCellWriter()

    def layout(
        self,
        worksheet: Worksheet,
        mappers: Iterable[AnyColumnMapper],
        items: Iterable[Any],
        start_row: int,
        start_column: int,
        include_headers: bool,
        cancellation: CancellationToken | None = None,
    ) -> int:
        """Write optional headers and one row per item; return number of rows written.

        Headers go to start_row. Data starts at start_row + 1 if headers were
        written, else at start_row. Header and data rows walk the mappers with
        the same column cursor arithmetic so columns always line up.
        """
        cancellation = cancellation or CancellationToken.none()
        sorted_mappers = sort_mappers(mappers)

        if include_headers:
            self._add_headers(
                worksheet, sorted_mappers, start_row, start_column, cancellation
            )

        top_gap = 1 if include_headers else 0
        rows_written = 0
        for row_offset, item in enumerate(items):
            cancellation.raise_if_cancellation_requested()
            self._write_data_row(
                worksheet,
                sorted_mappers,
                item,
                start_row + top_gap + row_offset,
                start_column,
                cancellation,
            )
            rows_written += 1

        return rows_written

    def _add_headers(
        self,
        worksheet: Worksheet,
        mappers: Sequence[AnyColumnMapper],
        row: int,
        start_column: int,
        cancellation: CancellationToken,
    ) -> None:
        """Add column headers."""
        bold = self.config.header_bold
        column = start_column
        for mapper in mappers:
            cancellation.raise_if_cancellation_requested()

            if isinstance(mapper, TwoColumnsMapper):
                for i in range(mapper.total_columns):
                    cancellation.raise_if_cancellation_requested()
                    self.cell_writer.write_header(
                        worksheet.cell(row=row, column=column),
                        mapper.header_caption(i),
                        bold,
                    )
                    column += 1
                    if mapper.show_second_column:
                        self.cell_writer.write_header(
                            worksheet.cell(row=row, column=column),
                            mapper.second_header_caption(i),
                            bold,
                        )
                        column += 1
            elif isinstance(mapper, MultipleColumnMapper):
                for i in range(mapper.total_columns):
                    cancellation.raise_if_cancellation_requested()
                    self.cell_writer.write_header(
                        worksheet.cell(row=row, column=column),
                        mapper.header_caption(i),
                        bold,
                    )
                    column += 1
            elif isinstance(mapper, ColumnMapper):
                self.cell_writer.write_header(
                    worksheet.cell(row=row, column=column), mapper.caption, bold
                )
                column += 1
            else:
                msg = f"Unsupported column mapper type: {type(mapper).__name__}"
                raise TypeError(msg)

    def _write_data_row(
        self,
        worksheet: Worksheet,
        mappers: Sequence[AnyColumnMapper],
        item: Any,
        row: int,
        start_column: int,
        cancellation: CancellationToken,
    ) -> None:
        """Write one item across all mappers."""
        column = start_column
        for mapper in mappers:
            cancellation.raise_if_cancellation_requested()

            if isinstance(mapper, TwoColumnsMapper):
                first_values = _materialize(mapper.extractor(item))
                second_values = _materialize(mapper.second_extractor(item))
                for i in range(mapper.total_columns):
                    cancellation.raise_if_cancellation_requested()
                    self._write_cell(
                        worksheet,
                        row,
                        column,
                        mapper.caption,
                        _value_at(first_values, i),
                        mapper.format,
                        mapper,
                    )
                    column += 1
                    if mapper.show_second_column:
                        self._write_cell(
                            worksheet,
                            row,
                            column,
                            mapper.second_caption,
                            _value_at(second_values, i),
                            mapper.second_format,
                            mapper,
                        )
                        column += 1
            elif isinstance(mapper, MultipleColumnMapper):
                values = _materialize(mapper.extractor(item))
                for i in range(mapper.total_columns):
                    cancellation.raise_if_cancellation_requested()
                    self._write_cell(
                        worksheet,
                        row,
                        column,
                        mapper.caption,
                        _value_at(values, i),
                        mapper.format,
                        mapper,
                    )
                    column += 1
            elif isinstance(mapper, ColumnMapper):
                value = mapper.extractor(item)
                # absent values leave the cell untouched, the column still counts
                if value is not None:
                    self._write_cell(
                        worksheet,
                        row,
                        column,
                        mapper.caption,
                        value,
                        mapper.format,
                        mapper,
                    )
                column += 1
            else:
                msg = f"Unsupported column mapper type: {type(mapper).__name__}"
                raise TypeError(msg)

    def _write_cell(
        self,
        worksheet: Worksheet,
        row: int,
        column: int,
        caption: str,
        value: Any,
        number_format: str,
        mapper: AnyColumnMapper,
    ) -> None:
        try:
            self.cell_writer.write(
                worksheet.cell(row=row, column=column),
                value,
                number_format,
                mapper.alignment,
            )
        except (TypeError, ValueError) as e:
            raise XLSXSerializationError(caption, value, e) from e

    def generate_worksheet(
        self,
        workbook: Workbook,
        mappers: Iterable[AnyColumnMapper],
        report_name: str,
        items: Iterable[Any],
        cancellation: CancellationToken | None = None,
        include_column_headers: bool = True,
    ) -> Worksheet:
        """Create a new worksheet named report_name and lay out items from A1."""
        cancellation = cancellation or CancellationToken.none()
        started = time.perf_counter()
        logger.info("Starting worksheet %s generation.", report_name)

        sorted_mappers = sort_mappers(mappers)
        worksheet = workbook.create_sheet(title=report_name)
        rows_written = self.layout(
            worksheet,
            sorted_mappers,
            items,
            start_row=1,
            start_column=1,
            include_headers=include_column_headers,
            cancellation=cancellation,
        )

        if self.config.auto_adjust_columns:
            auto_adjust_columns(
                worksheet, get_total_columns(sorted_mappers), self.config
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Finished worksheet %s generation. Rows added %d. Elapsed %d ms.",
            report_name,
            rows_written,
            elapsed_ms,
        )
        return worksheet
