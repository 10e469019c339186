"""
Template workbook population through defined names.

This module contains all template-specific functionality including:
- Named range resolution at workbook and worksheet scope
- Row insertion that keeps merged cells and defined names below in place
- Template row style propagation onto inserted rows
- Value and table mappers writing into named ranges
- Builders collecting the mappers for one template generation
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from copy import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from openpyxl.cell.cell import Cell, MergedCell
from openpyxl.utils.cell import (
    absolute_coordinate,
    quote_sheetname,
    range_boundaries,
)
from openpyxl.workbook import Workbook
from openpyxl.workbook.defined_name import DefinedName
from openpyxl.worksheet.cell_range import CellRange
from openpyxl.worksheet.worksheet import Worksheet
from pydantic import BaseModel, ConfigDict, field_validator

from .xlsx_columns import AnyColumnMapper, build_mappers, get_total_columns
from .xlsx_common import (
    DEFAULT_FORMAT,
    MAX_SHEETNAME_LENGTH,
    CancellationToken,
    HorizontalAlignment,
    NamedRangeNotFoundError,
    NamedRangeNotFoundInWorksheetError,
    TemplateModelTypeError,
    XLSXConfigurationError,
    XLSXSerializationError,
)
from .xlsx_table import XLSXTableFormatter

logger = logging.getLogger(__name__)


# =============================================================================
# Named range resolution
# =============================================================================


@dataclass(frozen=True)
class RegionRange:
    """One rectangular area of a named region, bound to a single worksheet."""

    worksheet: Worksheet
    bounds: CellRange

    def first_cell(self) -> Cell:
        return self.worksheet.cell(row=self.bounds.min_row, column=self.bounds.min_col)

    def cells(self) -> Iterator[Cell]:
        """All cells of the area, row by row."""
        for row, column in self.bounds.cells:
            yield self.worksheet.cell(row=row, column=column)


@dataclass(frozen=True)
class NamedRegion:
    """A defined name with all the areas it refers to."""

    name: str
    ranges: tuple[RegionRange, ...]


def _destinations(
    defined_name: DefinedName, owner: Worksheet | None
) -> Iterator[tuple[str, str]]:
    """Yield (sheet title, coordinate) pairs a defined name points to."""
    value = defined_name.value
    if not value or defined_name.type != "RANGE":
        return
    if "!" not in value:
        # sheet-scoped names may omit the sheet prefix
        if owner is not None:
            yield owner.title, value
        return
    yield from defined_name.destinations


def _boundaries(coordinate: str) -> tuple[int | None, ...]:
    """(min_col, min_row, max_col, max_row); rows or columns are None for A:A or 1:1."""
    return range_boundaries(coordinate.replace("$", ""))


def _to_region(
    workbook: Workbook, defined_name: DefinedName, owner: Worksheet | None
) -> NamedRegion:
    ranges = []
    for sheet_title, coordinate in _destinations(defined_name, owner):
        if sheet_title not in workbook.sheetnames:
            logger.debug(
                'Defined name "%s" refers to unknown sheet "%s".',
                defined_name.name,
                sheet_title,
            )
            continue
        min_col, min_row, max_col, max_row = _boundaries(coordinate)
        if None in (min_col, min_row, max_col, max_row):
            logger.debug(
                'Skipped whole row or column area %s of defined name "%s".',
                coordinate,
                defined_name.name,
            )
            continue
        ranges.append(
            RegionRange(
                worksheet=workbook[sheet_title],
                bounds=CellRange(
                    min_col=min_col, min_row=min_row, max_col=max_col, max_row=max_row
                ),
            )
        )
    return NamedRegion(name=defined_name.name, ranges=tuple(ranges))


def find_named_regions(workbook: Workbook, name: str) -> Iterator[NamedRegion]:
    """Yield all regions named `name` (case-insensitive).

    Workbook-scoped names come first, then names scoped to each worksheet in
    sheet order. Yields nothing if the name is not defined.
    """
    wanted = name.casefold()
    for defined_name in workbook.defined_names.values():
        if defined_name.name.casefold() == wanted:
            yield _to_region(workbook, defined_name, None)

    for worksheet in workbook.worksheets:
        for defined_name in worksheet.defined_names.values():
            if defined_name.name.casefold() == wanted:
                yield _to_region(workbook, defined_name, worksheet)


def matches_worksheet(region_range: RegionRange, worksheet_name: str | None) -> bool:
    """True if no worksheet filter is given or the range lies on that worksheet."""
    if worksheet_name is None or not worksheet_name.strip():
        return True
    return region_range.worksheet.title.casefold() == worksheet_name.casefold()


# =============================================================================
# Row insertion and style propagation
# =============================================================================


def _shift_bounds(bounds: CellRange, row: int, count: int) -> bool:
    """Move bounds below `row` down by count; grow bounds spanning `row`."""
    if bounds.min_row > row:
        bounds.shift(row_shift=count)
        return True
    if bounds.max_row > row:
        bounds.expand(down=count)
        return True
    return False


def _shift_coordinate(coordinate: str, row: int, count: int) -> str | None:
    """Return the moved coordinate, or None if rows inserted below `row` leave it."""
    min_col, min_row, max_col, max_row = _boundaries(coordinate)
    if min_row is None:
        # whole columns
        return None
    if min_row > row:
        min_row, max_row = min_row + count, max_row + count
    elif max_row > row:
        max_row += count
    else:
        return None
    if min_col is None:
        return f"${min_row}:${max_row}"
    bounds = CellRange(min_col=min_col, min_row=min_row, max_col=max_col, max_row=max_row)
    return absolute_coordinate(bounds.coord)


def _shift_defined_name(
    defined_name: DefinedName,
    worksheet: Worksheet,
    owner: Worksheet | None,
    row: int,
    count: int,
) -> None:
    prefixed = "!" in (defined_name.value or "")
    parts = []
    changed = False
    for sheet_title, coordinate in _destinations(defined_name, owner):
        if sheet_title == worksheet.title:
            moved = _shift_coordinate(coordinate, row, count)
            if moved is not None:
                coordinate = moved
                changed = True
        parts.append(
            f"{quote_sheetname(sheet_title)}!{coordinate}" if prefixed else coordinate
        )
    if changed:
        logger.debug(
            'Moved defined name "%s" from %s to %s.',
            defined_name.name,
            defined_name.attr_text,
            ",".join(parts),
        )
        defined_name.attr_text = ",".join(parts)


def _shift_merged_cells(worksheet: Worksheet, row: int, count: int) -> None:
    shifted = []
    for merged_range in list(worksheet.merged_cells.ranges):
        bounds = CellRange(merged_range.coord)
        if _shift_bounds(bounds, row, count):
            worksheet.merged_cells.remove(merged_range)
            shifted.append(bounds.coord)
    for coordinate in shifted:
        worksheet.merge_cells(coordinate)


def _shift_row_dimensions(worksheet: Worksheet, row: int, count: int) -> None:
    dimensions = worksheet.row_dimensions
    for index in sorted((i for i in dimensions if i > row), reverse=True):
        dimension = dimensions.pop(index)
        dimension.index = index + count
        dimensions[index + count] = dimension


def insert_rows_below(worksheet: Worksheet, row: int, count: int) -> None:
    """Insert `count` blank rows directly below `row`.

    Content, merged cells, row heights and defined names strictly below `row`
    move down by `count`; anything at or above `row` stays where it is.
    Formulas are not rewritten.
    """
    if count <= 0:
        return
    worksheet.insert_rows(row + 1, amount=count)
    _shift_merged_cells(worksheet, row, count)
    _shift_row_dimensions(worksheet, row, count)

    workbook = worksheet.parent
    for defined_name in workbook.defined_names.values():
        _shift_defined_name(defined_name, worksheet, None, row, count)
    for sheet in workbook.worksheets:
        for defined_name in sheet.defined_names.values():
            _shift_defined_name(defined_name, worksheet, sheet, row, count)

    logger.debug(
        'Inserted %d rows below row %d in sheet "%s".', count, row, worksheet.title
    )


def copy_template_row_style(
    worksheet: Worksheet,
    template_row: int,
    total_rows: int,
    start_column: int,
    total_columns: int,
) -> None:
    """Copy the cell styles of template_row onto the following total_rows - 1 rows.

    Only styles are copied, values are left alone.
    """
    if total_rows <= 1 or total_columns <= 0:
        return

    for offset in range(1, total_rows):
        target_row = template_row + offset
        for column_offset in range(total_columns):
            column = start_column + column_offset
            source = worksheet.cell(row=template_row, column=column)
            target = worksheet.cell(row=target_row, column=column)
            target._style = copy(source._style)

    logger.debug(
        'Copied style of row %d to %d rows (%d columns) in sheet "%s".',
        template_row,
        total_rows - 1,
        total_columns,
        worksheet.title,
    )


def resolve_table_rows(
    header_row: int, header_row_is_named_range: bool, write_headers: bool
) -> tuple[int, int]:
    """Return (data_start_row, write_start_row) for a table anchored at header_row.

    header_row_is_named_range  write_headers  data_start_row  write_start_row
    True                       True           header_row+1    header_row
    True                       False          header_row+1    header_row+1
    False                      True           header_row+1    header_row
    False                      False          header_row      header_row
    """
    if header_row_is_named_range:
        data_start_row = header_row + 1
        write_start_row = header_row if write_headers else data_start_row
    elif write_headers:
        data_start_row = header_row + 1
        write_start_row = header_row
    else:
        data_start_row = header_row
        write_start_row = header_row
    return data_start_row, write_start_row


# =============================================================================
# Value and table population
# =============================================================================


def _resolve_regions(workbook: Workbook, name: str) -> list[NamedRegion]:
    regions = list(find_named_regions(workbook, name))
    if not regions:
        raise NamedRangeNotFoundError(name)
    return regions


def _is_scoped(worksheet_name: str | None) -> bool:
    return worksheet_name is not None and bool(worksheet_name.strip())


def apply_value(
    formatter: XLSXTableFormatter,
    workbook: Workbook,
    name: str,
    value: Any,
    number_format: str = DEFAULT_FORMAT,
    alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
    worksheet_name: str | None = None,
    cancellation: CancellationToken | None = None,
    regions: list[NamedRegion] | None = None,
) -> None:
    """Write value into every cell of every range named `name`.

    `regions` may carry the already resolved regions of `name`.
    """
    cancellation = cancellation or CancellationToken.none()
    if regions is None:
        regions = _resolve_regions(workbook, name)

    matched = False
    for region in regions:
        for region_range in region.ranges:
            if not matches_worksheet(region_range, worksheet_name):
                continue
            matched = True
            for cell in region_range.cells():
                cancellation.raise_if_cancellation_requested()
                # covered cells of a merge are read-only; the anchor holds the value
                if isinstance(cell, MergedCell):
                    continue
                try:
                    formatter.cell_writer.write(cell, value, number_format, alignment)
                except (TypeError, ValueError) as e:
                    raise XLSXSerializationError(name, value, e) from e

    if not matched and _is_scoped(worksheet_name):
        raise NamedRangeNotFoundInWorksheetError(name, worksheet_name)


class TemplateTableRequest(BaseModel):
    """Binds a named range to column mappers and the table placement policies."""

    model_config = ConfigDict(frozen=True)

    name: str
    mappers: tuple[AnyColumnMapper, ...]
    header_row_is_named_range: bool = True
    write_headers: bool = False
    insert_rows: bool = True
    copy_template_style: bool = True
    worksheet_name: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "Named range cannot be empty or whitespace."
            raise ValueError(msg)
        return value

    @field_validator("mappers")
    @classmethod
    def mappers_not_empty(cls, value: tuple) -> tuple:
        if not value:
            msg = "At least one column must be configured."
            raise ValueError(msg)
        return value


def apply_table(
    formatter: XLSXTableFormatter,
    workbook: Workbook,
    request: TemplateTableRequest,
    items: Iterable[Any] | None,
    cancellation: CancellationToken | None = None,
    regions: list[NamedRegion] | None = None,
) -> None:
    """Lay out items as a table at each range named request.name.

    Areas are filled in order. Rows inserted for one area move the anchors
    of the areas still to come on the same worksheet.
    """
    cancellation = cancellation or CancellationToken.none()
    if regions is None:
        regions = _resolve_regions(workbook, request.name)
    items = list(items) if items is not None else []

    targets = [
        region_range
        for region in regions
        for region_range in region.ranges
        if matches_worksheet(region_range, request.worksheet_name)
    ]
    for index, region_range in enumerate(targets):
        cancellation.raise_if_cancellation_requested()

        worksheet = region_range.worksheet
        anchor = region_range.first_cell()
        header_row, start_column = anchor.row, anchor.column
        data_start_row, write_start_row = resolve_table_rows(
            header_row, request.header_row_is_named_range, request.write_headers
        )

        if request.insert_rows and len(items) > 1:
            inserted = len(items) - 1
            insert_rows_below(worksheet, data_start_row, inserted)
            for pending in targets[index + 1 :]:
                if pending.worksheet is worksheet:
                    _shift_bounds(pending.bounds, data_start_row, inserted)
            if request.copy_template_style:
                copy_template_row_style(
                    worksheet,
                    data_start_row,
                    len(items),
                    start_column,
                    get_total_columns(request.mappers),
                )

        rows_written = formatter.layout(
            worksheet,
            request.mappers,
            items,
            start_row=write_start_row,
            start_column=start_column,
            include_headers=request.write_headers,
            cancellation=cancellation,
        )
        logger.debug(
            'Wrote %d rows for named range "%s" in sheet "%s".',
            rows_written,
            request.name,
            worksheet.title,
        )

    if not targets and _is_scoped(request.worksheet_name):
        raise NamedRangeNotFoundInWorksheetError(
            request.name, request.worksheet_name
        )


# =============================================================================
# Template mappers
# =============================================================================


class TemplateMapper(ABC):
    """Base class for units of work applied to a template workbook."""

    def __init__(self, model_type: type | None = None):
        self.model_type = model_type

    @abstractmethod
    def apply(
        self,
        formatter: XLSXTableFormatter,
        workbook: Workbook,
        model: Any,
        cancellation: CancellationToken,
    ) -> None:
        """Apply this unit of work to the workbook."""

    def _check_model(self, name: str, model: Any) -> None:
        if self.model_type is not None and not isinstance(model, self.model_type):
            msg = f"Named range '{name}' expects model type '{self.model_type.__name__}'."
            raise TemplateModelTypeError(msg)


class NamedRangeValueMapper(TemplateMapper):
    """Writes a single value selected from the model into a named range."""

    def __init__(
        self,
        name: str,
        selector: Callable[[Any], Any],
        number_format: str = DEFAULT_FORMAT,
        alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
        worksheet_name: str | None = None,
        model_type: type | None = None,
    ):
        super().__init__(model_type)
        self.name = name
        self.selector = selector
        self.number_format = number_format
        self.alignment = alignment
        self.worksheet_name = worksheet_name

    def apply(self, formatter, workbook, model, cancellation):
        cancellation.raise_if_cancellation_requested()
        self._check_model(self.name, model)
        # resolve before selecting so a missing name is reported first
        regions = _resolve_regions(workbook, self.name)
        apply_value(
            formatter,
            workbook,
            self.name,
            self.selector(model),
            self.number_format,
            self.alignment,
            self.worksheet_name,
            cancellation,
            regions,
        )


class NamedRangeTableMapper(TemplateMapper):
    """Writes a sequence selected from the model as a table at a named range."""

    def __init__(
        self,
        request: TemplateTableRequest,
        selector: Callable[[Any], Iterable[Any] | None],
        model_type: type | None = None,
    ):
        super().__init__(model_type)
        self.request = request
        self.selector = selector

    def apply(self, formatter, workbook, model, cancellation):
        cancellation.raise_if_cancellation_requested()
        self._check_model(self.request.name, model)
        regions = _resolve_regions(workbook, self.request.name)
        apply_table(
            formatter,
            workbook,
            self.request,
            self.selector(model),
            cancellation,
            regions,
        )


class WorksheetMapper(TemplateMapper):
    """Adds a generated worksheet to the output workbook."""

    def __init__(
        self,
        report_name: str,
        items: Iterable[Any],
        include_column_headers: bool,
        mappers: list[AnyColumnMapper],
    ):
        super().__init__()
        self.report_name = report_name
        self.items = items
        self.include_column_headers = include_column_headers
        self.mappers = mappers

    def apply(self, formatter, workbook, model, cancellation):
        cancellation.raise_if_cancellation_requested()
        if self.report_name in workbook.sheetnames:
            msg = f"Worksheet '{self.report_name}' already exists in the workbook."
            raise XLSXConfigurationError(msg)
        formatter.generate_worksheet(
            workbook,
            self.mappers,
            self.report_name,
            self.items,
            cancellation,
            self.include_column_headers,
        )


# =============================================================================
# Builders
# =============================================================================


def _require_text(value: str | None, what: str) -> None:
    if value is None or not str(value).strip():
        msg = f"{what} cannot be None or empty."
        raise ValueError(msg)


def _require(value: Any, what: str) -> None:
    if value is None:
        msg = f"{what} cannot be None."
        raise ValueError(msg)


def create_worksheet_mapper(
    report_name: str,
    items: Iterable[Any],
    configure_columns: Callable,
    include_column_headers: bool = True,
    reserved_names: Iterable[str] = (),
) -> WorksheetMapper:
    """Validate a worksheet definition and return the mapper generating it."""
    _require_text(report_name, "Report name")
    _require(items, "Items")
    _require(configure_columns, "configure_columns")
    if len(report_name) > MAX_SHEETNAME_LENGTH:
        msg = (
            f"Report name '{report_name}' is longer than "
            f"{MAX_SHEETNAME_LENGTH} characters."
        )
        raise ValueError(msg)
    if report_name in reserved_names:
        msg = f"Worksheet '{report_name}' is added more than once."
        raise XLSXConfigurationError(msg)

    mappers = build_mappers(configure_columns)
    if not mappers:
        msg = f"Worksheet '{report_name}' has no columns configured."
        raise XLSXConfigurationError(msg)

    return WorksheetMapper(report_name, items, include_column_headers, mappers)


class _TemplateState:
    """Mutable state shared by a template builder and its worksheet builders."""

    def __init__(self, cancellation: CancellationToken):
        self.cancellation = cancellation
        self.mappers: list[TemplateMapper] = []
        self.template_path: Path | None = None
        self.model: Any = None
        self.model_set = False

    @property
    def model_type(self) -> type | None:
        return type(self.model) if self.model_set else None

    def worksheet_names(self) -> list[str]:
        return [m.report_name for m in self.mappers if isinstance(m, WorksheetMapper)]

    def add_named_range(
        self,
        name: str,
        selector: Callable[[Any], Any],
        number_format: str,
        alignment: HorizontalAlignment,
        worksheet_name: str | None,
    ) -> None:
        _require_text(name, "Named range")
        _require(selector, "Selector")
        self.mappers.append(
            NamedRangeValueMapper(
                name,
                selector,
                number_format,
                alignment,
                worksheet_name,
                self.model_type,
            )
        )

    def add_named_range_table(
        self,
        name: str,
        selector: Callable[[Any], Iterable[Any] | None],
        configure_columns: Callable,
        header_row_is_named_range: bool,
        write_headers: bool,
        insert_rows: bool,
        copy_template_style: bool,
        worksheet_name: str | None,
    ) -> None:
        _require_text(name, "Named range")
        _require(selector, "Selector")
        mappers = build_mappers(configure_columns)
        if not mappers:
            msg = f"Named range '{name}' has no columns configured."
            raise XLSXConfigurationError(msg)

        request = TemplateTableRequest(
            name=name,
            mappers=tuple(mappers),
            header_row_is_named_range=header_row_is_named_range,
            write_headers=write_headers,
            insert_rows=insert_rows,
            copy_template_style=copy_template_style,
            worksheet_name=worksheet_name,
        )
        self.mappers.append(NamedRangeTableMapper(request, selector, self.model_type))


class TemplateWorkbookBuilder:
    """Builder to populate an Excel template using named ranges."""

    def __init__(self, cancellation: CancellationToken | None = None):
        self._state = _TemplateState(cancellation or CancellationToken.none())

    def use_template_path(self, template_path: str | Path) -> "TemplateWorkbookBuilder":
        """Set the template workbook to load."""
        _require_text(template_path, "Template path")
        self._state.template_path = Path(template_path)
        return self

    def set_data(self, model: Any) -> "TemplateWorkbookBuilder":
        """Set the data model the selectors receive."""
        _require(model, "Model")
        state = self._state
        if state.model_set and not isinstance(model, type(state.model)):
            msg = "Template model type does not match existing model."
            raise XLSXConfigurationError(msg)
        state.model = model
        state.model_set = True
        return self

    def for_worksheet(
        self,
        worksheet_name: str,
        configure: Callable[["TemplateWorksheetBuilder"], Any],
    ) -> "TemplateWorkbookBuilder":
        """Scope mappings to a specific worksheet."""
        _require_text(worksheet_name, "Worksheet name")
        _require(configure, "configure")
        configure(TemplateWorksheetBuilder(self._state, worksheet_name))
        return self

    def add_worksheet(
        self,
        report_name: str,
        items: Iterable[Any],
        configure_columns: Callable,
        include_column_headers: bool = True,
    ) -> "TemplateWorkbookBuilder":
        """Add a new generated worksheet to the output workbook."""
        self._state.mappers.append(
            create_worksheet_mapper(
                report_name,
                items,
                configure_columns,
                include_column_headers,
                self._state.worksheet_names(),
            )
        )
        return self

    def named_range(
        self,
        name: str,
        selector: Callable[[Any], Any],
        format: str = DEFAULT_FORMAT,  # noqa: A002
        alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
    ) -> "TemplateWorkbookBuilder":
        """Map a single named range to a value."""
        self._state.add_named_range(name, selector, format, alignment, None)
        return self

    def named_range_table(
        self,
        name: str,
        selector: Callable[[Any], Iterable[Any] | None],
        configure_columns: Callable,
        header_row_is_named_range: bool = True,
        write_headers: bool = False,
        insert_rows: bool = True,
        copy_template_style: bool = True,
    ) -> "TemplateWorkbookBuilder":
        """Map a table to a named range (first cell in the range is the anchor)."""
        self._state.add_named_range_table(
            name,
            selector,
            configure_columns,
            header_row_is_named_range,
            write_headers,
            insert_rows,
            copy_template_style,
            None,
        )
        return self

    @property
    def mappers(self) -> list[TemplateMapper]:
        return list(self._state.mappers)

    def apply_mappers(self, formatter: XLSXTableFormatter, workbook: Workbook) -> None:
        """Apply all registered mappers in registration order."""
        _require(workbook, "Workbook")
        state = self._state
        model = self.get_model_or_raise()
        for mapper in state.mappers:
            state.cancellation.raise_if_cancellation_requested()
            logger.debug("Applying %s.", type(mapper).__name__)
            mapper.apply(formatter, workbook, model, state.cancellation)

    def get_template_path_or_raise(self) -> Path:
        path = self._state.template_path
        if path is None:
            msg = "Template path must be provided via use_template_path."
            raise XLSXConfigurationError(msg)
        if not path.is_file():
            msg = f"Template file not found: {path}"
            raise XLSXConfigurationError(msg)
        return path

    def get_model_or_raise(self) -> Any:
        if not self._state.model_set:
            msg = "Model must be provided via set_data."
            raise XLSXConfigurationError(msg)
        return self._state.model


class TemplateWorksheetBuilder:
    """Builder to configure mappings for a specific worksheet."""

    def __init__(self, state: _TemplateState, worksheet_name: str):
        self._state = state
        self.worksheet_name = worksheet_name

    def named_range(
        self,
        name: str,
        selector: Callable[[Any], Any],
        format: str = DEFAULT_FORMAT,  # noqa: A002
        alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
    ) -> "TemplateWorksheetBuilder":
        self._state.add_named_range(
            name, selector, format, alignment, self.worksheet_name
        )
        return self

    def named_range_table(
        self,
        name: str,
        selector: Callable[[Any], Iterable[Any] | None],
        configure_columns: Callable,
        header_row_is_named_range: bool = True,
        write_headers: bool = False,
        insert_rows: bool = True,
        copy_template_style: bool = True,
    ) -> "TemplateWorksheetBuilder":
        self._state.add_named_range_table(
            name,
            selector,
            configure_columns,
            header_row_is_named_range,
            write_headers,
            insert_rows,
            copy_template_style,
            self.worksheet_name,
        )
        return self
