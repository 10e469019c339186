"""
Public API for generating Excel workbooks.

This module provides the entry points for both generation modes:
- New workbooks built from worksheets of column-mapped items
- Template workbooks populated through defined names
- Byte and stream results, with async variants running in a worker thread
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from io import BytesIO
from typing import Any

from openpyxl import Workbook, load_workbook

from .xlsx_common import (
    CancellationToken,
    XLSXConfigurationError,
    XLSXGeneratorConfig,
)
from .xlsx_table import XLSXTableFormatter
from .xlsx_template import TemplateWorkbookBuilder, create_worksheet_mapper

logger = logging.getLogger(__name__)


class WorkbookBuilder:
    """Builder adding generated worksheets to a new workbook."""

    def __init__(
        self,
        formatter: XLSXTableFormatter,
        workbook: Workbook,
        cancellation: CancellationToken | None = None,
    ):
        self.formatter = formatter
        self.workbook = workbook
        self.cancellation = cancellation or CancellationToken.none()
        self._report_names: list[str] = []

    def add_worksheet(
        self,
        report_name: str,
        items: Iterable[Any],
        configure_columns: Callable,
        include_column_headers: bool = True,
    ) -> "WorkbookBuilder":
        """Add a worksheet with one row per item and the configured columns."""
        self.cancellation.raise_if_cancellation_requested()
        mapper = create_worksheet_mapper(
            report_name,
            items,
            configure_columns,
            include_column_headers,
            self._report_names,
        )
        self._report_names.append(report_name)
        mapper.apply(self.formatter, self.workbook, None, self.cancellation)
        return self

    @property
    def report_names(self) -> list[str]:
        return list(self._report_names)


def _new_workbook() -> Workbook:
    workbook = Workbook()
    if "Sheet" in workbook.sheetnames:
        workbook.remove(workbook["Sheet"])
    return workbook


def _save(workbook: Workbook) -> BytesIO:
    stream = BytesIO()
    workbook.save(stream)
    stream.seek(0)
    return stream


class ExcelGenerator:
    """Generates Excel workbooks from Python objects."""

    def __init__(self, config: XLSXGeneratorConfig | None = None):
        self.config = config or XLSXGeneratorConfig()
        self.formatter = XLSXTableFormatter(self.config)

    # New workbooks

    def generate_excel(
        self,
        configure: Callable[[WorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> bytes:
        """Generate a new workbook and return the xlsx file content."""
        return self._generate(configure, cancellation).getvalue()

    def generate_excel_as_stream(
        self,
        configure: Callable[[WorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> BytesIO:
        """Generate a new workbook and return it as a stream positioned at 0."""
        return self._generate(configure, cancellation)

    def _generate(
        self,
        configure: Callable[[WorkbookBuilder], Any],
        cancellation: CancellationToken | None,
    ) -> BytesIO:
        if configure is None:
            msg = "configure cannot be None."
            raise ValueError(msg)
        cancellation = cancellation or CancellationToken.none()
        cancellation.raise_if_cancellation_requested()

        logger.info("Starting Excel generation.")
        workbook = _new_workbook()
        builder = WorkbookBuilder(self.formatter, workbook, cancellation)
        configure(builder)

        if not workbook.worksheets:
            msg = "At least one worksheet must be added."
            raise XLSXConfigurationError(msg)

        cancellation.raise_if_cancellation_requested()
        stream = _save(workbook)
        logger.info(
            "Finished Excel generation. File size: %d bytes.",
            len(stream.getvalue()),
        )
        return stream

    # Template workbooks

    def generate_excel_from_template(
        self,
        configure: Callable[[TemplateWorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> bytes:
        """Populate a template workbook and return the xlsx file content."""
        return self._generate_from_template(configure, cancellation).getvalue()

    def generate_excel_from_template_as_stream(
        self,
        configure: Callable[[TemplateWorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> BytesIO:
        """Populate a template workbook and return it as a stream positioned at 0."""
        return self._generate_from_template(configure, cancellation)

    def _generate_from_template(
        self,
        configure: Callable[[TemplateWorkbookBuilder], Any],
        cancellation: CancellationToken | None,
    ) -> BytesIO:
        if configure is None:
            msg = "configure cannot be None."
            raise ValueError(msg)
        cancellation = cancellation or CancellationToken.none()
        cancellation.raise_if_cancellation_requested()

        builder = TemplateWorkbookBuilder(cancellation)
        configure(builder)
        template_path = builder.get_template_path_or_raise()
        builder.get_model_or_raise()

        logger.info("Starting Excel generation from template %s.", template_path)
        workbook = load_workbook(template_path)
        # .xltx templates are saved as regular workbooks
        workbook.template = False
        builder.apply_mappers(self.formatter, workbook)

        cancellation.raise_if_cancellation_requested()
        stream = _save(workbook)
        logger.info(
            "Finished Excel generation from template. File size: %d bytes.",
            len(stream.getvalue()),
        )
        return stream

    # Async variants

    async def generate_excel_async(
        self,
        configure: Callable[[WorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> bytes:
        return await asyncio.to_thread(self.generate_excel, configure, cancellation)

    async def generate_excel_as_stream_async(
        self,
        configure: Callable[[WorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> BytesIO:
        return await asyncio.to_thread(
            self.generate_excel_as_stream, configure, cancellation
        )

    async def generate_excel_from_template_async(
        self,
        configure: Callable[[TemplateWorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> bytes:
        return await asyncio.to_thread(
            self.generate_excel_from_template, configure, cancellation
        )

    async def generate_excel_from_template_as_stream_async(
        self,
        configure: Callable[[TemplateWorkbookBuilder], Any],
        cancellation: CancellationToken | None = None,
    ) -> BytesIO:
        return await asyncio.to_thread(
            self.generate_excel_from_template_as_stream, configure, cancellation
        )
