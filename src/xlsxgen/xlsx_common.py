"""
Common XLSX functionality shared by worksheet generation and template filling.

This module contains shared infrastructure including:
- Exception classes
- Horizontal alignment values accepted by the grid
- Cooperative cancellation token
- Value coercion engine for converting Python objects to Excel values
- Cell writer applying value, number format, alignment and bold headers
- Generator configuration and column width adjustment
"""

import logging
import re
import threading
from copy import copy
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from openpyxl.cell import MergedCell
from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

# Excel's "Text" number format; used as default for all columns.
DEFAULT_FORMAT = "@"
MAX_SHEETNAME_LENGTH = 31


# Exception classes
class XLSXSerializationError(ValueError):
    """Raised when a value cannot be written to a cell."""

    def __init__(self, field_name: str, value: Any, original_error: Exception):
        self.field_name = field_name
        self.value = value
        self.original_error = original_error
        super().__init__(
            f"Error serializing field '{field_name}' with value '{value}': {original_error}"
        )


class XLSXConfigurationError(ValueError):
    """Raised when a generation request is incompletely or inconsistently configured."""


class NamedRangeNotFoundError(LookupError):
    """Raised when a defined name does not exist anywhere in the workbook."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"Named range '{name}' not found.")


class NamedRangeNotFoundInWorksheetError(NamedRangeNotFoundError):
    """Raised when a defined name exists, but not on the requested worksheet."""

    def __init__(self, name: str, worksheet_name: str):
        self.worksheet_name = worksheet_name
        super().__init__(
            name, f"Named range '{name}' not found in worksheet '{worksheet_name}'."
        )


class TemplateModelTypeError(TypeError):
    """Raised when the template model is not of the type a mapper expects."""


class OperationCancelledError(Exception):
    """Raised at a poll point after cancellation was requested."""


class HorizontalAlignment(Enum):
    """Horizontal cell alignment as understood by Excel."""

    GENERAL = "general"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    FILL = "fill"
    JUSTIFY = "justify"
    CENTER_CONTINUOUS = "centerContinuous"
    DISTRIBUTED = "distributed"


class CancellationToken:
    """Cooperative cancellation signal shared between caller and generator.

    The generator never interrupts work on its own. It polls the token at
    well-defined points and raises OperationCancelledError once cancellation
    was requested. Cancelling is thread-safe, so a caller may cancel from
    another thread while generation runs in a worker.
    """

    def __init__(self):
        self._event = threading.Event()

    @classmethod
    def none(cls) -> "CancellationToken":
        """Token that is never cancelled (unless someone cancels it explicitly)."""
        return cls()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def raise_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            msg = "The operation was cancelled."
            raise OperationCancelledError(msg)


# Value coercion engine
class XLSXValueCoercer:
    """Converts extracted values into the value kinds Excel stores natively.

    Precedence (first match wins):
    numeric string, date string, Decimal, int, float, date/datetime,
    timedelta, anything else as str. None stays None.
    """

    # ASCII digits with at most one decimal point; no sign, exponent or grouping.
    NUMERIC_PATTERN = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)")

    # Invariant date formats tried after ISO 8601.
    DATE_FORMATS = (
        "%m/%d/%Y",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %H:%M",
        "%Y/%m/%d",
        "%Y/%m/%d %H:%M:%S",
        "%d %B %Y",
        "%d %b %Y",
    )

    def coerce(self, value: Any) -> Any:
        """Return the narrowest Excel-native representation of value."""
        if value is None:
            return None

        if isinstance(value, str):
            number = self._parse_number(value)
            if number is not None:
                return number
            parsed_date = self._parse_datetime(value)
            if parsed_date is not None:
                return parsed_date

        if isinstance(value, Decimal):
            return float(value)

        # bool is an int subclass and Excel stores it natively as well
        if isinstance(value, int):
            return value

        if isinstance(value, float):
            return value

        if isinstance(value, datetime):
            return self._to_naive(value)

        if isinstance(value, date | timedelta):
            return value

        return str(value)

    def _parse_number(self, text: str) -> float | None:
        if self.NUMERIC_PATTERN.fullmatch(text):
            return float(text)
        return None

    def _parse_datetime(self, text: str) -> datetime | None:
        """Parse text as a date/time using invariant (culture-neutral) formats."""
        candidate = text.strip()
        if not candidate:
            return None
        try:
            return self._to_naive(datetime.fromisoformat(candidate))
        except ValueError:
            pass
        for fmt in self.DATE_FORMATS:
            try:
                return datetime.strptime(candidate, fmt)
            except ValueError:
                continue
        return None

    @staticmethod
    def _to_naive(value: datetime) -> datetime:
        # Excel has no notion of time zones; openpyxl rejects aware datetimes.
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)


class XLSXCellWriter:
    """Writes header and data cells with consistent styling."""

    def __init__(self, coercer: XLSXValueCoercer | None = None):
        self.coercer = coercer or XLSXValueCoercer()

    def write(
        self,
        cell: Cell,
        value: Any,
        number_format: str | None,
        alignment: HorizontalAlignment,
    ) -> None:
        """Apply number format and alignment, then write the coerced value."""
        if number_format:
            cell.number_format = number_format
        cell_alignment = copy(cell.alignment)
        cell_alignment.horizontal = alignment.value
        cell.alignment = cell_alignment
        cell.value = self.coercer.coerce(value)

    def write_header(self, cell: Cell, caption: str, bold: bool = True) -> None:
        """Write a header caption, keeping the cell's existing font apart from bold."""
        cell.value = caption
        if bold:
            font = copy(cell.font)
            font.bold = True
            cell.font = font


@dataclass
class XLSXGeneratorConfig:
    """Configuration for workbook generation."""

    auto_adjust_columns: bool = True
    min_column_width: int = 10
    max_column_width: int = 50
    header_bold: bool = True


def auto_adjust_columns(
    worksheet: Worksheet,
    num_columns: int,
    config: XLSXGeneratorConfig | None = None,
) -> None:
    """Auto-adjust column widths based on content."""
    config = config or XLSXGeneratorConfig()
    for col_idx in range(1, num_columns + 1):
        max_length = 0
        column_letter = get_column_letter(col_idx)

        for row in worksheet.iter_rows(min_col=col_idx, max_col=col_idx):
            for cell in row:
                if not isinstance(cell, MergedCell) and cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

        adjusted_width = min(
            max(max_length + 2, config.min_column_width), config.max_column_width
        )
        worksheet.column_dimensions[column_letter].width = adjusted_width
