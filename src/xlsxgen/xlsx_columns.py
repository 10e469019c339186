"""
Column descriptor model for mapping items onto worksheet columns.

A column mapper describes one logical column of output:
- ColumnMapper: one value per item, one physical column
- MultipleColumnMapper: a sequence of values per item, expanded horizontally
- TwoColumnsMapper: two sequences per item, emitted as adjacent column pairs

Mappers are immutable and validate captions, extractors and column counts at
construction time. WorksheetBuilder offers a fluent way to collect them.
"""

from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .xlsx_common import DEFAULT_FORMAT, HorizontalAlignment


class BaseColumnMapper(BaseModel):
    """Fields shared by all column mappers."""

    model_config = ConfigDict(frozen=True)

    order: int
    caption: str
    format: str = DEFAULT_FORMAT
    alignment: HorizontalAlignment = HorizontalAlignment.LEFT

    @field_validator("caption")
    @classmethod
    def caption_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "Caption cannot be empty or whitespace."
            raise ValueError(msg)
        return value


class ColumnMapper(BaseColumnMapper):
    """One value per item written to a single column."""

    extractor: Callable[[Any], Any]


class _RepeatedColumnMapper(BaseColumnMapper):
    """Mapper whose extractor yields a sequence spread over total_columns."""

    extractor: Callable[[Any], Iterable[Any] | None]
    total_columns: int
    header_suffixes: tuple[str, ...] = ()

    @field_validator("total_columns")
    @classmethod
    def total_columns_positive(cls, value: int) -> int:
        if value <= 0:
            msg = "total_columns must be greater than zero."
            raise ValueError(msg)
        return value

    @field_validator("header_suffixes", mode="before")
    @classmethod
    def suffixes_default(cls, value):
        if value is None:
            return ()
        return tuple(value)

    def header_caption(self, index: int) -> str:
        """Caption for the sub-column at 0-based index."""
        return _suffixed(self.caption, self.header_suffixes, index)


class MultipleColumnMapper(_RepeatedColumnMapper):
    """Sequence of values per item written to total_columns adjacent columns.

    Headers are "<caption> <suffix>"; missing suffixes fall back to the
    1-based sub-column number.
    """


class TwoColumnsMapper(_RepeatedColumnMapper):
    """Two sequences per item written as total_columns column pairs.

    Example with total_columns=2 and show_second_column=True:
        [Planned Jan] [Actual Jan] [Planned Feb] [Actual Feb]
    With show_second_column=False only the "Planned" columns are written.
    """

    second_caption: str
    second_extractor: Callable[[Any], Iterable[Any] | None]
    second_header_suffixes: tuple[str, ...] = ()
    second_format: str = DEFAULT_FORMAT
    show_second_column: bool = True

    @field_validator("second_caption")
    @classmethod
    def second_caption_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "Second caption cannot be empty or whitespace."
            raise ValueError(msg)
        return value

    @field_validator("second_header_suffixes", mode="before")
    @classmethod
    def second_suffixes_default(cls, value):
        if value is None:
            return ()
        return tuple(value)

    def second_header_caption(self, index: int) -> str:
        return _suffixed(self.second_caption, self.second_header_suffixes, index)


AnyColumnMapper = ColumnMapper | MultipleColumnMapper | TwoColumnsMapper


def _suffixed(caption: str, suffixes: tuple[str, ...], index: int) -> str:
    suffix = suffixes[index] if index < len(suffixes) else None
    if suffix is None:
        suffix = str(index + 1)
    return f"{caption} {suffix}"


def get_physical_width(mapper: AnyColumnMapper) -> int:
    """Number of physical columns a mapper occupies."""
    if isinstance(mapper, TwoColumnsMapper):
        return mapper.total_columns * (2 if mapper.show_second_column else 1)
    if isinstance(mapper, MultipleColumnMapper):
        return mapper.total_columns
    if isinstance(mapper, ColumnMapper):
        return 1
    msg = f"Unsupported column mapper type: {type(mapper).__name__}"
    raise TypeError(msg)


def get_total_columns(mappers: Iterable[AnyColumnMapper]) -> int:
    """Total physical width of a set of mappers."""
    return sum(get_physical_width(mapper) for mapper in mappers)


def sort_mappers(mappers: Iterable[AnyColumnMapper]) -> list[AnyColumnMapper]:
    """Sort mappers by order; ties keep insertion order."""
    return sorted(mappers, key=lambda mapper: mapper.order)


class WorksheetBuilder:
    """Fluent builder to configure the columns of a worksheet or table."""

    def __init__(self):
        self._mappers: list[AnyColumnMapper] = []

    def column(
        self,
        caption: str,
        extractor: Callable[[Any], Any],
        order: int,
        format: str = DEFAULT_FORMAT,  # noqa: A002
        alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
    ) -> "WorksheetBuilder":
        """Add a simple column."""
        self._mappers.append(
            ColumnMapper(
                order=order,
                caption=caption,
                format=format,
                alignment=alignment,
                extractor=extractor,
            )
        )
        return self

    def multiple_columns(
        self,
        caption: str,
        extractor: Callable[[Any], Iterable[Any] | None],
        total_columns: int,
        order: int,
        header_suffixes: Iterable[str] | None = None,
        format: str = DEFAULT_FORMAT,  # noqa: A002
        alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
    ) -> "WorksheetBuilder":
        """Add a column expanding to total_columns physical columns."""
        self._mappers.append(
            MultipleColumnMapper(
                order=order,
                caption=caption,
                total_columns=total_columns,
                header_suffixes=header_suffixes,
                format=format,
                alignment=alignment,
                extractor=extractor,
            )
        )
        return self

    def two_columns_per_field(
        self,
        first_caption: str,
        second_caption: str,
        first_extractor: Callable[[Any], Iterable[Any] | None],
        second_extractor: Callable[[Any], Iterable[Any] | None],
        total_columns: int,
        order: int,
        first_header_suffixes: Iterable[str] | None = None,
        second_header_suffixes: Iterable[str] | None = None,
        first_format: str = DEFAULT_FORMAT,
        second_format: str = DEFAULT_FORMAT,
        alignment: HorizontalAlignment = HorizontalAlignment.LEFT,
        show_second_column: bool = True,
    ) -> "WorksheetBuilder":
        """Add a group of two columns (first + second) repeated total_columns times."""
        self._mappers.append(
            TwoColumnsMapper(
                order=order,
                caption=first_caption,
                second_caption=second_caption,
                total_columns=total_columns,
                header_suffixes=first_header_suffixes,
                second_header_suffixes=second_header_suffixes,
                format=first_format,
                second_format=second_format,
                alignment=alignment,
                show_second_column=show_second_column,
                extractor=first_extractor,
                second_extractor=second_extractor,
            )
        )
        return self

    def mapper(self, mapper: AnyColumnMapper) -> "WorksheetBuilder":
        """Add an already constructed mapper."""
        if mapper is None:
            msg = "Mapper cannot be None."
            raise ValueError(msg)
        if not isinstance(mapper, ColumnMapper | MultipleColumnMapper | TwoColumnsMapper):
            msg = f"Unsupported column mapper type: {type(mapper).__name__}"
            raise TypeError(msg)
        self._mappers.append(mapper)
        return self

    def build_mappers(self) -> list[AnyColumnMapper]:
        return sort_mappers(self._mappers)


def build_mappers(
    configure_columns: Callable[[WorksheetBuilder], Any] | None,
) -> list[AnyColumnMapper]:
    """Run a column configuration callback and return the sorted mappers."""
    if configure_columns is None:
        msg = "configure_columns cannot be None."
        raise ValueError(msg)
    builder = WorksheetBuilder()
    configure_columns(builder)
    return builder.build_mappers()
