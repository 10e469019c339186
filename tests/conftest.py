# Common pytest fixtures for all test modules
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.workbook.defined_name import DefinedName
from pydantic import BaseModel

from xlsxgen.xlsx_common import XLSXGeneratorConfig
from xlsxgen.xlsx_table import XLSXTableFormatter

TEMPLATE_ROW_FILL = "FFDDEBF7"


# Test Models
class Employee(BaseModel):
    """Test model for employee data."""

    employee_id: int
    first_name: str
    last_name: str
    hire_date: date
    salary: float
    department: str | None = None


class MonthlyPlan(BaseModel):
    """Planned and actual figures per month."""

    name: str
    planned: list[float]
    actual: list[float] | None = None


class InvoiceLine(BaseModel):
    description: str
    quantity: int
    price: Decimal


class Invoice(BaseModel):
    """Model filling the invoice template."""

    customer: str
    invoice_date: date
    lines: list[InvoiceLine]

    @property
    def total(self) -> Decimal:
        return sum((line.quantity * line.price for line in self.lines), Decimal(0))


class CreditNote(BaseModel):
    customer: str


# XLSX Testing Fixtures
@pytest.fixture
def sample_employees():
    """Sample employee data."""
    return [
        Employee(
            employee_id=1,
            first_name="John",
            last_name="Doe",
            hire_date=date(2023, 1, 15),
            salary=75000.0,
            department="Engineering",
        ),
        Employee(
            employee_id=2,
            first_name="Jane",
            last_name="Smith",
            hire_date=date(2023, 3, 1),
            salary=82000.0,
        ),
    ]


@pytest.fixture
def sample_plans():
    return [
        MonthlyPlan(name="Alpha", planned=[1.0, 2.0], actual=[1.5, 2.5]),
        MonthlyPlan(name="Beta", planned=[3.0], actual=None),
    ]


@pytest.fixture
def sample_invoice():
    """Invoice with three lines."""
    return Invoice(
        customer="ACME Corp",
        invoice_date=date(2024, 5, 17),
        lines=[
            InvoiceLine(description="Widget", quantity=2, price=Decimal("9.50")),
            InvoiceLine(description="Gadget", quantity=1, price=Decimal("24.00")),
            InvoiceLine(description="Gizmo", quantity=5, price=Decimal("1.25")),
        ],
    )


@pytest.fixture
def formatter():
    return XLSXTableFormatter(XLSXGeneratorConfig(auto_adjust_columns=False))


def build_invoice_template() -> Workbook:
    """Build the invoice template used by the template tests.

    Sheet "Invoice":
        B1  CustomerName (workbook scope)
        B2  InvoiceDate (workbook scope)
        A3  Lines, header row with captions in A3:C3, styled template row 4
        B6  Total (workbook scope), label in A6
        A8:C8 merged footer
    Sheet "Summary":
        B2  Total (sheet scope, same name as above)
        A5  Remark (sheet scope, no sheet prefix)
    """
    workbook = Workbook()
    invoice = workbook.active
    invoice.title = "Invoice"
    summary = workbook.create_sheet("Summary")

    invoice["A1"] = "Customer:"
    invoice["B1"] = "{customer}"
    invoice["A2"] = "Date:"
    invoice["B2"] = "{date}"
    for column, caption in enumerate(("Description", "Qty", "Price"), start=1):
        cell = invoice.cell(row=3, column=column, value=caption)
        cell.font = Font(bold=True)

    thin = Side(style="thin")
    for column in range(1, 4):
        cell = invoice.cell(row=4, column=column)
        cell.fill = PatternFill("solid", fgColor=TEMPLATE_ROW_FILL)
        cell.border = Border(bottom=thin)
    invoice.row_dimensions[6].height = 30

    invoice["A6"] = "Total:"
    invoice["A8"] = "Thank you for your business"
    invoice.merge_cells("A8:C8")

    summary["A2"] = "Total:"

    workbook.defined_names["CustomerName"] = DefinedName(
        "CustomerName", attr_text="Invoice!$B$1"
    )
    workbook.defined_names["InvoiceDate"] = DefinedName(
        "InvoiceDate", attr_text="Invoice!$B$2"
    )
    workbook.defined_names["Lines"] = DefinedName("Lines", attr_text="Invoice!$A$3")
    workbook.defined_names["Total"] = DefinedName("Total", attr_text="Invoice!$B$6")
    summary.defined_names["Total"] = DefinedName("Total", attr_text="Summary!$B$2")
    summary.defined_names["Remark"] = DefinedName("Remark", attr_text="$A$5")
    return workbook


@pytest.fixture
def invoice_template():
    """In-memory invoice template workbook."""
    return build_invoice_template()


@pytest.fixture
def invoice_template_path(tmp_path) -> Path:
    """Invoice template saved to disk."""
    path = tmp_path / "invoice_template.xlsx"
    build_invoice_template().save(path)
    return path
