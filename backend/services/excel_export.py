from __future__ import annotations

import logging
from copy import copy
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from pathlib import Path
from types import MappingProxyType
from typing import Any, Sequence

import yaml
from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from backend.config import settings
from backend.services.claim_payload import EmployeeInfo, ExpenseEntry

logger = logging.getLogger(__name__)

EXPENSE_COLUMN_MAP = MappingProxyType(
    {
        "Sl.no": "A",
        "Date": "B",
        "Bill status": "C",
        "Particulars": "D",
        "Business Miles": "E",
        "Rate": "F",
        "Amount": "H",
        "Food": "I",
        "Taxi/Cab charges": "J",
        "Local Conveyance": "K",
        "Perdium": "L",
        "Parking": "M",
        "Journey Fare": "N",
        "Accommodation": "O",
        "Entertainment": "P",
        "Communication": "Q",
        "Medical": "R",
        "Others": "S",
    }
)

CLASSIFICATION_COLUMNS = (
    "Food",
    "Taxi/Cab charges",
    "Local Conveyance",
    "Perdium",
    "Parking",
    "Journey Fare",
    "Accommodation",
    "Entertainment",
    "Communication",
    "Medical",
    "Others",
)

# Form values whose classification column carries a different name.
# Taxi must stay mapped: without it taxi amounts reach no classification column.
TYPE_COLUMN_ALIASES = MappingProxyType(
    {
        "Flight": "Journey Fare",
        "Taxi": "Taxi/Cab charges",
    }
)


class ConfigurationError(RuntimeError):
    """Raised when the workbook template is missing."""


class ProcessingError(RuntimeError):
    """Raised when filling or serializing the template fails."""


def classification_column(expense_type: str) -> str:
    return TYPE_COLUMN_ALIASES.get(expense_type, expense_type)


def write_cell(sheet: Worksheet, ref: str, value: Any, bold: bool = False) -> None:
    """Set a cell value and its bold flag. Other font attributes are preserved."""
    cell = sheet[ref]
    cell.value = value
    font = copy(cell.font)
    font.bold = bold
    cell.font = font


def parse_expense_date(value: str) -> date | datetime | str:
    if not value:
        return ""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        logger.warning("Writing unparseable expense date %r as text", value)
        return value
    # Excel cells cannot hold timezones; keep the wall-clock time.
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    return parsed


@dataclass
class ExcelExportService:
    """Export a travel expense claim into the pre-formatted workbook template."""

    template_path: Path = settings.TEMPLATE_PATH
    mapping_path: Path = settings.MAPPING_PATH

    def __post_init__(self) -> None:
        self.template_path = Path(self.template_path)
        self.mapping = self._load_mapping(Path(self.mapping_path))
        self.home_currencies = frozenset(self.mapping["tables"]["home"]["currencies"])

    @staticmethod
    def _load_mapping(mapping_path: Path) -> dict[str, Any]:
        with mapping_path.open("r", encoding="utf-8") as mapping_file:
            loaded = yaml.safe_load(mapping_file)

        if not isinstance(loaded, dict):
            msg = f"Mapping file must contain a dictionary at root: {mapping_path}"
            raise ValueError(msg)

        return loaded

    def generate_claim(self, employee_info: EmployeeInfo, expenses: Sequence[ExpenseEntry]) -> bytes:
        """Fill the template with one claim and return the workbook as xlsx bytes."""
        if not self.template_path.exists():
            logger.error("Excel template file not found at %s", self.template_path)
            raise ConfigurationError(f"Excel template file not found: {self.template_path}")

        try:
            workbook = load_workbook(self.template_path)
            sheet = self._select_sheet(workbook)

            self._map_heading(sheet)
            self._map_meta(sheet, employee_info)
            self._map_header_rows(sheet)
            self._map_expenses(sheet, expenses)
            self._map_foreign_title(sheet, expenses)

            buffer = BytesIO()
            workbook.save(buffer)
        except Exception as exc:
            logger.exception("Error processing Excel template %s", self.template_path)
            raise ProcessingError("Failed to process Excel template") from exc

        return buffer.getvalue()

    def _select_sheet(self, workbook: Workbook) -> Worksheet:
        sheet_name = self.mapping["workbook"].get("sheet_name")
        if sheet_name:
            return workbook[sheet_name]
        return workbook.worksheets[0]

    def _map_heading(self, sheet: Worksheet) -> None:
        for cell in self.mapping["clear_cells"]:
            write_cell(sheet, cell, "")

        heading = self.mapping["heading"]
        write_cell(sheet, heading["cell"], heading["text"], bold=True)

        labels = dict(self.mapping["labels"])
        home = self.mapping["tables"]["home"]
        labels[home["title_cell"]] = home["title"]
        for cell, default in labels.items():
            write_cell(sheet, cell, sheet[cell].value or default, bold=True)

    def _map_meta(self, sheet: Worksheet, employee_info: EmployeeInfo) -> None:
        for field, cell in self.mapping["meta"].items():
            write_cell(sheet, cell, getattr(employee_info, field))

    def _map_header_rows(self, sheet: Worksheet) -> None:
        for table in self.mapping["tables"].values():
            row = table["header_row"]
            for column in self.mapping["header_columns"]:
                ref = f"{column}{row}"
                write_cell(sheet, ref, sheet[ref].value, bold=True)

    def _table_for(self, currency: str) -> str | None:
        for name, table in self.mapping["tables"].items():
            if currency in table["currencies"]:
                return name
        return None

    def _map_expenses(self, sheet: Worksheet, expenses: Sequence[ExpenseEntry]) -> None:
        cursors = {name: int(table["start_row"]) for name, table in self.mapping["tables"].items()}
        written = dict.fromkeys(cursors, 0)

        for index, expense in enumerate(expenses):
            table = self._table_for(expense.currency)
            if table is None:
                logger.warning(
                    "Skipping expense %d with unknown or missing currency %r", index, expense.currency
                )
                continue

            row = cursors[table]
            cursors[table] += 1
            written[table] += 1
            self._write_expense_row(sheet, row, index + 1, expense)

        logger.info("Filled %d of %d expenses %s", sum(written.values()), len(expenses), written)

    def _write_expense_row(self, sheet: Worksheet, row: int, sequence: int, expense: ExpenseEntry) -> None:
        def ref(name: str) -> str:
            return f"{EXPENSE_COLUMN_MAP[name]}{row}"

        bill_status = sheet[ref("Bill status")]
        bill_status.comment = None
        write_cell(sheet, bill_status.coordinate, "")

        write_cell(sheet, ref("Sl.no"), sequence)
        write_cell(sheet, ref("Date"), parse_expense_date(expense.date))
        write_cell(sheet, ref("Bill status"), expense.bill_status)
        write_cell(sheet, ref("Particulars"), expense.description())
        write_cell(sheet, ref("Business Miles"), expense.business_miles)
        write_cell(sheet, ref("Rate"), expense.rate)
        write_cell(sheet, ref("Amount"), expense.amount)

        target = classification_column(expense.expense_type)
        for name in CLASSIFICATION_COLUMNS:
            write_cell(sheet, ref(name), expense.amount if name == target else 0.0)

    def _map_foreign_title(self, sheet: Worksheet, expenses: Sequence[ExpenseEntry]) -> None:
        foreign = self.mapping["tables"]["foreign"]
        currency = next(
            (e.currency for e in expenses if e.currency and e.currency not in self.home_currencies),
            None,
        )
        title = f"Expenses Incurred in {currency}" if currency else foreign["title"]
        write_cell(sheet, foreign["title_cell"], title, bold=True)

    def get_mandatory_cells(self) -> list[str]:
        verification = self.mapping.get("verification", {})
        mandatory_cells = verification.get("mandatory_cells", [])
        if not isinstance(mandatory_cells, list):
            msg = "verification.mandatory_cells must be a list of cell references"
            raise ValueError(msg)
        return mandatory_cells


def read_cells(path: Path | str, cells: list[str], sheet_name: str | None = None) -> dict[str, Any]:
    """Utility for validation/testing: read exact cell values from an exported workbook."""
    workbook: Workbook = load_workbook(path, data_only=False)
    sheet = workbook[sheet_name] if sheet_name else workbook.worksheets[0]
    return {cell: sheet[cell].value for cell in cells}
