from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
import logging
from pathlib import Path
import re
from typing import Any

import requests

from .models import ExpenseType

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:5000/api/export-excel"
DOWNLOAD_FILENAME = "Travel_Expense_Claim.xlsx"

PENDING_MESSAGE = "Generating Excel file..."
SUCCESS_MESSAGE = "Excel file downloaded successfully!"
FAILURE_MESSAGE = "Failed to generate or download Excel. Check backend server."


@dataclass
class EmployeeInfo:
    employee_name: str = ""
    employee_no: str = ""
    email_id: str = ""
    project: str = ""
    period: str = ""
    submitted_by: str = ""
    date_submitted: str = ""


@dataclass
class ExpenseEntry:
    sl_no: int = 1
    date: str = ""
    bill_status: str = ""
    particulars: str = ""
    business_miles: str = ""
    rate: str = ""
    expense_type: str = field(default="", metadata={"wire": "type"})
    origin: str = field(default="", metadata={"wire": "from"})
    destination: str = field(default="", metadata={"wire": "to"})
    currency: str = ""
    amount: str = ""
    location: str = ""
    # Receipt shown next to the entry; never sent to the backend.
    file: Path | None = field(default=None, metadata={"transmit": False})

    @property
    def shows_route(self) -> bool:
        try:
            return ExpenseType(self.expense_type).has_route
        except ValueError:
            return False


@dataclass
class ClaimForm:
    """Form state for one travel expense claim and its submission."""

    endpoint: str = DEFAULT_ENDPOINT
    session: Any = None
    timeout: float = 30.0
    employee_info: EmployeeInfo = field(default_factory=EmployeeInfo)
    expenses: list[ExpenseEntry] = field(default_factory=lambda: [ExpenseEntry()])
    message: str = ""

    def update_employee_field(self, field_name: str, value: Any) -> None:
        _set_field(self.employee_info, field_name, value)

    def update_expense_field(self, index: int, field_name: str, value: Any) -> None:
        _set_field(self.expenses[index], field_name, value)

    def add_expense(self) -> ExpenseEntry:
        entry = ExpenseEntry(sl_no=len(self.expenses) + 1)
        self.expenses.append(entry)
        return entry

    def attach_file(self, index: int, file: Path | str | None) -> None:
        self.expenses[index].file = Path(file) if file is not None else None

    def reset(self) -> None:
        self.employee_info = EmployeeInfo()
        self.expenses = [ExpenseEntry()]

    def to_multipart(self) -> list[tuple[str, str]]:
        """Flatten the form into ``employeeInfo[...]`` and ``expenses[i][...]`` parts."""
        parts = [(f"employeeInfo[{key}]", value) for key, value in _wire_items(self.employee_info)]
        for index, expense in enumerate(self.expenses):
            parts.extend((f"expenses[{index}][{key}]", value) for key, value in _wire_items(expense))
        return parts

    def submit(self, download_dir: Path | str = ".") -> Path | None:
        """Post the claim and save the returned workbook into ``download_dir``.

        On success the form is reset. Any failure leaves the form as it was and
        only sets the failure message.
        """
        self.message = PENDING_MESSAGE
        http = self.session or requests
        multipart = [(name, (None, value)) for name, value in self.to_multipart()]
        target = Path(download_dir) / DOWNLOAD_FILENAME

        try:
            response = http.post(self.endpoint, files=multipart, timeout=self.timeout)
            response.raise_for_status()
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
        except (requests.RequestException, OSError):
            logger.exception("Error generating or downloading Excel file")
            self.message = FAILURE_MESSAGE
            return None

        self.message = SUCCESS_MESSAGE
        self.reset()
        return target


def _set_field(record: Any, field_name: str, value: Any) -> None:
    if field_name not in {f.name for f in fields(record)}:
        raise AttributeError(f"Unknown field: {field_name}")
    setattr(record, field_name, value)


def _wire_items(record: Any) -> list[tuple[str, str]]:
    items: list[tuple[str, str]] = []
    for f in fields(record):
        if not f.metadata.get("transmit", True):
            continue
        key = f.metadata.get("wire") or camel_case(f.name)
        items.append((key, form_value(getattr(record, f.name))))
    return items


def camel_case(name: str) -> str:
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), name)


def form_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
