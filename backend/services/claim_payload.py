"""Request payload models for the claim export endpoint.

The form collector posts flat multipart fields named ``employeeInfo[<key>]``
and ``expenses[<index>][<key>]``. This module folds them back into models.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

EMPLOYEE_FIELD = re.compile(r"^employeeInfo\[(\w+)\]$")
EXPENSE_FIELD = re.compile(r"^expenses\[(\d+)\]\[(\w+)\]$")
LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

ROUTE_TYPES = frozenset({"Taxi", "Flight"})


def parse_float(value: Any) -> float:
    """Coerce a form value to a float, reading only its leading number.

    Anything that does not start with a number becomes ``0.0``.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = LEADING_NUMBER.match(str(value or ""))
        if not match:
            return 0.0
        number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


class _FormModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


class EmployeeInfo(_FormModel):
    employee_name: str = ""
    employee_no: str = ""
    email_id: str = ""
    project: str = ""
    period: str = ""
    submitted_by: str = ""
    date_submitted: str = ""


class ExpenseEntry(_FormModel):
    sl_no: str = ""
    date: str = ""
    bill_status: str = ""
    particulars: str = ""
    expense_type: str = Field(default="", alias="type")
    origin: str = Field(default="", alias="from")
    destination: str = Field(default="", alias="to")
    business_miles: float = 0.0
    rate: float = 0.0
    currency: str = ""
    amount: float = 0.0
    location: str = ""

    @field_validator("business_miles", "rate", "amount", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return parse_float(value)

    def description(self) -> str:
        """Particulars, prefixed with the route for taxi and flight entries."""
        if self.expense_type not in ROUTE_TYPES:
            return self.particulars

        if self.origin and self.destination:
            route = f"From: {self.origin}, To: {self.destination}"
        elif self.origin:
            route = f"From: {self.origin}"
        elif self.destination:
            route = f"To: {self.destination}"
        else:
            return self.particulars

        if self.particulars:
            return f"{route} - {self.particulars}"
        return route


@dataclass
class ClaimPayload:
    employee_info: EmployeeInfo
    expenses: list[ExpenseEntry] = field(default_factory=list)


def parse_claim_form(items: Iterable[tuple[str, Any]]) -> ClaimPayload:
    """Group flat form items into employee info and ordered expense entries.

    Unknown keys and uploaded files are ignored. Expenses keep the order of
    their submitted indices.
    """
    employee_fields: dict[str, Any] = {}
    expense_fields: dict[int, dict[str, Any]] = {}

    for name, value in items:
        if not isinstance(value, str):
            logger.debug("Ignoring file part %s", name)
            continue

        employee_match = EMPLOYEE_FIELD.match(name)
        if employee_match:
            employee_fields[employee_match.group(1)] = value
            continue

        expense_match = EXPENSE_FIELD.match(name)
        if expense_match:
            index = int(expense_match.group(1))
            expense_fields.setdefault(index, {})[expense_match.group(2)] = value

    return ClaimPayload(
        employee_info=EmployeeInfo.model_validate(employee_fields),
        expenses=[ExpenseEntry.model_validate(expense_fields[index]) for index in sorted(expense_fields)],
    )
