from .core import (
    ClaimForm,
    EmployeeInfo,
    ExpenseEntry,
)
from .models import BillStatus, Currency, ExpenseType

__all__ = [
    "BillStatus",
    "ClaimForm",
    "Currency",
    "EmployeeInfo",
    "ExpenseEntry",
    "ExpenseType",
]
