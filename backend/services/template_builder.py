from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Border, Font, Side

HEADER_LABELS = (
    "Sl.no",
    "Date",
    "Bill status",
    "Particulars",
    "Business Miles",
    "Rate",
    "Currency",
    "Amount",
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

COLUMNS = "ABCDEFGHIJKLMNOPQRS"


def build_demo_template(template_path: Path, sheet_name: str = "Claim") -> Path:
    """Write a minimal travel claim template with the layout the exporter expects."""
    template_path = Path(template_path)
    template_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    ws["A2"] = "EXPENSES CLAIM"
    ws["A5"] = "Employee Name :"
    ws["A6"] = "Employee No :"
    ws["A7"] = "E-mail ID :"
    ws["F5"] = "Project :"
    ws["O5"] = "Period :"
    ws["A9"] = "Expenses Incurred in Indian Rupees"
    ws["A20"] = "Expenses Incurred in USD"

    thin = Side(border_style="thin", color="000000")
    for header_row, first_row, last_row in ((10, 11, 18), (21, 22, 50)):
        for column, label in zip(COLUMNS, HEADER_LABELS):
            ws[f"{column}{header_row}"] = label
            ws[f"{column}{header_row}"].font = Font(size=10)
        for row in range(first_row, last_row + 1):
            for column in COLUMNS:
                ws[f"{column}{row}"].border = Border(top=thin, left=thin, right=thin, bottom=thin)

    # Stale sample data left in the template by whoever last edited it.
    ws["C11"] = "Paid"
    ws["C11"].comment = Comment("Select Paid, Pending or Reimbursed", "Finance")
    ws["J11"] = 99.0

    ws["D52"] = "Net Claim payable"
    ws["H52"] = "=SUM(H11:H18)+SUM(H22:H50)"
    ws["A60"] = "Submitted by :"
    ws["L60"] = "Approved by :"
    ws["A61"] = "Date :"
    ws["L61"] = "Date :"

    wb.save(template_path)
    return template_path
