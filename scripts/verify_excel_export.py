from __future__ import annotations

from pathlib import Path

from backend.config import settings
from backend.services.claim_payload import parse_claim_form
from backend.services.excel_export import ExcelExportService, read_cells
from backend.services.template_builder import build_demo_template


def main() -> int:
    settings.configure_logging()
    service = ExcelExportService()

    if not service.template_path.exists():
        build_demo_template(service.template_path)

    payload = parse_claim_form(
        [
            ("employeeInfo[employeeName]", "Asha Rao"),
            ("employeeInfo[employeeNo]", "E-1042"),
            ("employeeInfo[emailId]", "asha.rao@example.com"),
            ("employeeInfo[project]", "Engineering Services"),
            ("employeeInfo[period]", "March 2026"),
            ("employeeInfo[submittedBy]", "Asha Rao"),
            ("employeeInfo[dateSubmitted]", "2026-04-02"),
            ("expenses[0][date]", "2026-03-03"),
            ("expenses[0][billStatus]", "Paid"),
            ("expenses[0][type]", "Flight"),
            ("expenses[0][from]", "Bengaluru"),
            ("expenses[0][to]", "Pune"),
            ("expenses[0][particulars]", "client workshop"),
            ("expenses[0][currency]", "INR"),
            ("expenses[0][amount]", "8400"),
            ("expenses[1][date]", "2026-03-09"),
            ("expenses[1][billStatus]", "Pending"),
            ("expenses[1][type]", "Accommodation"),
            ("expenses[1][particulars]", "Hotel, 2 nights"),
            ("expenses[1][currency]", "EUR"),
            ("expenses[1][amount]", "310.50"),
        ]
    )

    output_path = Path("artifacts/sample_expense_claim.xlsx")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(service.generate_claim(payload.employee_info, payload.expenses))

    mandatory_cells = service.get_mandatory_cells()
    values = read_cells(output_path, mandatory_cells, service.mapping["workbook"]["sheet_name"])
    missing = [cell for cell, value in values.items() if value in (None, "")]

    if missing:
        print("Verification failed. Missing mandatory values in:", ", ".join(missing))
        return 1

    print(f"Verification passed. Export generated at {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
