from pathlib import Path
import tempfile
import unittest

import requests

from travel_claim import BillStatus, ClaimForm, Currency, ExpenseEntry, ExpenseType
from travel_claim.core import FAILURE_MESSAGE, SUCCESS_MESSAGE


class FakeResponse:
    def __init__(self, content: bytes = b"", status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


class ClaimFormTestCase(unittest.TestCase):
    def test_initial_state_has_one_blank_expense(self):
        form = ClaimForm()
        self.assertEqual(len(form.expenses), 1)
        self.assertEqual(form.expenses[0].sl_no, 1)
        self.assertEqual(form.employee_info.employee_name, "")

    def test_add_expense_numbers_by_position(self):
        form = ClaimForm()
        form.add_expense()
        entry = form.add_expense()
        self.assertEqual([e.sl_no for e in form.expenses], [1, 2, 3])
        self.assertIs(entry, form.expenses[2])

    def test_updates_replace_single_fields(self):
        form = ClaimForm()
        form.update_employee_field("employee_name", "Asha Rao")
        form.update_expense_field(0, "expense_type", ExpenseType.FLIGHT)
        form.update_expense_field(0, "amount", "100")

        self.assertEqual(form.employee_info.employee_name, "Asha Rao")
        self.assertTrue(form.expenses[0].shows_route)
        self.assertEqual(form.expenses[0].amount, "100")

        with self.assertRaises(AttributeError):
            form.update_employee_field("salary", "1")
        with self.assertRaises(IndexError):
            form.update_expense_field(3, "amount", "1")

    def test_multipart_namespaces_fields_and_skips_files(self):
        form = ClaimForm()
        form.update_employee_field("email_id", "asha@example.com")
        form.update_expense_field(0, "expense_type", ExpenseType.TAXI)
        form.update_expense_field(0, "origin", "Office")
        form.update_expense_field(0, "bill_status", BillStatus.PAID)
        form.update_expense_field(0, "currency", Currency.INR)
        form.attach_file(0, "receipts/taxi.png")
        form.add_expense()

        parts = dict(form.to_multipart())

        self.assertEqual(parts["employeeInfo[emailId]"], "asha@example.com")
        self.assertEqual(parts["employeeInfo[dateSubmitted]"], "")
        self.assertEqual(parts["expenses[0][type]"], "Taxi")
        self.assertEqual(parts["expenses[0][from]"], "Office")
        self.assertEqual(parts["expenses[0][billStatus]"], "Paid")
        self.assertEqual(parts["expenses[0][currency]"], "INR")
        self.assertEqual(parts["expenses[1][slNo]"], "2")
        self.assertNotIn("expenses[0][file]", parts)
        self.assertEqual(form.expenses[0].file, Path("receipts/taxi.png"))

    def test_submit_saves_download_and_resets(self):
        session = FakeSession(FakeResponse(b"xlsx-bytes"))
        form = ClaimForm(endpoint="http://claims.test/api/export-excel", session=session)
        form.update_employee_field("employee_name", "Asha Rao")
        form.add_expense()

        with tempfile.TemporaryDirectory() as tmp:
            saved = form.submit(tmp)

            self.assertEqual(saved, Path(tmp) / "Travel_Expense_Claim.xlsx")
            self.assertEqual(saved.read_bytes(), b"xlsx-bytes")

        url, kwargs = session.calls[0]
        self.assertEqual(url, "http://claims.test/api/export-excel")
        self.assertIn(("employeeInfo[employeeName]", (None, "Asha Rao")), kwargs["files"])
        self.assertEqual(form.message, SUCCESS_MESSAGE)
        self.assertEqual(form.employee_info.employee_name, "")
        self.assertEqual(len(form.expenses), 1)

    def test_submit_failure_keeps_state(self):
        for session in (
            FakeSession(FakeResponse(b"boom", status_code=500)),
            FakeSession(error=requests.ConnectionError("refused")),
        ):
            form = ClaimForm(session=session)
            form.update_employee_field("employee_name", "Asha Rao")

            with tempfile.TemporaryDirectory() as tmp:
                self.assertIsNone(form.submit(tmp))
                self.assertFalse(any(Path(tmp).iterdir()))

            self.assertEqual(form.message, FAILURE_MESSAGE)
            self.assertEqual(form.employee_info.employee_name, "Asha Rao")

    def test_expense_type_labels(self):
        self.assertEqual(ExpenseType.FLIGHT.label, "Journey Fare")
        self.assertEqual(ExpenseType.FOOD.label, "Food")
        self.assertFalse(ExpenseEntry(expense_type="Food").shows_route)
        self.assertFalse(ExpenseEntry(expense_type="").shows_route)


if __name__ == "__main__":
    unittest.main()
