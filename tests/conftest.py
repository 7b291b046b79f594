"""Shared fixtures for the claim export tests."""
from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import load_workbook

from backend.services.excel_export import ExcelExportService
from backend.services.template_builder import build_demo_template


@pytest.fixture
def template_path(tmp_path: Path) -> Path:
    return build_demo_template(tmp_path / "travel_claim_template.xlsx")


@pytest.fixture
def export_service(template_path: Path) -> ExcelExportService:
    return ExcelExportService(template_path=template_path)


@pytest.fixture
def open_sheet():
    """Load the first worksheet of generated xlsx bytes."""

    def _open(content: bytes):
        return load_workbook(BytesIO(content)).worksheets[0]

    return _open
