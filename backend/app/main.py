from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from backend.config import settings
from backend.services.claim_payload import parse_claim_form
from backend.services.excel_export import ConfigurationError, ExcelExportService, ProcessingError

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

settings.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Travel Claim API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

export_service = ExcelExportService()


@app.exception_handler(ConfigurationError)
async def template_missing(request: Request, exc: ConfigurationError):
    return PlainTextResponse(
        "Server Error: Excel template file not found. Please check server console for details.",
        status_code=500,
    )


@app.exception_handler(ProcessingError)
async def processing_failed(request: Request, exc: ProcessingError):
    return PlainTextResponse(
        "Failed to process Excel template. Please check server console for errors.",
        status_code=500,
    )


@app.post("/api/export-excel")
async def export_excel(request: Request):
    form = await request.form()
    try:
        payload = parse_claim_form(form.multi_items())
    finally:
        await form.close()

    logger.info(
        "Received claim for %r with %d expenses",
        payload.employee_info.employee_name,
        len(payload.expenses),
    )

    content = await run_in_threadpool(export_service.generate_claim, payload.employee_info, payload.expenses)
    filename = f"Filled_Travel_Expense_Claim_{int(time.time() * 1000)}.xlsx"
    return Response(
        content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
