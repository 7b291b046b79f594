"""Runtime settings for the claim export backend."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BACKEND_ROOT = Path(__file__).resolve().parents[1]

TEMPLATE_PATH = Path(
    os.getenv("TRAVEL_CLAIM_TEMPLATE", BACKEND_ROOT / "templates" / "travel_claim_template.xlsx")
)
MAPPING_PATH = Path(os.getenv("TRAVEL_CLAIM_MAPPING", BACKEND_ROOT / "config" / "excel_mapping.yaml"))

HOST = "0.0.0.0"
PORT = 5000


def configure_logging(level: str | None = None) -> None:
    """Initialize basic logging with a shared format and log level.

    The level can be provided directly or via the ``LOG_LEVEL`` environment
    variable (defaults to ``INFO``).
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
