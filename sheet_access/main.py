from __future__ import annotations

import os

import uvicorn

from .api import app, get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


def main() -> None:
  settings = get_settings()

  logger.info("=" * 60)
  logger.info("Starting Sheet Access API")
  logger.info("=" * 60)
  logger.info(f"Port: {settings.port}")
  logger.info(f"Environment: {os.getenv('ENVIRONMENT', 'production')}")
  logger.info(f"Log Level: {os.getenv('LOG_LEVEL', 'INFO')}")
  logger.info(f"Backend: {settings.backend}")
  logger.info(f"Entry cell: {settings.entry_sheet_name}!{settings.entry_cell}")

  if settings.backend == "google":
    missing = []
    if not settings.spreadsheet_id:
      missing.append("DEFAULT_SPREADSHEET_URL")
    if not (os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON") or settings.credentials_path):
      missing.append("GOOGLE_SERVICE_ACCOUNT_JSON or GOOGLE_SERVICE_ACCOUNT_FILE")
    if missing:
      logger.warning("Missing environment variables:")
      for var in missing:
        logger.warning(f"   - {var}")
      logger.warning("⚠️  /exec will return 503 until the spreadsheet is configured")

  logger.info("=" * 60)

  uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
  main()
