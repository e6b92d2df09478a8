import json
import logging
from typing import Any, Optional

import pandas as pd
import requests

from . import settings
from . import utils
from .schemas import ReportEntry

logger = logging.getLogger(__name__)


def _format_top_products(entry: ReportEntry) -> str:
    return "|".join(f"{product.sku}:{product.quantity}" for product in entry.top_products)


def report_to_dataframe(report: list[ReportEntry]) -> pd.DataFrame:
    """Flattens the report into one row per seller, top products joined as 'SKU:qty|SKU:qty'."""
    rows = []
    for entry in report:
        row = entry.model_dump()
        row["top_products"] = _format_top_products(entry)
        rows.append(row)
    return pd.DataFrame(rows, columns=settings.REPORT_COLUMNS)


def save_outputs(report: list[ReportEntry], filename_base: str):
    """Saves the report to CSV and conditionally to JSON, with dated filenames."""
    settings.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.csv"
    json_path = settings.OUTPUT_DIR / f"{filename_base}_{date_suffix}.json"

    report_to_dataframe(report).to_csv(csv_path, index=False)
    logger.info(f"✅ Report saved to: {csv_path}")

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump([entry.model_dump(mode="json") for entry in report], f, indent=2, ensure_ascii=False)
        logger.info(f"✅ JSON output saved to: {json_path}")
    else:
        logger.info("Skipping JSON file save as per configuration.")


def post_to_webhook(
    validated_data: list[ReportEntry],
    metadata: Optional[dict[str, Any]] = None,
    report_type: str = "seller_report",
):
    """
    Posts the report and its run metadata to the webhook.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return

    logger.info(f"🚀 Posting {report_type} to webhook: {settings.WEBHOOK_URL}")

    payload = {
        "reportType": report_type,
        "reportData": [entry.model_dump(mode="json") for entry in validated_data],
        "metadata": {
            key: value.isoformat() if hasattr(value, "isoformat") else value
            for key, value in (metadata or {}).items()
        },
    }

    try:
        response = requests.post(settings.WEBHOOK_URL, json=payload, timeout=15)
        response.raise_for_status()
        logger.info("✅ Report successfully posted to webhook.")
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
