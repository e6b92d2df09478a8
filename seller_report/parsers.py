import logging
from pathlib import Path

from pydantic import ValidationError

from .schemas import SalesDataset
from .utils import load_json

logger = logging.getLogger(__name__)


def parse_sales_dataset(raw: dict) -> SalesDataset | None:
    """
    Transforms a decoded dataset document into a SalesDataset.
    The document must hold 'sellers', 'products' and 'purchase_records' lists;
    any other top-level keys (e.g. 'customers') are ignored.
    """
    if not isinstance(raw, dict):
        logger.error(f"Expected a JSON object at the top level, got {type(raw).__name__}.")
        return None

    missing = [key for key in ("sellers", "products", "purchase_records") if key not in raw]
    if missing:
        logger.error(f"Dataset is missing collections: {', '.join(missing)}")
        return None

    try:
        return SalesDataset(
            sellers=raw["sellers"],
            products=raw["products"],
            purchase_records=raw["purchase_records"],
        )
    except ValidationError as e:
        logger.error("❌ Dataset does not match the schema!")
        logger.error(e)
        return None


def load_dataset(file_path: Path) -> SalesDataset | None:
    """Loads a dataset JSON file and parses it. Returns None on any failure."""
    raw = load_json(file_path)
    if raw is None:
        return None

    dataset = parse_sales_dataset(raw)
    if dataset is not None:
        logger.info(
            f"✅ Parsed {file_path.name}: {len(dataset.sellers)} sellers, "
            f"{len(dataset.products)} products, {len(dataset.purchase_records)} records."
        )
    return dataset
