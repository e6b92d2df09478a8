import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")

# --- Filename Configuration ---
# Datasets are expected as <prefix>YYYY-MM-DD.json, e.g. sales_data_2025-06-30.json
DATASET_FILENAME_PREFIX = os.getenv("DATASET_FILENAME_PREFIX", "sales_data_")
REPORT_FILENAME_BASE = os.getenv("REPORT_FILENAME_BASE", "seller_report")
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")
TEST_MODE = os.getenv("TEST_MODE", "false").lower() in ("1", "true", "yes")

# --- Shared Business Logic ---
TOP_PRODUCTS_LIMIT = int(os.getenv("TOP_PRODUCTS_LIMIT", "10"))

# Keys into strategies.REVENUE_STRATEGIES / strategies.BONUS_STRATEGIES
REVENUE_STRATEGY = os.getenv("REVENUE_STRATEGY", "simple")
BONUS_STRATEGY = os.getenv("BONUS_STRATEGY", "profit_rank")

# Column order of the CSV report.
REPORT_COLUMNS = [
    "seller_id",
    "name",
    "revenue",
    "profit",
    "sales_count",
    "top_products",
    "bonus",
]

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_FILENAME = os.getenv("LOG_FILENAME", "seller_report.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 3
