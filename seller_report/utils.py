import json
import logging
import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_DATE_SUFFIX = re.compile(r"(\d{4}-\d{2}-\d{2})\.json$")


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def to_number(value: Any) -> int | float:
    """
    Coerces a raw field to a number.
    Missing, non-numeric, NaN and infinite values all become 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        # int()/float() accept digit separators ("1_000"), amounts never carry them
        if "_" in text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0

    if not math.isfinite(number):
        return 0
    return number


def round_money(value: Any) -> float:
    """Rounds to 2 decimals, half away from zero (1.005 -> 1.01, -2.675 -> -2.68)."""
    number = to_number(value)
    # str() gives the shortest repr, so the decimal digits match what was written
    with localcontext() as ctx:
        # the largest finite float has 309 integer digits
        ctx.prec = 320
        rounded = Decimal(str(number)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(rounded) + 0.0  # normalises -0.0


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the most recent '<prefix>YYYY-MM-DD.json' file in the directory.
    Returns the path and the date parsed from its name, or None if nothing matches.
    """
    if not directory.exists():
        logger.warning(f"Input directory not found: {directory}")
        return None

    candidates = []
    for path in directory.glob(f"{prefix}*.json"):
        match = _DATE_SUFFIX.search(path.name)
        if not match or not path.name.startswith(prefix):
            continue
        try:
            file_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            continue
        candidates.append((file_date, path))

    if not candidates:
        return None

    file_date, path = max(candidates)
    return path, file_date


def load_json(file_path: Path) -> Any | None:
    """
    Reads a JSON document, trying UTF-8 with BOM support first and latin-1 second.
    Returns None if the file is missing or cannot be decoded.
    """
    try:
        with open(file_path, encoding="utf-8-sig") as f:
            return json.load(f)

    except UnicodeDecodeError:
        logger.info(f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'.")
        try:
            with open(file_path, encoding="latin-1") as f:
                return json.load(f)
        except (OSError, ValueError) as e_latin1:
            logger.error(f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}")
            return None

    except FileNotFoundError:
        logger.info(f"Dataset not found at {file_path}, skipping.")
        return None

    except json.JSONDecodeError as e_json:
        logger.error(f"{file_path.name} is not valid JSON. Reason: {e_json}")
        return None
