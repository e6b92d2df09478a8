import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from seller_report import data_handler

logger = logging.getLogger(__name__)


class DataPipeline(ABC):
    """
    Abstract base class for report pipelines.
    Follows an Extract -> Transform -> Load (ETL) pattern.
    """

    def __init__(self, report_type: str, test_mode: bool = False):
        self.report_type = report_type
        self.test_mode = test_mode
        # Run metadata (dataset date, counts, ...) sent along with the report
        self.status_summary: dict[str, Any] = {}

    def run(self) -> Optional[list[Any]]:
        """
        Orchestrates the pipeline execution. Returns the validated data, or None if a stage failed.
        """
        logger.info(f"🚀 STEP: {self.report_type.upper()}")
        logger.info("-" * 30)

        # Metadata belongs to a single run
        self.status_summary = {}

        # --- 1. EXTRACT ---
        raw_data = self.extract()
        if raw_data is None:
            logger.warning(f"⚠️ No data extracted for {self.report_type}. Nothing to report.")
            return None

        # --- 2. TRANSFORM ---
        validated_data = self.transform(raw_data)
        if validated_data is None:
            logger.error(f"❌ Transformation failed for {self.report_type}.")
            return None

        # --- 3. LOAD ---
        self.load(validated_data)

        logger.info(f"✅ {self.report_type.capitalize()} Pipeline Finished.\n")
        logger.info("=" * 60)
        return validated_data

    @abstractmethod
    def extract(self) -> Any | None:
        """
        Responsible for finding and parsing the input files.
        Should also populate self.status_summary as it goes.
        """
        pass

    @abstractmethod
    def transform(self, raw_data: Any) -> list[Any] | None:
        """
        Responsible for turning the extracted data into a list of validated Pydantic models.
        """
        pass

    def load(self, validated_data: list[Any]):
        """
        Saves data to disk and posts to webhook.
        """
        if self.status_summary:
            logger.info("\n--- Final Status Summary ---")
            for key, value in self.status_summary.items():
                logger.info(f"{key}: {value.isoformat() if hasattr(value, 'isoformat') else value}")

        if validated_data:
            data_handler.save_outputs(validated_data, self.report_type)
        else:
            logger.warning("No data to save to disk.")

        if not self.test_mode:
            data_handler.post_to_webhook(
                validated_data=validated_data,
                metadata=self.status_summary,
                report_type=self.report_type,
            )
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")
