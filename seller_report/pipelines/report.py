import logging

from seller_report import engine, parsers, settings, strategies, utils
from seller_report.errors import SalesReportError
from seller_report.pipeline import DataPipeline
from seller_report.schemas import ReportEntry, ReportOptions, SalesDataset

logger = logging.getLogger(__name__)


class SellerReportPipeline(DataPipeline):
    def __init__(self, options: ReportOptions | None = None, test_mode: bool = False):
        super().__init__(settings.REPORT_FILENAME_BASE, test_mode=test_mode)
        # Strategies come from settings unless the caller injects its own
        self.options = options

    def extract(self) -> SalesDataset | None:
        logger.info("--- Looking for Sales Dataset ---")

        found_info = utils.find_latest_report(settings.INPUT_DIR, settings.DATASET_FILENAME_PREFIX)
        if not found_info:
            logger.warning(f"  > ⚠️  File missing ({settings.DATASET_FILENAME_PREFIX}*.json).")
            return None

        path, file_date = found_info
        logger.info(f"  > Found: {path.name} (File Date: {file_date})")

        dataset = parsers.load_dataset(path)
        if dataset is None:
            return None

        self.status_summary["dataset_date"] = file_date
        self.status_summary["sellers"] = len(dataset.sellers)
        self.status_summary["purchase_records"] = len(dataset.purchase_records)
        return dataset

    def transform(self, dataset: SalesDataset) -> list[ReportEntry] | None:
        logger.info("\n--- Building Seller Report ---")

        try:
            options = self.options or ReportOptions(
                calculate_revenue=strategies.get_revenue_strategy(settings.REVENUE_STRATEGY),
                calculate_bonus=strategies.get_bonus_strategy(settings.BONUS_STRATEGY),
            )
            report = engine.analyze_sales_data(dataset, options, top_limit=settings.TOP_PRODUCTS_LIMIT)
        except SalesReportError as e:
            logger.error("❌ Report generation failed!")
            logger.error(e)
            return None

        self.status_summary["total_bonus"] = utils.round_money(sum(entry.bonus for entry in report))
        logger.info(f"✅ Report built ({len(report)} sellers).")
        return report
