from seller_report import settings
from seller_report.logger import setup_logger
from seller_report.pipelines.report import SellerReportPipeline


def run_process():
    """Main orchestration function to run the seller report process."""
    setup_logger()
    SellerReportPipeline(test_mode=settings.TEST_MODE).run()


if __name__ == "__main__":
    run_process()
