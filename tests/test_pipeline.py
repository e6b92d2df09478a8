"""Tests for dataset loading, report output and the end-to-end pipeline."""

import json
from datetime import date
from unittest.mock import Mock

import pandas as pd
import pytest
import requests

from seller_report import data_handler, parsers, settings
from seller_report.pipelines.report import SellerReportPipeline
from seller_report.schemas import ReportEntry, ReportOptions


@pytest.fixture
def dirs(tmp_path, monkeypatch):
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    monkeypatch.setattr(settings, "INPUT_DIR", input_dir)
    monkeypatch.setattr(settings, "OUTPUT_DIR", output_dir)
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", True)
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    return input_dir, output_dir


@pytest.fixture
def report():
    return [
        ReportEntry(
            seller_id="s1", name="Anna Ivanova", revenue=100.0, profit=30.0, sales_count=1,
            top_products=[{"sku": "A", "quantity": 2}, {"sku": "B", "quantity": 1}], bonus=4.5,
        ),
        ReportEntry(seller_id="s2", name="Boris Orlov", revenue=0.0, profit=0.0, sales_count=0, bonus=0.0),
    ]


def _write_dataset(input_dir, data, day="2025-06-30"):
    path = input_dir / f"sales_data_{day}.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestParseSalesDataset:
    def test_valid(self, sales_data):
        dataset = parsers.parse_sales_dataset({**sales_data, "customers": []})
        assert len(dataset.sellers) == 4

    def test_missing_collection(self, sales_data):
        del sales_data["products"]
        assert parsers.parse_sales_dataset(sales_data) is None

    def test_not_an_object(self):
        assert parsers.parse_sales_dataset([1, 2]) is None

    def test_schema_mismatch(self, sales_data):
        sales_data["sellers"] = [{"first_name": "No id"}]
        assert parsers.parse_sales_dataset(sales_data) is None

    def test_load_dataset(self, tmp_path, sales_data):
        path = _write_dataset(tmp_path, sales_data)
        dataset = parsers.load_dataset(path)
        assert dataset.purchase_records[0].receipt_id == "receipt_1"


class TestDataHandler:
    def test_dataframe(self, report):
        df = data_handler.report_to_dataframe(report)
        assert list(df.columns) == settings.REPORT_COLUMNS
        assert df.loc[0, "top_products"] == "A:2|B:1"
        assert df.loc[1, "top_products"] == ""

    def test_save_outputs(self, dirs, report):
        _, output_dir = dirs
        data_handler.save_outputs(report, "seller_report")

        csv_files = list(output_dir.glob("seller_report_*.csv"))
        json_files = list(output_dir.glob("seller_report_*.json"))
        assert len(csv_files) == 1
        assert len(json_files) == 1

        df = pd.read_csv(csv_files[0])
        assert df["seller_id"].tolist() == ["s1", "s2"]
        assert df["bonus"].tolist() == [4.5, 0.0]

        saved = json.loads(json_files[0].read_text(encoding="utf-8"))
        assert saved[0]["top_products"] == [{"sku": "A", "quantity": 2}, {"sku": "B", "quantity": 1}]

    def test_save_outputs_csv_only(self, dirs, report, monkeypatch):
        _, output_dir = dirs
        monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", False)
        data_handler.save_outputs(report, "seller_report")
        assert list(output_dir.glob("*.json")) == []

    def test_webhook_skipped_without_url(self, dirs, report, monkeypatch):
        post = Mock()
        monkeypatch.setattr(data_handler.requests, "post", post)
        data_handler.post_to_webhook(report)
        post.assert_not_called()

    def test_webhook_payload(self, dirs, report, monkeypatch):
        monkeypatch.setattr(settings, "WEBHOOK_URL", "https://hooks.example.com/report")
        post = Mock()
        monkeypatch.setattr(data_handler.requests, "post", post)

        data_handler.post_to_webhook(report, {"dataset_date": date(2025, 6, 30), "sellers": 2})

        post.assert_called_once()
        _, kwargs = post.call_args
        assert kwargs["json"]["reportType"] == "seller_report"
        assert kwargs["json"]["metadata"] == {"dataset_date": "2025-06-30", "sellers": 2}
        assert len(kwargs["json"]["reportData"]) == 2

    def test_webhook_error_is_logged(self, dirs, report, monkeypatch):
        monkeypatch.setattr(settings, "WEBHOOK_URL", "https://hooks.example.com/report")
        post = Mock(side_effect=requests.exceptions.ConnectionError("down"))
        monkeypatch.setattr(data_handler.requests, "post", post)
        data_handler.post_to_webhook(report)
        post.assert_called_once()


class TestSellerReportPipeline:
    def test_end_to_end(self, dirs, sales_data):
        input_dir, output_dir = dirs
        _write_dataset(input_dir, sales_data, "2025-06-29")
        _write_dataset(input_dir, sales_data, "2025-06-30")

        pipeline = SellerReportPipeline(test_mode=True)
        report = pipeline.run()

        assert [entry.seller_id for entry in report] == ["seller_1", "seller_2", "seller_3", "seller_4"]
        assert pipeline.status_summary["dataset_date"] == date(2025, 6, 30)
        assert pipeline.status_summary["sellers"] == 4
        assert pipeline.status_summary["total_bonus"] == 8.4
        assert len(list(output_dir.glob("seller_report_*.csv"))) == 1

    def test_posts_outside_test_mode(self, dirs, sales_data, monkeypatch):
        input_dir, _ = dirs
        _write_dataset(input_dir, sales_data)
        monkeypatch.setattr(settings, "WEBHOOK_URL", "https://hooks.example.com/report")
        post = Mock()
        monkeypatch.setattr(data_handler.requests, "post", post)

        SellerReportPipeline().run()
        post.assert_called_once()

    def test_injected_options(self, dirs, sales_data):
        input_dir, _ = dirs
        _write_dataset(input_dir, sales_data)
        options = ReportOptions(
            calculate_revenue=lambda item, product: 0,
            calculate_bonus=lambda index, total, seller: 1,
        )
        report = SellerReportPipeline(options=options, test_mode=True).run()
        assert all(entry.bonus == 1 for entry in report)

    def test_status_summary_resets_between_runs(self, dirs, sales_data):
        input_dir, _ = dirs
        path = _write_dataset(input_dir, sales_data)
        pipeline = SellerReportPipeline(test_mode=True)

        assert pipeline.run() is not None
        assert pipeline.status_summary["sellers"] == 4

        path.unlink()
        assert pipeline.run() is None
        assert pipeline.status_summary == {}

    def test_no_dataset(self, dirs):
        assert SellerReportPipeline(test_mode=True).run() is None

    def test_empty_collection_fails_transform(self, dirs, sales_data):
        input_dir, output_dir = dirs
        sales_data["purchase_records"] = []
        _write_dataset(input_dir, sales_data)
        assert SellerReportPipeline(test_mode=True).run() is None
        assert not output_dir.exists()

    def test_unknown_strategy_fails_transform(self, dirs, sales_data, monkeypatch):
        input_dir, _ = dirs
        _write_dataset(input_dir, sales_data)
        monkeypatch.setattr(settings, "BONUS_STRATEGY", "fancy")
        assert SellerReportPipeline(test_mode=True).run() is None
