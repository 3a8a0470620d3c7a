"""
Tests for PipelineOrchestrator.
"""

import pytest

from meterbill.billing.models import GenerateOptions
from meterbill.core.errors import BillingError, ComputationError, ConfigError, FieldParseError, SchemaError
from meterbill.pipeline.orchestrator import PipelineOrchestrator, build_billing_document
from meterbill.pipeline.table_reader import DecodedTable, read_table_bytes


class TestPipelineOrchestrator:
    """Test suite for PipelineOrchestrator."""

    @pytest.fixture
    def orchestrator(self, today):
        """Create a PipelineOrchestrator with a fixed generation date."""
        return PipelineOrchestrator(GenerateOptions(per_page=4, today=today))

    def test_process_bytes(self, orchestrator, sample_csv_bytes):
        result = orchestrator.process_bytes(sample_csv_bytes, "readings.csv")

        assert [b.merchant_name for b in result.bills] == ["张记面馆", "李家超市"]
        assert all(b.computed for b in result.bills)
        assert result.document.page_sizes == (2,)
        assert result.document.summary is not None
        assert len(result.document.summary.rows) == 4

    def test_process_file(self, orchestrator, sample_csv_bytes, tmp_path):
        path = tmp_path / "readings.csv"
        path.write_bytes(sample_csv_bytes)
        assert len(orchestrator.process_file(path).bills) == 2

    def test_ten_merchants_three_pages(self, orchestrator, header, rows_factory):
        table = DecodedTable(header=header, rows=rows_factory(10), source="ten")
        doc = orchestrator.process_table(table).document
        assert doc.page_sizes == (4, 4, 2)

    def test_row_numbers_follow_sheet(self, header, sample_rows):
        table = DecodedTable(header=header, rows=sample_rows, first_row_number=5)
        result = build_billing_document(table)
        assert [b.row_number for b in result.bills] == [5, 6]


class TestFailFast:
    """Any failure rejects the whole document."""

    def test_missing_columns(self, header, sample_rows):
        table = DecodedTable(header=header[:8], rows=sample_rows)
        with pytest.raises(SchemaError):
            build_billing_document(table)

    def test_bad_value_in_last_row(self, header, rows_factory):
        rows = rows_factory(5)
        rows[-1][7] = "五十八"
        with pytest.raises(FieldParseError) as ei:
            build_billing_document(DecodedTable(header=header, rows=rows))
        assert ei.value.row == 6

    def test_negative_price(self, header, rows_factory):
        rows = rows_factory(2)
        rows[0][9] = "-1.03"
        with pytest.raises(ComputationError):
            build_billing_document(DecodedTable(header=header, rows=rows))

    def test_negative_fee_from_upload(self, header, sample_rows, csv_factory):
        sample_rows[1][10] = "-200"
        table = read_table_bytes(csv_factory(header, sample_rows), "readings.csv")
        with pytest.raises(BillingError) as ei:
            build_billing_document(table)
        assert ei.value.code == "computation"

    def test_bad_per_page(self):
        with pytest.raises(ConfigError):
            PipelineOrchestrator(GenerateOptions(per_page=-2))
