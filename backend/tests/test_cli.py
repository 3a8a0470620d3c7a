"""
Tests for the meterbill command line.
"""

import io

from docx import Document
from openpyxl import load_workbook

from meterbill.cli import main


class TestGenerateCommand:
    def test_writes_docx(self, sample_csv_bytes, tmp_path, capsys):
        src = tmp_path / "readings.csv"
        src.write_bytes(sample_csv_bytes)
        out = tmp_path / "out.docx"

        code = main(["generate", str(src), "-o", str(out), "--title", "七月水电费", "--reader", "王师傅"])

        assert code == 0
        assert "[OK] 2 statement(s), 1 page(s)" in capsys.readouterr().out
        doc = Document(io.BytesIO(out.read_bytes()))
        assert doc.tables[0].cell(0, 0).text == "七月水电费"
        assert doc.tables[0].cell(1, 5).text == "王师傅"

    def test_default_output_next_to_input(self, header, rows_factory, csv_factory, tmp_path):
        src = tmp_path / "readings.csv"
        src.write_bytes(csv_factory(header, rows_factory(5)))

        code = main(["generate", str(src), "--format", "xlsx", "--per-page", "2", "--date", "2025-08-16"])

        assert code == 0
        outputs = list(tmp_path.glob("*抄表计费通知单.xlsx"))
        assert len(outputs) == 1
        ws = load_workbook(outputs[0])["通知单"]
        assert len(ws.row_breaks.brk) == 2
        assert ws["G2"].value == "抄表日期：2025年08月16日"

    def test_billing_error_exit_code(self, csv_factory, tmp_path, capsys):
        src = tmp_path / "readings.csv"
        src.write_bytes(csv_factory(["店铺名称"], [["x"]]))

        assert main(["generate", str(src)]) == 2
        assert "[ERROR] 缺少必需列" in capsys.readouterr().err

    def test_invalid_per_page(self, sample_csv_bytes, tmp_path, capsys):
        src = tmp_path / "readings.csv"
        src.write_bytes(sample_csv_bytes)

        assert main(["generate", str(src), "--per-page", "0"]) == 2
        assert "每页数量" in capsys.readouterr().err

    def test_negative_fee_exit_code(self, header, sample_rows, csv_factory, tmp_path, capsys):
        sample_rows[1][10] = "-200"
        src = tmp_path / "readings.csv"
        src.write_bytes(csv_factory(header, sample_rows))

        assert main(["generate", str(src)]) == 2
        assert "第3行" in capsys.readouterr().err
        assert not list(tmp_path.glob("*.docx"))
