from __future__ import annotations

import csv
import io
import sys
from datetime import date
from pathlib import Path
from typing import Any, List

import pytest


def pytest_sessionstart(session):
    """
    Make sure backend/ (where the meterbill package lives) is on sys.path,
    even when pytest is started from the repository root.
    """
    backend_dir = Path(__file__).resolve().parents[1]  # .../backend
    p = str(backend_dir)
    if p not in sys.path:
        sys.path.insert(0, p)


HEADER = [
    "铺面编号",
    "店铺名称",
    "电表1上期读数",
    "电表1本期读数",
    "电表2上期读数",
    "电表2本期读数",
    "上期水表读数",
    "本期水表读数",
    "水费单价",
    "电费单价",
    "水电人工费",
    "垃圾处理费",
]


def make_rows(count: int) -> List[List[Any]]:
    """`count` merchants, one meter each (meter 2 blank), distinct readings."""
    rows = []
    for i in range(count):
        rows.append(
            [
                f"A{101 + i}",
                f"商户{i + 1}",
                1000 + i * 10,
                1100 + i * 10,
                None,
                None,
                50,
                58,
                "1.118",
                "1.03",
                "20",
                "",
            ]
        )
    return rows


def to_csv_bytes(header: List[str], rows: List[List[Any]]) -> bytes:
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(header)
    for r in rows:
        w.writerow(["" if v is None else v for v in r])
    return buf.getvalue().encode("utf-8-sig")


@pytest.fixture
def header() -> List[str]:
    return list(HEADER)


@pytest.fixture
def today() -> date:
    return date(2025, 8, 16)


@pytest.fixture
def sample_rows() -> List[List[Any]]:
    return [
        # two meters, usages 746 + 80 = 826
        ["A101", "张记面馆", 1254, 2000, "300", "380", 50, 58, "1.1180", "1.0300", "30", "15.5"],
        # single meter, blank fees
        ["A102", "李家超市", 500, 620, None, None, 12, 20, 1.118, 1.03, None, ""],
    ]


@pytest.fixture
def sample_csv_bytes(header, sample_rows) -> bytes:
    return to_csv_bytes(header, sample_rows)


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir(parents=True, exist_ok=True)
    return out


@pytest.fixture
def rows_factory():
    return make_rows


@pytest.fixture
def csv_factory():
    return to_csv_bytes
