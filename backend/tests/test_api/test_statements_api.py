"""
Tests for the HTTP upload endpoint.
"""

from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from meterbill.main import EXPOSED_HEADERS, _parse_cors_origins, app, create_app
from meterbill.services.billing_service import DOCX_MEDIA_TYPE, XLSX_MEDIA_TYPE


@pytest.fixture
def client():
    return TestClient(app)


def upload(client, data: bytes, filename="readings.csv", **form):
    return client.post(
        "/api/statements",
        files={"file": (filename, data, "text/csv")},
        data=form,
    )


class TestStatementsApi:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.text == "ok"

    def test_index_form(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert 'action="/api/statements"' in r.text
        for name in ("custom_title", "per_page", "meter_reader", "meter_date"):
            assert f'name="{name}"' in r.text

    def test_generate_docx(self, client, sample_csv_bytes):
        r = upload(client, sample_csv_bytes, per_page="4", meter_reader="王师傅", meter_date="2025-8-16")

        assert r.status_code == 200
        assert r.headers["content-type"] == DOCX_MEDIA_TYPE
        assert r.headers["x-merchant-count"] == "2"
        assert r.headers["x-page-count"] == "1"
        assert quote("抄表计费通知单.docx") in r.headers["content-disposition"]
        assert r.content[:2] == b"PK"

    def test_generate_xlsx_with_blank_fields(self, client, sample_csv_bytes):
        r = upload(client, sample_csv_bytes, custom_title="", per_page="", output_format="xlsx")
        assert r.status_code == 200
        assert r.headers["content-type"] == XLSX_MEDIA_TYPE

    def test_schema_error_is_422(self, client, csv_factory):
        r = upload(client, csv_factory(["铺面编号", "店铺名称"], [["A1", "x"]]))

        assert r.status_code == 422
        detail = r.json()["detail"]
        assert detail["code"] == "schema"
        assert "水费单价" in detail["details"]["missing_columns"]

    def test_field_error_names_row(self, client, header, sample_rows, csv_factory):
        sample_rows[1][8] = "abc"
        r = upload(client, csv_factory(header, sample_rows))

        assert r.status_code == 422
        assert r.json()["detail"]["details"]["row"] == 3

    def test_negative_fee_is_422(self, client, header, sample_rows, csv_factory):
        sample_rows[1][10] = "-200"
        r = upload(client, csv_factory(header, sample_rows))

        assert r.status_code == 422
        detail = r.json()["detail"]
        assert detail["code"] == "computation"
        assert detail["details"] == {"row": 3, "field": "labor_fee"}

    def test_non_positive_per_page(self, client, sample_csv_bytes):
        r = upload(client, sample_csv_bytes, per_page="0")
        assert r.status_code == 422
        assert r.json()["detail"]["code"] == "config"

    def test_non_numeric_per_page(self, client, sample_csv_bytes):
        r = upload(client, sample_csv_bytes, per_page="four")
        assert r.status_code == 422
        assert r.json()["detail"]["code"] == "invalid_form"

    def test_unsupported_upload(self, client):
        r = upload(client, b"%PDF-1.4", filename="readings.pdf")
        assert r.status_code == 422
        assert r.json()["detail"]["code"] == "unsupported_format"


class TestCorsOrigins:
    def test_default(self):
        assert _parse_cors_origins(None) == ["http://localhost:3002", "http://127.0.0.1:3002"]

    def test_env_value(self):
        assert _parse_cors_origins(" http://a.test , ,http://b.test") == ["http://a.test", "http://b.test"]

    def test_configured_origin_sees_generation_headers(self, sample_csv_bytes):
        client = TestClient(create_app(["http://front.test"]))
        r = client.post(
            "/api/statements",
            files={"file": ("readings.csv", sample_csv_bytes, "text/csv")},
            headers={"Origin": "http://front.test"},
        )

        assert r.status_code == 200
        assert r.headers["access-control-allow-origin"] == "http://front.test"
        exposed = {h.strip().lower() for h in r.headers["access-control-expose-headers"].split(",")}
        assert {h.lower() for h in EXPOSED_HEADERS} <= exposed

    def test_unknown_origin_not_allowed(self):
        client = TestClient(create_app(["http://front.test"]))
        r = client.get("/health", headers={"Origin": "http://other.test"})
        assert r.status_code == 200
        assert "access-control-allow-origin" not in r.headers
