# backend/meterbill/api/statements.py
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, Response
from pydantic import ValidationError

from ..contracts.generate import GenerateForm
from ..core.errors import BillingError
from ..services.billing_service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["statements"])

_service = BillingService()


INDEX_HTML = """<!doctype html>
<html lang="zh-CN">
<head>
<meta charset="utf-8"/>
<title>水电表生成系统</title>
<meta name="viewport" content="width=device-width, initial-scale=1"/>
<style>
body{font-family:-apple-system,BlinkMacSystemFont,Segoe UI,Roboto,Helvetica,Arial,sans-serif;padding:24px;}
.card{max-width:680px;margin:0 auto;border:1px solid #e5e7eb;border-radius:12px;padding:24px}
label{display:block;margin:12px 0 6px;color:#374151}
input,select{width:100%;padding:10px;border:1px solid #d1d5db;border-radius:8px}
button{margin-top:16px;padding:10px 16px;background:#2563eb;color:white;border:none;border-radius:8px;cursor:pointer}
</style>
</head>
<body>
<div class="card">
  <h2>水电表生成系统</h2>
  <form action="/api/statements" method="post" enctype="multipart/form-data">
    <label>选择文件（.xlsx 或 .csv）</label>
    <input name="file" type="file" accept=".xlsx,.csv" required />
    <label>自定义标题（可选，默认：yyyy年MM月抄表计费通知单）</label>
    <input name="custom_title" type="text"/>
    <label>每页表格数量</label>
    <input name="per_page" type="text" value="4"/>
    <label>抄表人</label>
    <input name="meter_reader" type="text"/>
    <label>抄表日期</label>
    <input name="meter_date" type="text" placeholder="例如：2025年08月16日"/>
    <label>输出格式</label>
    <select name="output_format"><option value="docx">Word (.docx)</option><option value="xlsx">Excel (.xlsx)</option></select>
    <button type="submit">生成</button>
  </form>
</div>
</body>
</html>"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def index() -> HTMLResponse:
    return HTMLResponse(INDEX_HTML)


def _content_disposition(filename: str) -> str:
    # RFC 5987: non-ASCII file names go through filename*
    return f"attachment; filename=\"statements\"; filename*=UTF-8''{quote(filename)}"


@router.post("/api/statements")
async def generate_statements(
    file: UploadFile = File(...),
    custom_title: Optional[str] = Form(None),
    per_page: Optional[str] = Form(None),
    meter_reader: Optional[str] = Form(None),
    meter_date: Optional[str] = Form(None),
    output_format: Optional[str] = Form(None),
) -> Response:
    try:
        form = GenerateForm.model_validate(
            {
                "custom_title": custom_title,
                "per_page": per_page,
                "meter_reader": meter_reader,
                "meter_date": meter_date,
                "output_format": output_format or "docx",
            }
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"code": "invalid_form", "message": "表单参数无效", "details": e.errors(include_url=False)},
        ) from e

    filename = file.filename or "upload.csv"
    data = await file.read()

    try:
        options = form.to_options()
        generated = await run_in_threadpool(
            _service.generate_from_bytes,
            data,
            filename,
            options,
            fmt=form.output_format,
        )
    except BillingError as e:
        logger.warning("generation rejected for %s: %s", filename, e)
        raise HTTPException(status_code=422, detail=e.to_dict()) from e
    except Exception as e:
        logger.exception("generation failed for %s: %s", filename, e)
        raise HTTPException(status_code=500, detail={"code": "internal", "message": "生成失败"}) from e

    return Response(
        content=generated.content,
        media_type=generated.media_type,
        headers={
            "Content-Disposition": _content_disposition(generated.filename),
            "X-Merchant-Count": str(generated.merchant_count),
            "X-Page-Count": str(generated.page_count),
        },
    )
