from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .billing.models import DEFAULT_PER_PAGE, GenerateOptions
from .core.errors import BillingError
from .normalize.dates import normalize_meter_date
from .services.billing_service import OUTPUT_FORMATS, BillingService

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3002


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="meterbill",
        description="根据抄表数据（.xlsx / .csv）生成抄表计费通知单",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate statements from a meter-reading table.")
    gen.add_argument("input", type=Path, help="Path to input .xlsx / .csv")
    gen.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file (default: <yyyy>年<MM>月抄表计费通知单.<format> next to the input).",
    )
    gen.add_argument("--title", dest="custom_title", default=None, help="Custom statement title.")
    gen.add_argument(
        "--per-page",
        dest="per_page",
        type=int,
        default=DEFAULT_PER_PAGE,
        help=f"Statements per page (default: {DEFAULT_PER_PAGE}).",
    )
    gen.add_argument("--reader", dest="meter_reader", default=None, help="Meter reader name (抄表人).")
    gen.add_argument("--date", dest="meter_date", default=None, help="Meter reading date (抄表日期).")
    gen.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(OUTPUT_FORMATS),
        default="docx",
        help="Output document format (default: docx).",
    )

    serve = sub.add_parser("serve", help="Run the upload web service.")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", DEFAULT_PORT)))

    return p


def _generate(args: argparse.Namespace) -> int:
    service = BillingService()
    options = GenerateOptions(
        custom_title=args.custom_title,
        per_page=args.per_page,
        meter_reader=args.meter_reader,
        meter_date=normalize_meter_date(args.meter_date),
    )
    generated = service.generate_from_path(args.input, options, fmt=args.output_format)

    out_path = args.output or args.input.resolve().parent / generated.filename
    service.write(generated, out_path)
    print(f"[OK] {generated.merchant_count} statement(s), {generated.page_count} page(s) -> {out_path}")
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("meterbill.main:app", host=args.host, port=args.port, log_level="info")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "generate":
            return _generate(args)
        return _serve(args)
    except BillingError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
