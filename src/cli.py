"""
物流报价 CLI

所有命令输出结构化 JSON，日志写到 stderr 与 logs/。

用法:
    python -m src.cli quote --origin Shanghai --destination Guangzhou --business-line SCI \
        --cargo-type DG --mode LTL --weight 600 --volume 1.5
    python -m src.cli quote ... --compatible-only
    python -m src.cli analyze --origin Zhangjiagang --destination Shanghai --business-line SCI \
        --cargo-type NDG --mode LTL --weight 500
    python -m src.cli carriers
    python -m src.cli carriers --id lianqiang
    python -m src.cli cities
"""

import argparse
import asyncio
import json
import sys
from typing import Any


def _json_out(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _raw_request(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "origin": args.origin,
        "destination": args.destination,
        "business_line": args.business_line,
        "cargo_type": args.cargo_type,
        "mode": args.mode,
        "weight_kg": args.weight,
        "volume_cbm": args.volume,
    }


def _quote_payload(request, outcomes, compatible_only: bool = False) -> dict[str, Any]:
    available = [item for item in outcomes if item.is_compatible]
    shown = available if compatible_only else outcomes
    return {
        "request": request.to_dict(),
        "total_carriers": len(outcomes),
        "compatible_carriers": len(available),
        "best": available[0].to_dict() if available else None,
        "results": [item.to_dict() for item in shown],
    }


async def cmd_quote(args: argparse.Namespace) -> None:
    from src.core.error_handler import QuoteRequestError
    from src.modules.quote import QuoteService

    service = QuoteService()
    try:
        request, outcomes = service.quote_raw(_raw_request(args))
    except QuoteRequestError as e:
        _json_out({"error": e.message, "details": e.details})
        sys.exit(1)

    _json_out(_quote_payload(request, outcomes, compatible_only=bool(args.compatible_only)))


async def cmd_analyze(args: argparse.Namespace) -> None:
    from src.core.error_handler import AIError, QuoteRequestError
    from src.modules.analysis.service import QuoteAnalysisService, analysis_payload
    from src.modules.quote import QuoteService

    service = QuoteService()
    try:
        request, outcomes = service.quote_raw(_raw_request(args))
    except QuoteRequestError as e:
        _json_out({"error": e.message, "details": e.details})
        sys.exit(1)

    payload = _quote_payload(request, outcomes, compatible_only=True)
    analyzer = QuoteAnalysisService()
    try:
        analysis = await analyzer.analyze(request, outcomes)
    except AIError as e:
        payload.update(analysis_payload(None, e))
        _json_out(payload)
        sys.exit(1)

    payload.update(analysis_payload(analysis))
    _json_out(payload)


async def cmd_carriers(args: argparse.Namespace) -> None:
    from src.modules.quote import DEFAULT_CARRIERS, find_carrier

    if args.id:
        carrier = find_carrier(DEFAULT_CARRIERS, args.id)
        if carrier is None:
            _json_out({"error": f"Unknown carrier: {args.id}"})
            sys.exit(1)
        _json_out(carrier.to_dict())
        return

    _json_out(
        {
            "total": len(DEFAULT_CARRIERS),
            "carriers": [carrier.to_dict() for carrier in DEFAULT_CARRIERS],
        }
    )


async def cmd_cities(args: argparse.Namespace) -> None:
    from src.core.config import get_config

    quote_cfg = get_config().get_section("quote", {})
    _json_out(
        {
            "cities": quote_cfg.get("cities", []),
            "default_origin": quote_cfg.get("default_origin"),
            "default_destination": quote_cfg.get("default_destination"),
        }
    )


def _add_request_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--origin", required=True, help="始发地城市")
    p.add_argument("--destination", required=True, help="目的地城市")
    p.add_argument("--business-line", required=True, type=str.upper, choices=["SCI", "PHI", "PCI", "FBI"])
    p.add_argument("--cargo-type", required=True, type=str.upper, choices=["DG", "NDG"], help="危险品 DG / 普货 NDG")
    p.add_argument("--mode", required=True, type=str.upper, choices=["LTL", "FTL"], help="零担 LTL / 整车 FTL")
    p.add_argument("--weight", required=True, type=float, help="实际重量（kg）")
    p.add_argument("--volume", type=float, default=0.0, help="体积（CBM）")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logistics-quote",
        description="承运商报价评估工具",
    )
    sub = parser.add_subparsers(dest="command")

    # quote
    p = sub.add_parser("quote", help="计算各承运商报价")
    _add_request_arguments(p)
    p.add_argument("--compatible-only", action="store_true", help="只输出可承运的报价")

    # analyze
    p = sub.add_parser("analyze", help="计算报价并生成AI分析")
    _add_request_arguments(p)

    # carriers
    p = sub.add_parser("carriers", help="查看承运商策略表")
    p.add_argument("--id", default=None, help="承运商ID")

    # cities
    sub.add_parser("cities", help="查看可选城市")

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    dispatch = {
        "quote": cmd_quote,
        "analyze": cmd_analyze,
        "carriers": cmd_carriers,
        "cities": cmd_cities,
    }

    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    from src.core.config import get_config
    from src.core.error_handler import ConfigError

    # 先加载配置，日志级别和目录在第一条日志前生效
    try:
        get_config()
    except ConfigError as e:
        _json_out({"error": e.message, "details": e.details})
        sys.exit(1)

    try:
        asyncio.run(handler(args))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        _json_out({"error": str(e)})
        sys.exit(1)


if __name__ == "__main__":
    main()
