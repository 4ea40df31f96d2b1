#!/usr/bin/env python3
"""
Quote trades against a pool snapshot file.

The snapshot is YAML (or JSON) with `pool` and `window` sections:

    pool:
      n_pt: 1000000000
      n_asset: 1000000000
      scalar_root_nano: 100000000
      last_implied_rate_nano: 1050000000
      n_ib: 2000000000        # optional, liquidity quotes only
      lp_supply: 1000000000   # optional, liquidity quotes only
    window:
      start_unix_ts: 1700000000
      end_unix_ts: 1731536000

Examples:
    python tools/quote_cli.py --snapshot pool.yaml market
    python tools/quote_cli.py --snapshot pool.yaml pt-to-ib 1000000
    python tools/quote_cli.py --snapshot pool.yaml --config quote.yaml pay SOL 1.5
    python tools/quote_cli.py --snapshot pool.yaml add-liquidity --pt 1000000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from splitamm.integration import QuoteEngine, QuoteResult, config_from_env, load_config  # noqa: E402
from splitamm.state import snapshot_from_dict, window_from_dict  # noqa: E402


def setup_logging(level: str = "WARNING") -> None:
    numeric = getattr(logging, level.upper(), logging.WARNING)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.setLevel(numeric)
    root.handlers.clear()
    root.addHandler(handler)


def _load_snapshot(path: Path):
    obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping) or "pool" not in obj or "window" not in obj:
        raise ValueError(f"{path}: snapshot must contain 'pool' and 'window' sections")
    return snapshot_from_dict(obj["pool"]), window_from_dict(obj["window"])


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Quote PT/IB trades against a pool snapshot.")
    ap.add_argument("--snapshot", type=Path, required=True, help="YAML/JSON file with pool + window")
    ap.add_argument("--config", type=Path, default=None, help="YAML quote config (default: SPLITAMM_CONFIG or built-ins)")
    ap.add_argument("--now", type=int, default=None, help="Unix timestamp to quote at (default: current time)")
    ap.add_argument("--log-level", default="WARNING")

    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("market", help="Current market observables")
    p = sub.add_parser("pt-to-ib", help="IB out for PT in")
    p.add_argument("amount", type=int)
    p = sub.add_parser("ib-to-pt", help="PT consistent with an IB amount")
    p.add_argument("amount", type=int)
    p = sub.add_parser("lock", help="IB to lock for a merchant target (base units)")
    p.add_argument("amount", type=int)
    p = sub.add_parser("pay", help="Payment quote for a registered market (UI units)")
    p.add_argument("symbol")
    p.add_argument("amount")
    p = sub.add_parser("mint", help="PT + YT minted for an IB amount")
    p.add_argument("amount", type=int)
    p = sub.add_parser("redeem", help="IB returned for a PT + YT amount")
    p.add_argument("amount", type=int)
    p = sub.add_parser("add-liquidity", help="Counter-amount and LP minted for a one-sided deposit size")
    side = p.add_mutually_exclusive_group(required=True)
    side.add_argument("--pt", type=int, default=None, help="PT amount deposited")
    side.add_argument("--ib", type=int, default=None, help="IB amount deposited")
    p = sub.add_parser("remove-liquidity", help="PT and IB returned for burning LP")
    p.add_argument("amount", type=int)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)

    config = config_from_env(load_config(args.config) if args.config is not None else None)
    pool, window = _load_snapshot(args.snapshot)
    now = args.now if args.now is not None else int(time.time())
    engine = QuoteEngine(config)

    result: QuoteResult
    if args.command == "market":
        result = engine.quote_market(pool, window, now)
    elif args.command == "pt-to-ib":
        result = engine.quote_pt_to_ib(pool, window, now, args.amount)
    elif args.command == "ib-to-pt":
        result = engine.quote_ib_to_pt(pool, window, now, args.amount)
    elif args.command == "lock":
        result = engine.quote_lock(pool, window, now, args.amount)
    elif args.command == "pay":
        result = engine.quote_payment(args.symbol, args.amount, pool, window, now)
    elif args.command == "mint":
        result = engine.quote_mint(window, now, args.amount)
    elif args.command == "redeem":
        result = engine.quote_redeem(window, now, args.amount)
    elif args.command == "add-liquidity":
        result = engine.quote_add_liquidity(pool, pt_amount=args.pt, ib_amount=args.ib)
    else:
        result = engine.quote_remove_liquidity(pool, args.amount)

    out: dict[str, Any] = {"ok": result.ok, "now": now}
    if result.ok:
        out.update(result.value or {})
    else:
        out["error"] = result.error
        out["code"] = result.code
    print(json.dumps(out, sort_keys=True))
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
