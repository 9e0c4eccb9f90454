"""
Command-line dashboard.

Usage:
    python -m dashboard 0xabc... [--api-url URL] [--window-days 14] [--json]
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console

from config.settings import settings
from utils.logging_setup import setup_logging
from .controller import DashboardController
from .fetcher import PortfolioApiClient
from .render import render_dashboard
from .state import DashboardState, DashboardStatus
from .view import build_view

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dashboard",
        description="Opinion Portfolio Tracker - wallet positions, trades and PnL",
    )
    parser.add_argument("address", help="Wallet address (0x + 40 hex chars)")
    parser.add_argument("--api-url", default=None, help=f"Proxy base URL (default {settings.DASHBOARD_API_URL})")
    parser.add_argument("--window-days", type=int, default=None,
                        help=f"Volume chart window in days (default {settings.VOLUME_WINDOW_DAYS})")
    parser.add_argument("--trades", type=int, default=None,
                        help=f"Recent trade rows to show (default {settings.RECENT_TRADES_ROWS})")
    parser.add_argument("--json", action="store_true", help="Print the view model as JSON instead of tables")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    return parser


async def load(address: str, api_url: Optional[str] = None, window_days: Optional[int] = None) -> DashboardState:
    controller = DashboardController(PortfolioApiClient(base_url=api_url), window_days=window_days)
    return await controller.submit(address)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, rich=True)

    if args.window_days is not None and args.window_days < 1:
        print("--window-days must be at least 1", file=sys.stderr)
        return 2

    state = asyncio.run(load(args.address, args.api_url, args.window_days))

    if args.json:
        print(json.dumps(build_view(state, args.trades), indent=2, default=str))
    else:
        render_dashboard(state, Console(), args.trades)

    return 1 if state.status is DashboardStatus.ERROR else 0
