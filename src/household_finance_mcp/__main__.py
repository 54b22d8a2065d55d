"""
CLI entry point for the household finance MCP server.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from household_finance_mcp.core.identity import StaticIdentityProvider, UserIdentity
from household_finance_mcp.core.market import DEFAULT_GOLD_PRICE_PER_GRAM, GoldPriceFeed
from household_finance_mcp.server import run_server


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Household Finance MCP Server - Expose balances, history and zakat through MCP"
    )
    parser.add_argument(
        "--data-path",
        type=Path,
        help="Path to JSON data document (default: ~/.household-finance/data.json)",
    )
    parser.add_argument(
        "--gold-price",
        type=float,
        default=DEFAULT_GOLD_PRICE_PER_GRAM,
        help="Gold price per gram used for the nisab (default: %(default).0f)",
    )
    parser.add_argument(
        "--gold-price-url",
        help="HTTP endpoint returning the gold price per gram as JSON",
    )
    parser.add_argument(
        "--gold-price-field",
        default="price",
        help="Dotted path to the price in the endpoint's JSON (default: price)",
    )
    parser.add_argument("--user-name", help="Signed-in user's display name")
    parser.add_argument("--user-email", default="", help="Signed-in user's email")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main() -> None:
    """Main entry point for the CLI."""
    args = build_parser().parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,  # MCP uses stdout for protocol, so log to stderr
    )

    gold_feed = GoldPriceFeed(
        url=args.gold_price_url,
        price_field=args.gold_price_field,
        initial_price=args.gold_price,
    )
    user = UserIdentity(name=args.user_name, email=args.user_email) if args.user_name else None

    try:
        asyncio.run(
            run_server(
                data_path=args.data_path,
                gold_feed=gold_feed,
                identity=StaticIdentityProvider(user),
            )
        )
    except KeyboardInterrupt:
        logging.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logging.exception(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
