"""Command-line interface: analyze one wallet and print the report."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from ethmonitor.app_context import AppContext
from ethmonitor.config.logging_config import setup_logging
from ethmonitor.config.settings import Settings, get_settings, set_settings
from ethmonitor.core.address import is_valid_address
from ethmonitor.core.exceptions import AppError
from ethmonitor.domain.views import WalletAnalysisReport

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ethmonitor",
        description="Analyze an Ethereum wallet's balances, transfers and swap activity.",
    )
    parser.add_argument("-a", "--address", required=True, help="Ethereum address to analyze")
    parser.add_argument(
        "-t",
        "--transfers",
        type=int,
        default=settings.default_transfer_count,
        help="Maximum number of transfers to analyze (default: %(default)s)",
    )
    parser.add_argument("--balances-api-key", help="API key for balance lookups")
    parser.add_argument("--prices-api-key", help="API key for price lookups")
    parser.add_argument("--tokens-api-key", help="API key for token metadata lookups")
    parser.add_argument("--transfers-api-key", help="API key for transfer history lookups")
    parser.add_argument(
        "-o",
        "--output",
        help="Write the report to this file (CSV if it ends in .csv, JSON otherwise)",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with any API keys given on the command line."""
    overrides = {
        field: value
        for field, value in (
            ("balances_api_key", args.balances_api_key),
            ("prices_api_key", args.prices_api_key),
            ("tokens_api_key", args.tokens_api_key),
            ("transfers_api_key", args.transfers_api_key),
        )
        if value
    }
    if not overrides:
        return settings
    return settings.model_copy(update=overrides)


def print_report(report: WalletAnalysisReport, out=None) -> None:
    out = out or sys.stdout
    print(f"\nStats for {report.wallet_address}", file=out)
    print("-" * 36, file=out)
    print(f"Total Transactions: {report.total_transaction_count}", file=out)
    print(f"Estimated Swaps: {report.estimated_swap_count}", file=out)
    print(f"Total Volume USD: ${report.total_volume_usd:.6f}", file=out)
    print(f"Total Balance USD: ${report.total_balance_usd:.6f}", file=out)

    print("\nToken Balances:", file=out)
    for balance in report.balances:
        print(f"Token: {balance.symbol} ({balance.contract_address})", file=out)
        print(f"Balance: {balance.balance} | USD: ${balance.usd_value:.6f}", file=out)
        print("-" * 36, file=out)

    print(f"\nHistorical Transfers (latest {len(report.transfers)}):", file=out)
    for txn in report.transfers:
        print(
            f"[{txn.timestamp.isoformat()}] {txn.asset} {txn.from_address} -> "
            f"{txn.to_address} {txn.value} ({txn.category})",
            file=out,
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    if not is_valid_address(args.address):
        print(f"Invalid Ethereum address: {args.address}", file=sys.stderr)
        return 1
    if args.transfers < 1:
        print("--transfers must be at least 1", file=sys.stderr)
        return 1

    settings = apply_overrides(settings, args)
    set_settings(settings)
    setup_logging()

    context = AppContext(settings)
    try:
        print(f"\nStarting analysis for address: {args.address}")
        if args.output:
            report = context.analyzer.analyze_and_export(args.address, args.transfers, args.output)
        else:
            report = context.analyzer.analyze(args.address, args.transfers)
        print_report(report)
        if args.output:
            print(f"\nReport written to {args.output}")
        print("Done.")
        return 0
    except AppError as e:
        logger.debug("Analysis failed", exc_info=True)
        print(f"Error during analysis: {e.message}", file=sys.stderr)
        return 1
    finally:
        context.close()


if __name__ == "__main__":
    sys.exit(main())
