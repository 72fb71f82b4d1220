"""
Application entry point.

This module defines a simple command-line interface for running the
analytics over a CSV trade history.  It leverages the modules under
`tradelog/` to load configuration and trades, compute metrics and
warnings, and generate reports.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config.schema import Config, load_config
from .data.csv_data import CSVTradeLoader
from .behavior.warnings import detect_warnings
from .reporting.metrics import compute_metrics
from .reporting.report import generate_report
from .reporting.series import filter_by_period


def _setup_logging(verbose: bool) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments and dispatch to the requested command."""
    parser = argparse.ArgumentParser(description="Trading journal analytics")
    parser.add_argument('mode', choices=['report', 'metrics', 'warnings'], help="What to produce")
    parser.add_argument('--trades', required=True, help="Path to the trades CSV file")
    parser.add_argument('--config', default=None, help="Path to configuration YAML file")
    parser.add_argument('--out-dir', default=None, help="Report output directory")
    parser.add_argument(
        '--period',
        choices=['all', 'daily', 'weekly', 'monthly', 'yearly'],
        default='all',
        help="Restrict metrics to trades closed in the current period",
    )
    parser.add_argument('--balance', type=float, default=None, help="Reference account balance")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    try:
        config = load_config(args.config) if args.config else Config()
        trades = CSVTradeLoader(args.trades).load()
    except (OSError, ValueError) as exc:
        logging.error("%s", exc)
        return 1

    if args.mode == 'report':
        logging.info("Generating report for %d trades...", len(trades))
        out_dir = generate_report(trades, config, out_dir=args.out_dir, account_balance=args.balance)
        logging.info("Report complete. Results saved to the '%s' directory.", out_dir)
    elif args.mode == 'metrics':
        selected = filter_by_period(trades, args.period, timezone=config.timezone)
        metrics = compute_metrics(selected)
        json.dump(metrics.to_dict(infinity=config.reporting.profit_factor_infinity), sys.stdout, indent=2)
        sys.stdout.write('\n')
    else:
        warnings = detect_warnings(trades, args.balance, config=config)
        json.dump([w.to_dict() for w in warnings], sys.stdout, indent=2)
        sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
