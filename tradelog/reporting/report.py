"""
Report generation utilities.

This module turns a trade history into human-readable artefacts:
CSV files of the trades, equity curve and profit per period, a JSON
summary of performance metrics and behavior warnings, and a PNG chart
of the equity curve.
"""

from __future__ import annotations

import os
import json
import logging
from typing import List, Optional
import pandas as pd
import matplotlib

# Use non-interactive backend for environments without display
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ..config.schema import Config
from ..journal.models import Trade
from ..behavior.warnings import detect_warnings
from .metrics import compute_metrics
from .portfolio import portfolio_summary, asset_allocation, portfolio_performance
from .series import equity_curve, profit_by_period, distribution, pnl_summary

logger = logging.getLogger(__name__)


def build_summary(
    trades: List[Trade],
    config: Config,
    account_balance: Optional[float] = None,
    now=None,
) -> dict:
    """Collect every report over `trades` into one JSON-serialisable dict."""
    balance = config.account_balance if account_balance is None else account_balance
    metrics = compute_metrics(trades)
    return {
        'metrics': metrics.to_dict(infinity=config.reporting.profit_factor_infinity),
        'pnl_summary': pnl_summary(trades, now=now, timezone=config.timezone).to_dict(),
        'distribution': distribution(trades).to_dict(),
        'portfolio': portfolio_summary(trades, balance).to_dict(),
        'allocation': [s.to_dict() for s in asset_allocation(trades)],
        'performance': [
            p.to_dict() for p in portfolio_performance(trades, now=now, timezone=config.timezone)
        ],
        'warnings': [
            w.to_dict() for w in detect_warnings(trades, balance, config=config, now=now)
        ],
    }


def generate_report(
    trades: List[Trade],
    config: Config,
    out_dir: Optional[str] = None,
    account_balance: Optional[float] = None,
    now=None,
) -> str:
    """Generate report files for a trade history.

    Creates the output directory if it does not exist and writes the
    following files:

    - `trades.csv` - the trades with their recomputed P&L
    - `equity_curve.csv` - cumulative P&L per close date
    - `profit_by_<period>.csv` - P&L per day, week, month and year
    - `summary.json` - metrics, period summary, distribution, portfolio
      and warnings
    - `equity_curve.png` - line chart of the equity curve

    Returns the output directory.
    """
    out_dir = out_dir or config.reporting.out_dir
    os.makedirs(out_dir, exist_ok=True)

    # Trades CSV
    df_trades = pd.DataFrame([t.to_dict() for t in trades])
    df_trades.to_csv(os.path.join(out_dir, 'trades.csv'), index=False)

    # Equity curve CSV
    curve = equity_curve(trades, timezone=config.timezone)
    df_eq = pd.DataFrame([pt.to_dict() for pt in curve], columns=['date', 'equity', 'pnl'])
    df_eq.to_csv(os.path.join(out_dir, 'equity_curve.csv'), index=False)

    # Profit per period CSVs
    for period in ('daily', 'weekly', 'monthly', 'yearly'):
        rows = [p.to_dict() for p in profit_by_period(trades, period, timezone=config.timezone)]
        df_period = pd.DataFrame(rows, columns=['period', 'profit'])
        df_period.to_csv(os.path.join(out_dir, f'profit_by_{period}.csv'), index=False)

    # Summary JSON
    summary = build_summary(trades, config, account_balance=account_balance, now=now)
    summary_path = os.path.join(out_dir, 'summary.json')
    with open(summary_path, 'w', encoding='utf-8') as fh:
        json.dump(summary, fh, indent=2, ensure_ascii=False)

    # Equity curve plot
    fig, ax = plt.subplots(figsize=(10, 4))
    if not df_eq.empty:
        ax.plot(pd.to_datetime(df_eq['date']), df_eq['equity'], linewidth=1.5)
        ax.axhline(0.0, color='grey', linewidth=0.8)
        ax.set_title('Equity Curve')
        ax.set_xlabel('Close date')
        ax.set_ylabel('Cumulative P&L')
        fig.autofmt_xdate()
    fig.tight_layout()
    fig.savefig(os.path.join(out_dir, 'equity_curve.png'))
    plt.close(fig)

    logger.info("Wrote report for %d trades to %s", len(trades), out_dir)
    return out_dir
