"""
Performance metrics calculations.

This module provides helpers to compute common performance statistics
from a list of trades.  Only closed trades with a known P&L take part;
open trades are ignored.  Every division guards its denominator, so an
empty or all-open trade list yields all-zero metrics rather than an
error.
"""

from __future__ import annotations

from typing import Iterable, List

from ..journal.models import Trade, Metrics
from ..utils.rounding import round_half_away
from ..utils.timeutils import to_timestamp


def closed_trades(trades: Iterable[Trade]) -> List[Trade]:
    """Return the trades that are closed and carry a P&L, in input order."""
    return [t for t in trades if not t.is_open and t.pnl is not None]


def _close_key(trade: Trade):
    # Trades without a close time sort first, as if closed at the epoch.
    if trade.closed_at is None:
        return (0, 0)
    return (1, to_timestamp(trade.closed_at).value)


def sort_by_close(trades: Iterable[Trade]) -> List[Trade]:
    """Return `trades` sorted ascending by close time; ties keep input order."""
    return sorted(trades, key=_close_key)


def max_drawdown(trades: Iterable[Trade]) -> float:
    """Largest fall of cumulative P&L from its running peak.

    The peak starts at zero, so a losing first trade already counts as
    drawdown.  The result is in currency units and never negative.
    """
    peak = 0.0
    cumulative = 0.0
    worst = 0.0
    for trade in sort_by_close(trades):
        cumulative += trade.pnl or 0.0
        if cumulative > peak:
            peak = cumulative
        drawdown = peak - cumulative
        if drawdown > worst:
            worst = drawdown
    return worst


def compute_metrics(trades: Iterable[Trade]) -> Metrics:
    """Compute a set of summary statistics for the given trades.

    Parameters
    ----------
    trades : iterable of Trade
        Trade history in any order.  Open trades and trades without a
        P&L are skipped.

    Returns
    -------
    Metrics
        Counts, win rate, averages, profit factor, expectancy and maximum
        drawdown.  Currency and percentage figures are rounded to two
        decimals; the profit factor is ``inf`` when there are gains but no
        losses.
    """
    closed = closed_trades(trades)
    if not closed:
        return Metrics()

    wins = [t.pnl for t in closed if t.pnl > 0]
    losses = [t.pnl for t in closed if t.pnl < 0]

    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))

    win_rate = len(wins) / len(closed) * 100
    avg_win = gross_profit / len(wins) if wins else 0.0
    avg_loss = gross_loss / len(losses) if losses else 0.0

    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    elif gross_profit > 0:
        profit_factor = float('inf')
    else:
        profit_factor = 0.0

    # Expected P&L per trade: win probability times average win, less
    # loss probability times average loss.
    expectancy = (win_rate / 100 * avg_win) - ((100 - win_rate) / 100 * avg_loss)

    return Metrics(
        total_trades=len(closed),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=round_half_away(win_rate),
        avg_win=round_half_away(avg_win),
        avg_loss=round_half_away(avg_loss),
        profit_factor=round_half_away(profit_factor),
        max_drawdown=round_half_away(max_drawdown(closed)),
        expectancy=round_half_away(expectancy),
        gross_profit=round_half_away(gross_profit),
        gross_loss=round_half_away(gross_loss),
        net_pnl=round_half_away(sum(t.pnl for t in closed)),
        total_fees=round_half_away(sum(t.fees or 0.0 for t in closed)),
        largest_win=round_half_away(max(wins, default=0.0)),
        largest_loss=round_half_away(min(losses, default=0.0)),
    )
