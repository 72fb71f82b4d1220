"""
Portfolio view of open positions and recent performance.

Open trades are valued at their entry price: the engine has no live
prices, so unrealized P&L is always reported as zero.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional
import pandas as pd

from ..journal.models import Trade, PortfolioSummary, AllocationSlice, PerformancePoint
from ..utils.rounding import round_half_away
from ..utils.timeutils import local_now, to_timezone
from .metrics import closed_trades, sort_by_close

# Trailing window looked back over by each performance period
PERFORMANCE_WINDOWS = {
    'daily': pd.DateOffset(days=30),
    'weekly': pd.DateOffset(days=90),
    'monthly': pd.DateOffset(years=1),
}


def portfolio_summary(trades: Iterable[Trade], account_balance: float) -> PortfolioSummary:
    """Summarise cash, capital tied up in open positions and realized P&L."""
    trades = list(trades)
    open_trades = [t for t in trades if t.is_open]
    closed = [t for t in trades if not t.is_open]

    invested = sum(t.entry_price * t.quantity for t in open_trades)
    realized = sum(t.pnl or 0.0 for t in closed)
    unrealized = 0.0

    return PortfolioSummary(
        total_value=round_half_away(account_balance + invested + unrealized),
        account_balance=round_half_away(account_balance),
        invested_amount=round_half_away(invested),
        realized_pnl=round_half_away(realized),
        unrealized_pnl=unrealized,
        open_positions=len(open_trades),
        total_positions=len(trades),
    )


def asset_allocation(trades: Iterable[Trade]) -> List[AllocationSlice]:
    """Value and quantity per asset over open trades, largest value first."""
    totals: Dict[str, List[float]] = {}
    for trade in trades:
        if not trade.is_open:
            continue
        bucket = totals.setdefault(trade.asset, [0.0, 0.0])
        bucket[0] += trade.entry_price * trade.quantity
        bucket[1] += trade.quantity

    slices = [
        AllocationSlice(asset=asset, value=round_half_away(value), quantity=quantity)
        for asset, (value, quantity) in totals.items()
    ]
    slices.sort(key=lambda s: s.value, reverse=True)
    return slices


def portfolio_performance(
    trades: Iterable[Trade],
    period: str = 'daily',
    now=None,
    timezone: Optional[str] = None,
) -> List[PerformancePoint]:
    """Running P&L of trades closed in a trailing window, one point per trade.

    The window starts at local midnight 30 days (``daily``), 90 days
    (``weekly``) or one year (``monthly``) before today and ends at `now`.

    Raises
    ------
    ValueError
        For an unknown period.
    """
    if period not in PERFORMANCE_WINDOWS:
        raise ValueError(
            f"Unknown period {period!r}; expected one of {', '.join(PERFORMANCE_WINDOWS)}"
        )

    end = local_now(now, timezone)
    start = end.normalize() - PERFORMANCE_WINDOWS[period]

    points: List[PerformancePoint] = []
    cumulative = 0.0
    for trade in sort_by_close(closed_trades(trades)):
        if trade.closed_at is None:
            continue
        closed_local = to_timezone(trade.closed_at, timezone)
        if not start <= closed_local <= end:
            continue
        cumulative += trade.pnl
        points.append(PerformancePoint(
            date=closed_local.date(),
            pnl=round_half_away(trade.pnl),
            cumulative_pnl=round_half_away(cumulative),
        ))
    return points
