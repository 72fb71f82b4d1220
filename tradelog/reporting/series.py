"""
Time-bucketed and grouped views of closed trades.

Every function here takes the full trade history, keeps the closed
trades with a P&L, and returns plain records ready for charting: the
equity curve, profit per calendar period, distributions by asset,
market and direction, and the running period P&L summary.

Calendar days are local days in the configured timezone (see
`tradelog.utils.timeutils`).
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from ..journal.models import (
    Trade,
    EquityPoint,
    PeriodProfit,
    Distribution,
    DistributionGroup,
    PnLSummary,
    POSITIONS,
    normalize_position,
)
from ..utils.rounding import round_half_away
from ..utils.timeutils import (
    PERIODS,
    local_date,
    local_now,
    period_range,
    period_start,
    to_timezone,
)
from .metrics import closed_trades, sort_by_close


def equity_curve(trades: Iterable[Trade], timezone: Optional[str] = None) -> List[EquityPoint]:
    """Cumulative P&L at the end of each close date.

    Trades are walked in close order.  When several trades close on the
    same date the point keeps the last cumulative value and the sum of
    their P&L.
    """
    points: "OrderedDict[object, List[float]]" = OrderedDict()
    cumulative = 0.0
    for trade in sort_by_close(closed_trades(trades)):
        if trade.closed_at is None:
            continue
        cumulative += trade.pnl
        day = local_date(trade.closed_at, timezone)
        if day in points:
            points[day][0] = cumulative
            points[day][1] += trade.pnl
        else:
            points[day] = [cumulative, trade.pnl]

    return [
        EquityPoint(date=day, equity=round_half_away(equity), pnl=round_half_away(pnl))
        for day, (equity, pnl) in points.items()
    ]


def profit_by_period(
    trades: Iterable[Trade],
    period: str = 'daily',
    timezone: Optional[str] = None,
) -> List[PeriodProfit]:
    """Sum of P&L per day, ISO week, month or year, in ascending order.

    Each bucket is keyed by the first date of its period (Monday for
    weeks, the 1st for months, 1 January for years).

    Raises
    ------
    ValueError
        If `period` is not ``daily``, ``weekly``, ``monthly`` or ``yearly``.
    """
    if period not in PERIODS:
        raise ValueError(f"Unknown period {period!r}; expected one of {', '.join(PERIODS)}")

    grouped: Dict[object, float] = {}
    for trade in closed_trades(trades):
        if trade.closed_at is None:
            continue
        key = period_start(local_date(trade.closed_at, timezone), period)
        grouped[key] = grouped.get(key, 0.0) + trade.pnl

    return [
        PeriodProfit(period=key, profit=round_half_away(profit))
        for key, profit in sorted(grouped.items())
    ]


def _group(trades: List[Trade], attr: str, seed: Iterable[str] = ()) -> List[DistributionGroup]:
    buckets: "OrderedDict[str, List[float]]" = OrderedDict((key, [0, 0.0]) for key in seed)
    for trade in trades:
        key = getattr(trade, attr) or ''
        if attr == 'position':
            key = normalize_position(key)
        bucket = buckets.setdefault(key, [0, 0.0])
        bucket[0] += 1
        bucket[1] += trade.pnl
    return [
        DistributionGroup(key=key, count=int(count), pnl=round_half_away(pnl))
        for key, (count, pnl) in buckets.items()
    ]


def distribution(trades: Iterable[Trade]) -> Distribution:
    """Count and summed P&L of closed trades by asset, market and position.

    Groups appear in first-seen order; both directions are always listed.
    """
    closed = closed_trades(trades)
    return Distribution(
        by_asset=_group(closed, 'asset'),
        by_market=_group(closed, 'market'),
        by_position=_group(closed, 'position', seed=POSITIONS),
    )


def filter_by_period(
    trades: Iterable[Trade],
    period: str = 'all',
    now=None,
    timezone: Optional[str] = None,
) -> List[Trade]:
    """Closed trades whose close time falls in the current period.

    The range runs from the start of today, this ISO week, this month or
    this year up to the end of today.  ``'all'`` returns every closed
    trade.

    Raises
    ------
    ValueError
        For an unknown period.
    """
    closed = closed_trades(trades)
    if period == 'all':
        return closed
    if period not in PERIODS:
        raise ValueError(f"Unknown period {period!r}; expected 'all' or one of {', '.join(PERIODS)}")

    start, end = period_range(local_now(now, timezone), period)
    selected = []
    for trade in closed:
        if trade.closed_at is None:
            continue
        closed_local = to_timezone(trade.closed_at, timezone)
        if start <= closed_local < end:
            selected.append(trade)
    return selected


def pnl_summary(trades: Iterable[Trade], now=None, timezone: Optional[str] = None) -> PnLSummary:
    """Realized P&L for today, this week, this month, this year and in total."""
    closed = closed_trades(trades)

    def total(period: str) -> float:
        return round_half_away(sum(t.pnl for t in filter_by_period(closed, period, now, timezone)))

    return PnLSummary(
        daily=total('daily'),
        weekly=total('weekly'),
        monthly=total('monthly'),
        yearly=total('yearly'),
        total=total('all'),
    )
