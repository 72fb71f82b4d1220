"""
Trade and report models.

These dataclasses represent the trade records handed to the analytics
engine and the plain result records it produces.  Result records carry
no behaviour beyond `to_dict()`, which returns JSON-serialisable values
for whichever layer renders or transports them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Dict, List, Optional
import math
import pandas as pd

LONG = 'long'
SHORT = 'short'
POSITIONS = (LONG, SHORT)

_POSITION_ALIASES = {
    'long': LONG,
    'buy': LONG,
    'beli': LONG,
    'short': SHORT,
    'sell': SHORT,
    'jual': SHORT,
}

# Warning types
OVERTRADING = 'OVERTRADING'
REVENGE_TRADING = 'REVENGE_TRADING'
HIGH_RISK = 'HIGH_RISK'
CONSECUTIVE_LOSS = 'CONSECUTIVE_LOSS'

# Severities
LOW = 'LOW'
MEDIUM = 'MEDIUM'
HIGH = 'HIGH'


def normalize_position(position: str) -> str:
    """Map a direction label to ``'long'`` or ``'short'``.

    Accepts the usual buy/sell synonyms in any case.

    Raises
    ------
    ValueError
        If the label is not a known direction.
    """
    try:
        return _POSITION_ALIASES[str(position).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown position {position!r}; expected 'long' or 'short'") from None


def _iso(value: Any) -> Any:
    if isinstance(value, (pd.Timestamp, date)):
        return value.isoformat()
    return value


@dataclass
class Trade:
    """A logged trade.

    A trade is closed once both `exit_price` and `closed_at` are set.
    `pnl` and `pnl_percent` are derived fields; use
    `tradelog.analytics.pnl.recompute_trade` after editing prices,
    quantity or fees.
    """
    position: str  # 'long' or 'short'
    entry_price: float
    quantity: float
    opened_at: pd.Timestamp
    exit_price: Optional[float] = None
    closed_at: Optional[pd.Timestamp] = None
    fees: float = 0.0
    pnl: Optional[float] = None
    pnl_percent: Optional[float] = None
    asset: str = ''
    market: str = ''
    id: Optional[str] = None
    notes: Optional[str] = None
    emotion_tag: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.exit_price is None or self.closed_at is None

    def to_dict(self) -> Dict[str, Any]:
        data = {key: _iso(value) for key, value in asdict(self).items()}
        data['is_open'] = self.is_open
        return data


@dataclass(frozen=True)
class PnLResult:
    """Realized profit/loss of a single trade; `pnl_percent` is in points."""
    pnl: float
    pnl_percent: float


@dataclass
class Metrics:
    """Summary performance statistics over closed trades.

    `profit_factor` is ``inf`` when there are gains and no losses.
    """
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    max_drawdown: float = 0.0
    expectancy: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    net_pnl: float = 0.0
    total_fees: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0

    def to_dict(self, infinity: Optional[float] = None) -> Dict[str, Any]:
        """Return the metrics as a dict, writing `infinity` for an unbounded profit factor."""
        data = asdict(self)
        if math.isinf(self.profit_factor):
            data['profit_factor'] = infinity
        return data


@dataclass(frozen=True)
class EquityPoint:
    """Cumulative P&L at the end of a close date, and that date's P&L."""
    date: date
    equity: float
    pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date.isoformat(), 'equity': self.equity, 'pnl': self.pnl}


@dataclass(frozen=True)
class PeriodProfit:
    """Summed P&L of one period, keyed by the period's first date."""
    period: date
    profit: float

    def to_dict(self) -> Dict[str, Any]:
        return {'period': self.period.isoformat(), 'profit': self.profit}


@dataclass(frozen=True)
class DistributionGroup:
    key: str
    count: int
    pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Distribution:
    """Trade counts and P&L grouped by asset, market and position."""
    by_asset: List[DistributionGroup] = field(default_factory=list)
    by_market: List[DistributionGroup] = field(default_factory=list)
    by_position: List[DistributionGroup] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'by_asset': [g.to_dict() for g in self.by_asset],
            'by_market': [g.to_dict() for g in self.by_market],
            'by_position': [g.to_dict() for g in self.by_position],
        }


@dataclass(frozen=True)
class PnLSummary:
    """Realized P&L for the current day, week, month and year, and overall."""
    daily: float = 0.0
    weekly: float = 0.0
    monthly: float = 0.0
    yearly: float = 0.0
    total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PortfolioSummary:
    total_value: float
    account_balance: float
    invested_amount: float
    realized_pnl: float
    unrealized_pnl: float
    open_positions: int
    total_positions: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PerformancePoint:
    """P&L of one closed trade and the running total over the window."""
    date: date
    pnl: float
    cumulative_pnl: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date.isoformat(), 'pnl': self.pnl, 'cumulative_pnl': self.cumulative_pnl}


@dataclass(frozen=True)
class AllocationSlice:
    """Value and quantity held in one asset across open positions."""
    asset: str
    value: float
    quantity: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BehaviorWarning:
    """Advisory warning produced by the behavior analyzer."""
    type: str
    message: str
    severity: str  # 'LOW', 'MEDIUM' or 'HIGH'
    date: pd.Timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'message': self.message,
            'severity': self.severity,
            'date': _iso(self.date),
        }
