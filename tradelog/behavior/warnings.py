"""
Behavioral risk warnings.

`detect_warnings` scans a trade history for four heuristic patterns
and returns advisory warnings.  The rules are evaluated in a fixed
order and each may add zero or more warnings:

1. Overtrading - too many trades opened today.
2. Revenge trading - a trade opened shortly after a losing trade
   closed (first occurrence only).
3. Oversized risk - a trade opened today whose position value is a
   large share of the account balance (one warning per trade).
4. Consecutive losses - a losing streak among the most recently
   closed trades.

Warnings never block anything; they are regenerated from scratch on
every call.  All thresholds come from `BehaviorConfig`.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional
import pandas as pd

from ..config.schema import Config, BehaviorConfig
from ..journal.models import (
    Trade,
    BehaviorWarning,
    OVERTRADING,
    REVENGE_TRADING,
    HIGH_RISK,
    CONSECUTIVE_LOSS,
    MEDIUM,
    HIGH,
)
from ..reporting.metrics import sort_by_close
from ..utils.timeutils import local_now, to_timestamp, to_timezone

logger = logging.getLogger(__name__)


def _opened_today(trades: List[Trade], today: pd.Timestamp, timezone: Optional[str]) -> List[Trade]:
    tomorrow = today + pd.Timedelta(days=1)
    return [t for t in trades if today <= to_timezone(t.opened_at, timezone) < tomorrow]


def _check_overtrading(todays: List[Trade], today: pd.Timestamp, cfg: BehaviorConfig) -> List[BehaviorWarning]:
    count = len(todays)
    if count <= cfg.overtrading_max_trades:
        return []
    return [BehaviorWarning(
        type=OVERTRADING,
        message=f"You've made {count} trades today. Consider slowing down.",
        severity=HIGH if count > cfg.overtrading_high_trades else MEDIUM,
        date=today,
    )]


def _check_revenge(closed: List[Trade], cfg: BehaviorConfig, timezone: Optional[str]) -> List[BehaviorWarning]:
    window = pd.Timedelta(minutes=cfg.revenge_window_minutes)
    for prev, curr in zip(closed, closed[1:]):
        if prev.pnl is None or prev.pnl >= 0:
            continue
        # Both sides in local wall-clock time; inputs may mix naive and aware stamps.
        gap = to_timezone(curr.opened_at, timezone) - to_timezone(prev.closed_at, timezone)
        if gap < window:
            minutes = gap.total_seconds() / 60
            return [BehaviorWarning(
                type=REVENGE_TRADING,
                message=(
                    f"Possible revenge trade detected. You opened a position "
                    f"{minutes:.1f} minutes after a loss."
                ),
                severity=HIGH,
                date=to_timestamp(curr.opened_at),
            )]
    return []


def _check_risk(todays: List[Trade], account_balance: float, cfg: BehaviorConfig) -> List[BehaviorWarning]:
    if account_balance <= 0:
        logger.debug("Skipping risk check: account balance is %s", account_balance)
        return []
    warnings = []
    for trade in todays:
        risk_amount = trade.entry_price * trade.quantity
        risk_percent = risk_amount / account_balance * 100
        if risk_percent > cfg.risk_warn_pct:
            label = trade.asset or 'unnamed asset'
            warnings.append(BehaviorWarning(
                type=HIGH_RISK,
                message=(
                    f"Trade on {label} risks {risk_percent:.1f}% of account "
                    f"(>{cfg.risk_warn_pct:g}% limit)."
                ),
                severity=HIGH if risk_percent > cfg.risk_high_pct else MEDIUM,
                date=to_timestamp(trade.opened_at),
            ))
    return warnings


def _check_loss_streak(closed: List[Trade], today: pd.Timestamp, cfg: BehaviorConfig) -> List[BehaviorWarning]:
    recent = closed[-cfg.loss_streak_window:] if cfg.loss_streak_window > 0 else []
    streak = 0
    for trade in reversed(recent):
        if trade.pnl is not None and trade.pnl < 0:
            streak += 1
        else:
            break
    if streak < cfg.loss_streak_warn:
        return []
    return [BehaviorWarning(
        type=CONSECUTIVE_LOSS,
        message=f"You have {streak} consecutive losses. Consider taking a break.",
        severity=HIGH if streak >= cfg.loss_streak_high else MEDIUM,
        date=today,
    )]


def detect_warnings(
    trades: Iterable[Trade],
    account_balance: Optional[float] = None,
    config: Optional[Config] = None,
    now=None,
) -> List[BehaviorWarning]:
    """Scan `trades` for risky trading behaviour.

    Parameters
    ----------
    trades : iterable of Trade
        Recent trade history, open and closed, in any order.
    account_balance : float, optional
        Reference balance for the oversized-risk rule.  Defaults to
        ``config.account_balance``.
    config : Config, optional
        Thresholds and timezone.  Defaults to `Config()`.
    now : datetime-like, optional
        The moment that defines "today".  Defaults to the current time.

    Returns
    -------
    list of BehaviorWarning
        Warnings in rule order; empty when nothing stands out.
    """
    config = config or Config()
    cfg = config.behavior
    if account_balance is None:
        account_balance = config.account_balance

    trades = list(trades)
    today = local_now(now, config.timezone).normalize()
    todays = _opened_today(trades, today, config.timezone)
    closed = sort_by_close(t for t in trades if not t.is_open)

    warnings: List[BehaviorWarning] = []
    warnings.extend(_check_overtrading(todays, today, cfg))
    warnings.extend(_check_revenge(closed, cfg, config.timezone))
    warnings.extend(_check_risk(todays, account_balance, cfg))
    warnings.extend(_check_loss_streak(closed, today, cfg))

    logger.debug("Behavior scan of %d trades produced %d warnings", len(trades), len(warnings))
    return warnings
