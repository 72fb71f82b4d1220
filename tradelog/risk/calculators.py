"""
Pre-trade risk calculators.

Helpers a trader uses before entering a position: how large the
position may be for a given risk budget, where to place a stop for a
given risk percentage, and the risk/reward of a planned trade.  Unlike
the analytics, these validate their input and raise `ValueError` for
values that make the calculation meaningless.  Results are truncated
to cents.
"""

from __future__ import annotations

from typing import Dict

from ..journal.models import LONG, normalize_position
from ..utils.rounding import floor_cents

GOOD_RISK_REWARD = 2.0


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            raise ValueError(f"{name} must be positive, got {value!r}")


def _require_percent(name: str, value: float) -> None:
    if not 0 < value <= 100:
        raise ValueError(f"{name} must be in (0, 100], got {value!r}")


def position_size(
    account_balance: float,
    risk_percent: float,
    entry_price: float,
    stop_loss: float,
) -> Dict[str, float]:
    """Size a position so that hitting the stop loses `risk_percent` of the account.

    Returns
    -------
    dict
        ``position_size`` (units), ``total_value``, ``risk_amount``,
        ``risk_per_unit`` and ``portfolio_percent``.
    """
    _require_positive(account_balance=account_balance, entry_price=entry_price, stop_loss=stop_loss)
    _require_percent('risk_percent', risk_percent)

    risk_amount = account_balance * risk_percent / 100
    risk_per_unit = abs(entry_price - stop_loss)
    if risk_per_unit == 0:
        raise ValueError("Stop loss cannot be equal to entry price")

    size = risk_amount / risk_per_unit
    total_value = size * entry_price
    portfolio_percent = total_value / account_balance * 100

    return {
        'position_size': floor_cents(size),
        'total_value': floor_cents(total_value),
        'risk_amount': floor_cents(risk_amount),
        'risk_per_unit': floor_cents(risk_per_unit),
        'portfolio_percent': floor_cents(portfolio_percent),
    }


def stop_loss_price(entry_price: float, risk_percent: float, position: str) -> Dict[str, float]:
    """Stop level `risk_percent` away from entry, on the losing side of `position`."""
    _require_positive(entry_price=entry_price)
    _require_percent('risk_percent', risk_percent)

    if normalize_position(position) == LONG:
        stop = entry_price * (1 - risk_percent / 100)
    else:
        stop = entry_price * (1 + risk_percent / 100)

    distance = abs(entry_price - stop)
    return {
        'stop_loss': floor_cents(stop),
        'distance': floor_cents(distance),
        'distance_percent': floor_cents(distance / entry_price * 100),
    }


def risk_reward(
    entry_price: float,
    stop_loss: float,
    target_price: float,
    position: str,
) -> Dict[str, object]:
    """Risk, reward and their ratio for a planned trade.

    Raises
    ------
    ValueError
        If the stop or the target is on the wrong side of the entry for
        the given direction.
    """
    _require_positive(entry_price=entry_price, stop_loss=stop_loss, target_price=target_price)

    if normalize_position(position) == LONG:
        risk = entry_price - stop_loss
        reward = target_price - entry_price
    else:
        risk = stop_loss - entry_price
        reward = entry_price - target_price

    if risk <= 0:
        raise ValueError("Invalid stop loss for the given position")
    if reward <= 0:
        raise ValueError("Invalid target price for the given position")

    ratio = reward / risk
    return {
        'risk': floor_cents(risk),
        'reward': floor_cents(reward),
        'risk_reward_ratio': floor_cents(ratio),
        'risk_percent': floor_cents(risk / entry_price * 100),
        'reward_percent': floor_cents(reward / entry_price * 100),
        'is_good_trade': ratio >= GOOD_RISK_REWARD,
    }
