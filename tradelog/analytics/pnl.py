"""
Per-trade profit and loss.

`compute_pnl` is the leaf calculation every other report relies on.
`recompute_trade` and `close_trade` wrap it as pure update steps: the
storage layer calls them on every write so that `pnl` and
`pnl_percent` always match a trade's current prices, quantity and fees.
"""

from __future__ import annotations

from dataclasses import replace

from ..journal.models import Trade, PnLResult, LONG, normalize_position
from ..utils.timeutils import to_timestamp


def compute_pnl(
    position: str,
    entry_price: float,
    exit_price: float,
    quantity: float,
    fees: float = 0.0,
) -> PnLResult:
    """Compute realized P&L for one trade.

    Fees are always deducted, whatever the direction.  The percentage
    return is measured against the invested amount
    (``entry_price * quantity``) and is 0 when nothing was invested.

    Parameters
    ----------
    position : str
        ``'long'`` or ``'short'`` (buy/sell synonyms are accepted).
    entry_price, exit_price : float
        Fill prices.
    quantity : float
        Units traded.
    fees : float
        Total fees paid on the round trip.

    Returns
    -------
    PnLResult
        The P&L in currency units and as percentage points.
    """
    if normalize_position(position) == LONG:
        pnl = (exit_price - entry_price) * quantity - fees
    else:
        pnl = (entry_price - exit_price) * quantity - fees

    investment = entry_price * quantity
    pnl_percent = pnl / investment * 100 if investment > 0 else 0.0
    return PnLResult(pnl=pnl, pnl_percent=pnl_percent)


def recompute_trade(trade: Trade) -> Trade:
    """Return a copy of `trade` whose derived P&L fields match its other fields.

    Open trades get ``None`` for both fields.  The input is not modified.
    """
    position = normalize_position(trade.position)
    if trade.is_open:
        return replace(trade, position=position, pnl=None, pnl_percent=None)
    result = compute_pnl(position, trade.entry_price, trade.exit_price, trade.quantity, trade.fees)
    return replace(trade, position=position, pnl=result.pnl, pnl_percent=result.pnl_percent)


def close_trade(trade: Trade, exit_price: float, closed_at) -> Trade:
    """Return a closed copy of `trade` with its P&L populated."""
    closed = replace(trade, exit_price=exit_price, closed_at=to_timestamp(closed_at))
    return recompute_trade(closed)
