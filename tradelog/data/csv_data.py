"""
CSV trade loader.

This module provides a class to load a trade history from a CSV file
for the command-line reports.  The expected schema is:

```
id,asset,market,position,entry_price,exit_price,quantity,fees,opened_at,closed_at,notes,emotion_tag
```

Only `position`, `entry_price`, `quantity` and `opened_at` are
required.  Empty `exit_price`/`closed_at` cells mark an open trade.
Timestamps may be ISO strings with or without an offset.  P&L is
always recomputed from the prices; any `pnl` column is ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional
import pandas as pd

from ..analytics.pnl import recompute_trade
from ..journal.models import Trade

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["position", "entry_price", "quantity", "opened_at"]


def _optional(value: Any) -> Optional[Any]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CSVTradeLoader:
    """Load trades from a CSV file.

    Parameters
    ----------
    path : str
        Path of the CSV file.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def load(self) -> List[Trade]:
        if not self.path.exists():
            raise FileNotFoundError(f"Trades CSV not found: {self.path}")

        df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        df.columns = [c.strip().lower() for c in df.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(
                f"Unrecognized trades CSV {self.path}. Missing columns: {missing}. "
                f"Found columns: {list(df.columns)}"
            )

        trades: List[Trade] = []
        for line_no, row in enumerate(df.to_dict(orient="records"), start=2):
            try:
                trades.append(self._parse_row(row))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{self.path}:{line_no}: {exc}") from exc

        logger.debug("Loaded %d trades from %s", len(trades), self.path)
        return trades

    def _parse_row(self, row: dict) -> Trade:
        exit_price = _optional(row.get("exit_price"))
        closed_at = _optional(row.get("closed_at"))
        fees = _optional(row.get("fees"))
        trade = Trade(
            position=row["position"],
            entry_price=float(row["entry_price"]),
            quantity=float(row["quantity"]),
            opened_at=pd.Timestamp(row["opened_at"]),
            exit_price=float(exit_price) if exit_price is not None else None,
            closed_at=pd.Timestamp(closed_at) if closed_at is not None else None,
            fees=float(fees) if fees is not None else 0.0,
            asset=_optional(row.get("asset")) or '',
            market=_optional(row.get("market")) or '',
            id=_optional(row.get("id")),
            notes=_optional(row.get("notes")),
            emotion_tag=_optional(row.get("emotion_tag")),
        )
        return recompute_trade(trade)
