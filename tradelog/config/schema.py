"""
Configuration schema and loader.

This module defines dataclasses that mirror the expected structure of
the optional YAML configuration file (`config.yaml`).  A helper
function `load_config()` reads a YAML file from disk and returns an
instance of `Config` populated with the defaults for any missing
fields.

The behavioral heuristics (trades per day, revenge window, risk bands,
loss streaks) live here rather than in the analyzer so they can be
tuned without touching code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import yaml


@dataclass
class BehaviorConfig:
    """Thresholds used by the behavior analyzer.

    Attributes
    ----------
    overtrading_max_trades : int
        A warning is raised when more than this many trades are opened
        on the current day.
    overtrading_high_trades : int
        Above this many trades the overtrading warning becomes ``HIGH``.
    revenge_window_minutes : float
        A trade opened less than this many minutes after a losing trade
        closed is flagged as a possible revenge trade.
    risk_warn_pct : float
        Position value, as a percentage of the account balance, above
        which a trade is flagged.
    risk_high_pct : float
        Above this percentage the risk warning becomes ``HIGH``.
    loss_streak_window : int
        Number of most recently closed trades inspected for a losing streak.
    loss_streak_warn : int
        Minimum streak length that raises a warning.
    loss_streak_high : int
        Streak length at which the warning becomes ``HIGH``.
    """

    overtrading_max_trades: int = 10
    overtrading_high_trades: int = 15
    revenge_window_minutes: float = 5.0
    risk_warn_pct: float = 2.0
    risk_high_pct: float = 5.0
    loss_streak_window: int = 5
    loss_streak_warn: int = 3
    loss_streak_high: int = 5


@dataclass
class ReportingConfig:
    """Report output settings.

    Attributes
    ----------
    out_dir : str
        Directory the report artefacts are written to.
    profit_factor_infinity : float or None
        Value written in place of an unbounded profit factor when metrics
        are serialised.  ``None`` becomes JSON ``null``.
    """

    out_dir: str = "results"
    profit_factor_infinity: Optional[float] = None


@dataclass
class Config:
    """Root configuration for the analytics engine.

    Attributes
    ----------
    account_balance : float
        Reference balance for risk-percentage calculations when the
        caller has none configured.
    timezone : str or None
        IANA timezone used to decide calendar days, weeks and months.
        ``None`` uses the system's local time.
    behavior : BehaviorConfig
        Behavioral warning thresholds.
    reporting : ReportingConfig
        Report output settings.
    """

    account_balance: float = 10_000.0
    timezone: Optional[str] = None
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)


def _merge_dict(defaults: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries.

    The values in `override` take precedence over those in `defaults`.
    This helper is used when loading YAML into nested dataclasses.
    """
    result: Dict[str, Any] = defaults.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str) -> Config:
    """Load a configuration file from the given YAML path.

    Parameters
    ----------
    path : str
        Path to the YAML file.

    Returns
    -------
    Config
        A populated configuration object.  Missing fields are filled with
        the defaults defined in the dataclasses.
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw: Dict[str, Any] = yaml.safe_load(fh) or {}

    # Build nested dictionaries representing the default dataclasses
    defaults: Dict[str, Any] = {
        'account_balance': 10_000.0,
        'timezone': None,
        'behavior': {
            'overtrading_max_trades': 10,
            'overtrading_high_trades': 15,
            'revenge_window_minutes': 5.0,
            'risk_warn_pct': 2.0,
            'risk_high_pct': 5.0,
            'loss_streak_window': 5,
            'loss_streak_warn': 3,
            'loss_streak_high': 5,
        },
        'reporting': {
            'out_dir': 'results',
            'profit_factor_infinity': None,
        },
    }

    # An empty section such as `behavior:` loads as None; treat it as no overrides.
    for section in ('behavior', 'reporting'):
        if section in raw and raw[section] is None:
            raw[section] = {}

    merged = _merge_dict(defaults, raw)

    behavior = merged['behavior']
    behavior_cfg = BehaviorConfig(
        overtrading_max_trades=int(behavior['overtrading_max_trades']),
        overtrading_high_trades=int(behavior['overtrading_high_trades']),
        revenge_window_minutes=float(behavior['revenge_window_minutes']),
        risk_warn_pct=float(behavior['risk_warn_pct']),
        risk_high_pct=float(behavior['risk_high_pct']),
        loss_streak_window=int(behavior['loss_streak_window']),
        loss_streak_warn=int(behavior['loss_streak_warn']),
        loss_streak_high=int(behavior['loss_streak_high']),
    )
    reporting = merged['reporting']
    infinity = reporting.get('profit_factor_infinity')
    reporting_cfg = ReportingConfig(
        out_dir=str(reporting['out_dir']),
        profit_factor_infinity=float(infinity) if infinity is not None else None,
    )

    timezone = merged.get('timezone')
    cfg = Config(
        account_balance=float(merged.get('account_balance', 10_000.0)),
        timezone=str(timezone) if timezone else None,
        behavior=behavior_cfg,
        reporting=reporting_cfg,
    )
    return cfg
