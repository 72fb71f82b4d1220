import os
import sys
from datetime import date
import pandas as pd

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tradelog.journal.models import Trade
from tradelog.reporting.series import (
    equity_curve,
    profit_by_period,
    distribution,
    filter_by_period,
    pnl_summary,
)
from tradelog.reporting.portfolio import portfolio_summary, asset_allocation, portfolio_performance

import unittest


def closed(pnl: float, closed_at: str, asset: str = 'BTC', market: str = 'CRYPTO',
           position: str = 'long') -> Trade:
    ts = pd.Timestamp(closed_at)
    return Trade(
        position=position,
        entry_price=100.0,
        quantity=1.0,
        opened_at=ts - pd.Timedelta(minutes=30),
        exit_price=100.0 + pnl,
        closed_at=ts,
        pnl=pnl,
        asset=asset,
        market=market,
    )


def open_trade(asset: str, entry_price: float, quantity: float) -> Trade:
    return Trade(position='long', entry_price=entry_price, quantity=quantity,
                 opened_at=pd.Timestamp("2024-05-01 09:00"), asset=asset)


class TestEquityCurve(unittest.TestCase):
    def test_same_day_trades_merge(self) -> None:
        trades = [
            closed(30.0, "2024-05-02 15:00"),
            closed(100.0, "2024-05-01 10:00"),
            closed(-40.0, "2024-05-01 16:00"),
        ]
        curve = equity_curve(trades)
        self.assertEqual([p.date for p in curve], [date(2024, 5, 1), date(2024, 5, 2)])
        self.assertEqual(curve[0].equity, 60.0)
        self.assertEqual(curve[0].pnl, 60.0)
        self.assertEqual(curve[1].equity, 90.0)
        self.assertEqual(curve[1].pnl, 30.0)

    def test_open_trades_excluded(self) -> None:
        self.assertEqual(equity_curve([open_trade('BTC', 1.0, 1.0)]), [])

    def test_timezone_moves_close_date(self) -> None:
        trade = closed(10.0, "2024-05-01 23:30+00:00")
        curve = equity_curve([trade], timezone="Asia/Jakarta")
        self.assertEqual(curve[0].date, date(2024, 5, 2))

    def test_to_dict_uses_iso_dates(self) -> None:
        curve = equity_curve([closed(10.0, "2024-05-01 10:00")])
        self.assertEqual(curve[0].to_dict(), {'date': '2024-05-01', 'equity': 10.0, 'pnl': 10.0})


class TestProfitByPeriod(unittest.TestCase):
    def setUp(self) -> None:
        # 2024-05-05 is a Sunday, 2024-05-06 a Monday
        self.trades = [
            closed(10.0, "2024-05-05 12:00"),
            closed(20.0, "2024-05-06 12:00"),
            closed(-5.0, "2024-05-06 18:00"),
            closed(7.5, "2024-06-01 12:00"),
            closed(1.0, "2023-12-31 12:00"),
        ]

    def test_daily(self) -> None:
        result = profit_by_period(self.trades, 'daily')
        self.assertEqual(
            [(p.period, p.profit) for p in result],
            [
                (date(2023, 12, 31), 1.0),
                (date(2024, 5, 5), 10.0),
                (date(2024, 5, 6), 15.0),
                (date(2024, 6, 1), 7.5),
            ],
        )

    def test_weekly_starts_on_monday(self) -> None:
        result = profit_by_period(self.trades, 'weekly')
        self.assertEqual(
            [(p.period, p.profit) for p in result],
            [
                (date(2023, 12, 25), 1.0),
                (date(2024, 4, 29), 10.0),
                (date(2024, 5, 6), 15.0),
                (date(2024, 5, 27), 7.5),
            ],
        )

    def test_monthly_and_yearly(self) -> None:
        monthly = profit_by_period(self.trades, 'monthly')
        self.assertEqual(
            [(p.period, p.profit) for p in monthly],
            [(date(2023, 12, 1), 1.0), (date(2024, 5, 1), 25.0), (date(2024, 6, 1), 7.5)],
        )
        yearly = profit_by_period(self.trades, 'yearly')
        self.assertEqual(
            [(p.period, p.profit) for p in yearly],
            [(date(2023, 1, 1), 1.0), (date(2024, 1, 1), 32.5)],
        )

    def test_unknown_period_rejected(self) -> None:
        with self.assertRaises(ValueError):
            profit_by_period(self.trades, 'hourly')


class TestDistribution(unittest.TestCase):
    def test_groups(self) -> None:
        trades = [
            closed(10.0, "2024-05-01 10:00", asset='BTC', market='CRYPTO'),
            closed(-4.0, "2024-05-01 11:00", asset='AAPL', market='STOCK', position='short'),
            closed(6.0, "2024-05-01 12:00", asset='BTC', market='CRYPTO'),
            open_trade('ETH', 2000.0, 1.0),
        ]
        result = distribution(trades)
        self.assertEqual(
            [(g.key, g.count, g.pnl) for g in result.by_asset],
            [('BTC', 2, 16.0), ('AAPL', 1, -4.0)],
        )
        self.assertEqual(
            [(g.key, g.count, g.pnl) for g in result.by_market],
            [('CRYPTO', 2, 16.0), ('STOCK', 1, -4.0)],
        )
        self.assertEqual(
            [(g.key, g.count, g.pnl) for g in result.by_position],
            [('long', 2, 16.0), ('short', 1, -4.0)],
        )

    def test_position_aliases_share_a_bucket(self) -> None:
        trades = [
            closed(1.0, "2024-05-01 10:00", position='LONG'),
            closed(2.0, "2024-05-01 11:00", position='buy'),
            closed(-3.0, "2024-05-01 12:00", position='jual'),
        ]
        result = distribution(trades)
        self.assertEqual(
            [(g.key, g.count, g.pnl) for g in result.by_position],
            [('long', 2, 3.0), ('short', 1, -3.0)],
        )

    def test_positions_always_listed(self) -> None:
        result = distribution([])
        self.assertEqual(result.by_asset, [])
        self.assertEqual([(g.key, g.count) for g in result.by_position], [('long', 0), ('short', 0)])


class TestPeriodFilters(unittest.TestCase):
    def setUp(self) -> None:
        # Wednesday 2024-05-15
        self.now = pd.Timestamp("2024-05-15 14:00")
        self.trades = [
            closed(1.0, "2024-05-15 09:00"),   # today
            closed(2.0, "2024-05-13 09:00"),   # Monday this week
            closed(4.0, "2024-05-02 09:00"),   # this month
            closed(8.0, "2024-02-10 09:00"),   # this year
            closed(16.0, "2023-11-10 09:00"),  # last year
        ]

    def test_pnl_summary(self) -> None:
        summary = pnl_summary(self.trades, now=self.now)
        self.assertEqual(summary.daily, 1.0)
        self.assertEqual(summary.weekly, 3.0)
        self.assertEqual(summary.monthly, 7.0)
        self.assertEqual(summary.yearly, 15.0)
        self.assertEqual(summary.total, 31.0)

    def test_filter_by_period(self) -> None:
        weekly = filter_by_period(self.trades, 'weekly', now=self.now)
        self.assertEqual([t.pnl for t in weekly], [1.0, 2.0])
        self.assertEqual(len(filter_by_period(self.trades, 'all')), 5)
        with self.assertRaises(ValueError):
            filter_by_period(self.trades, 'fortnightly', now=self.now)


class TestPortfolio(unittest.TestCase):
    def test_summary(self) -> None:
        trades = [
            open_trade('BTC', 100.0, 2.0),
            open_trade('ETH', 50.0, 1.0),
            closed(25.0, "2024-05-01 10:00"),
            closed(-5.0, "2024-05-02 10:00"),
        ]
        summary = portfolio_summary(trades, 1000.0)
        self.assertEqual(summary.invested_amount, 250.0)
        self.assertEqual(summary.total_value, 1250.0)
        self.assertEqual(summary.realized_pnl, 20.0)
        self.assertEqual(summary.unrealized_pnl, 0.0)
        self.assertEqual(summary.open_positions, 2)
        self.assertEqual(summary.total_positions, 4)

    def test_allocation_sorted_by_value(self) -> None:
        trades = [
            open_trade('ETH', 50.0, 1.0),
            open_trade('BTC', 100.0, 2.0),
            open_trade('ETH', 60.0, 1.0),
            closed(25.0, "2024-05-01 10:00", asset='SOL'),
        ]
        allocation = asset_allocation(trades)
        self.assertEqual([(s.asset, s.value, s.quantity) for s in allocation],
                         [('BTC', 200.0, 2.0), ('ETH', 110.0, 2.0)])


class TestPortfolioPerformance(unittest.TestCase):
    def setUp(self) -> None:
        self.now = pd.Timestamp("2024-05-15 14:00")
        self.trades = [
            closed(5.0, "2024-04-20 10:00"),
            closed(-2.0, "2024-04-10 10:00"),
            closed(8.0, "2023-06-01 10:00"),
            closed(100.0, "2024-05-15 15:00"),  # after now
            open_trade('BTC', 100.0, 1.0),
        ]

    def test_daily_window_is_thirty_days(self) -> None:
        points = portfolio_performance(self.trades, 'daily', now=self.now)
        self.assertEqual([(p.date, p.pnl, p.cumulative_pnl) for p in points],
                         [(date(2024, 4, 20), 5.0, 5.0)])

    def test_weekly_window_is_ninety_days(self) -> None:
        points = portfolio_performance(self.trades, 'weekly', now=self.now)
        self.assertEqual([(p.date, p.cumulative_pnl) for p in points],
                         [(date(2024, 4, 10), -2.0), (date(2024, 4, 20), 3.0)])

    def test_monthly_window_is_one_year(self) -> None:
        points = portfolio_performance(self.trades, 'monthly', now=self.now)
        self.assertEqual([p.cumulative_pnl for p in points], [8.0, 6.0, 11.0])
        self.assertEqual(points[0].to_dict(),
                         {'date': '2023-06-01', 'pnl': 8.0, 'cumulative_pnl': 8.0})

    def test_unknown_period_rejected(self) -> None:
        with self.assertRaises(ValueError):
            portfolio_performance(self.trades, 'yearly', now=self.now)


if __name__ == '__main__':
    unittest.main()
