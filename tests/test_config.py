import os
import sys
import tempfile

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tradelog.config.schema import Config, load_config

import unittest


class TestLoadConfig(unittest.TestCase):
    def _write(self, text: str) -> str:
        fd, path = tempfile.mkstemp(suffix='.yaml')
        with os.fdopen(fd, 'w', encoding='utf-8') as fh:
            fh.write(text)
        self.addCleanup(os.remove, path)
        return path

    def test_empty_file_gives_defaults(self) -> None:
        self.assertEqual(load_config(self._write("")), Config())

    def test_partial_override_keeps_other_defaults(self) -> None:
        path = self._write(
            "account_balance: 25000\n"
            "timezone: Asia/Jakarta\n"
            "behavior:\n"
            "  overtrading_max_trades: 6\n"
            "  revenge_window_minutes: 15\n"
            "reporting:\n"
            "  profit_factor_infinity: 1e9\n"
        )
        cfg = load_config(path)
        self.assertEqual(cfg.account_balance, 25000.0)
        self.assertEqual(cfg.timezone, "Asia/Jakarta")
        self.assertEqual(cfg.behavior.overtrading_max_trades, 6)
        self.assertEqual(cfg.behavior.revenge_window_minutes, 15.0)
        self.assertEqual(cfg.behavior.overtrading_high_trades, 15)
        self.assertEqual(cfg.behavior.risk_warn_pct, 2.0)
        self.assertEqual(cfg.reporting.out_dir, "results")
        self.assertEqual(cfg.reporting.profit_factor_infinity, 1e9)

    def test_empty_sections_fall_back_to_defaults(self) -> None:
        cfg = load_config(self._write("behavior:\nreporting: null\naccount_balance: 500\n"))
        self.assertEqual(cfg.behavior, Config().behavior)
        self.assertEqual(cfg.reporting, Config().reporting)
        self.assertEqual(cfg.account_balance, 500.0)

    def test_defaults_match_documented_thresholds(self) -> None:
        cfg = Config()
        self.assertEqual(cfg.account_balance, 10_000.0)
        self.assertEqual(cfg.behavior.loss_streak_window, 5)
        self.assertEqual(cfg.behavior.loss_streak_warn, 3)
        self.assertEqual(cfg.behavior.loss_streak_high, 5)
        self.assertEqual(cfg.behavior.risk_high_pct, 5.0)
        self.assertIsNone(cfg.timezone)


if __name__ == '__main__':
    unittest.main()
