"""
Tests for the display formatting helpers.
"""

import pytest

from roi_calculator.ui_utils import color_text, fmt_money, fmt_num, fmt_pct, fmt_roas, fmt_roi

INF = float("inf")


class TestFormatting:

    @pytest.mark.parametrize("value,expected", [
        (6.25, "$6.25"),
        (999.5, "$999.50"),
        (1_538_461.54, "$1,538,462"),
        (0, "$0.00"),
        (0.001, "$0.01"),
        (-1500, "-$1,500.00"),
        (None, "—"),
        (float("nan"), "—"),
        (INF, "N/A"),
    ])
    def test_fmt_money(self, value, expected):
        assert fmt_money(value) == expected

    def test_fmt_money_forced_decimals(self):
        assert fmt_money(50_000, force_decimals=True) == "$50,000.00"

    def test_fmt_pct(self):
        assert fmt_pct(3.26) == "3.3%"
        assert fmt_pct(115.3846) == "115.4%"
        assert fmt_pct(INF) == "N/A"

    def test_fmt_roas_and_roi(self):
        assert fmt_roas(2.153846) == "2.15:1"
        assert fmt_roi(115.3846) == "115.4%"
        assert fmt_roas(INF) == "N/A"
        assert fmt_roi(INF) == "N/A"

    def test_fmt_num(self):
        assert fmt_num(1000) == "1,000"

    def test_color_text(self):
        assert color_text("Profitable", "green") == ":green[Profitable]"
        assert color_text("x", "purple") == "x"
