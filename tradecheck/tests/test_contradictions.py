"""Tests for the contradiction analyzer."""

from __future__ import annotations

import logging

import pytest

from tradecheck.analysis.contradictions import (
    DOWNTREND_OVERSOLD,
    EMA_INCONSISTENT,
    KST_INCONSISTENT,
    LEVER_RISK_ELEVATED,
    LEVER_RISK_EXTREME,
    NO_DIRECTION_SUPPORT,
    STOP_TOO_TIGHT,
    STOP_TOO_WIDE,
    TRENDLINE_INVALIDATED,
    TRENDLINE_WEAKENED,
    UPTREND_OVERBOUGHT,
    find_contradictions,
)
from tradecheck.data.trade_analysis import PricePattern
from tradecheck.scoring.subscores import score_direction_trend_match
from tradecheck.tests.conftest import make_analysis


def only(findings: list[str], needle: str) -> list[str]:
    return [f for f in findings if needle in f]


class TestScenarios:
    def test_aligned_setup_has_no_contradictions(self, aligned_long):
        assert find_contradictions(aligned_long, False) == []

    def test_frequent_breaks(self):
        record = make_analysis(break_times=7)
        assert score_direction_trend_match(record) == 5
        findings = find_contradictions(record)
        assert TRENDLINE_WEAKENED in findings
        assert TRENDLINE_INVALIDATED in findings

    def test_diverging_triangle_against_short(self):
        record = make_analysis(
            direction="short", long_trend="down", mid_trend="down", short_trend="down",
            ema_trends=("down",) * 3, kst_crosses=("cross_down",) * 3,
            patterns=[PricePattern("triangle_diverging", "short", "up")],
        )
        findings = find_contradictions(record)
        assert findings == [
            "short-term (<=1 week) Diverging Triangle broke upward, "
            "conflicting with the short entry"
        ]

    @pytest.mark.parametrize("direction, trends", [
        ("long", ("up", "sideways", "down")),
        ("short", ("up", "down", "down")),
    ])
    def test_overbought_uptrend(self, direction, trends):
        long_t, mid_t, short_t = trends
        record = make_analysis(
            direction=direction, long_trend=long_t, mid_trend=mid_t, short_trend=short_t,
            rsi_level="overbought", stop_loss_rate=0.5, leverage=200,
        )
        findings = find_contradictions(record)
        assert findings[0] == UPTREND_OVERBOUGHT


class TestTrendRsi:
    def test_mid_trend_alone_triggers(self):
        record = make_analysis(long_trend="sideways", mid_trend="up", rsi_level="overbought")
        assert UPTREND_OVERBOUGHT in find_contradictions(record)

    def test_short_trend_does_not_trigger(self):
        record = make_analysis(
            long_trend="sideways", mid_trend="sideways", short_trend="up",
            rsi_level="overbought",
        )
        assert UPTREND_OVERBOUGHT not in find_contradictions(record)

    def test_oversold_downtrend(self):
        record = make_analysis(
            direction="short", long_trend="down", mid_trend="down", short_trend="down",
            rsi_level="oversold", ema_trends=("down",) * 3,
        )
        assert find_contradictions(record)[0] == DOWNTREND_OVERSOLD

    def test_both_rules_can_fire(self):
        record = make_analysis(long_trend="up", mid_trend="down", rsi_level="oversold")
        findings = find_contradictions(record)
        assert DOWNTREND_OVERSOLD in findings
        assert UPTREND_OVERBOUGHT not in findings


class TestTrendlineBreaks:
    @pytest.mark.parametrize("breaks, weakened, invalidated", [
        (0, False, False),
        (1, False, False),
        (2, True, False),
        (3, True, True),
        (5, True, True),
    ])
    def test_thresholds(self, breaks, weakened, invalidated):
        findings = find_contradictions(make_analysis(break_times=breaks))
        assert (TRENDLINE_WEAKENED in findings) == weakened
        assert (TRENDLINE_INVALIDATED in findings) == invalidated

    def test_weakened_before_invalidated(self):
        findings = find_contradictions(make_analysis(break_times=5))
        assert findings.index(TRENDLINE_WEAKENED) < findings.index(TRENDLINE_INVALIDATED)


class TestPatterns:
    def test_bullish_pattern_against_matching_span_downtrend(self):
        record = make_analysis(
            long_trend="down", patterns=[PricePattern("double_bottom", "long")],
        )
        conflicts = only(find_contradictions(record), "Double Bottom")
        assert conflicts == [
            "long-term (>4 weeks) Double Bottom (bullish pattern) conflicts "
            "with the long-term downtrend"
        ]

    def test_bullish_pattern_other_span_ignored(self):
        record = make_analysis(
            long_trend="down", patterns=[PricePattern("flag_up", "short")],
        )
        assert only(find_contradictions(record), "Bull Flag") == []

    def test_bearish_pattern_against_uptrend(self):
        record = make_analysis(patterns=[PricePattern("head_shoulders_top", "medium")])
        conflicts = only(find_contradictions(record), "Head & Shoulders Top")
        assert len(conflicts) == 1
        assert "mid-term uptrend" in conflicts[0]

    def test_sentinel_skipped(self):
        record = make_analysis(long_trend="sideways", patterns=[PricePattern.none()])
        assert only(find_contradictions(record), "None") == []

    def test_converging_triangle_needs_trend(self):
        record = make_analysis(
            long_trend="sideways",
            patterns=[PricePattern("triangle_converging", "medium", "none")],
        )
        assert len(only(find_contradictions(record), "needs defined trend")) == 1

    def test_converging_triangle_against_short_trend(self):
        up = make_analysis(patterns=[PricePattern("triangle_converging", "short", "down")])
        assert len(only(find_contradictions(up), "lower boundary")) == 1

        down = make_analysis(
            short_trend="down",
            patterns=[PricePattern("triangle_converging", "short", "up")],
        )
        assert len(only(find_contradictions(down), "upper boundary")) == 1

    def test_diverging_triangle_without_breakout(self):
        record = make_analysis(patterns=[PricePattern("triangle_diverging", "long", "none")])
        assert len(only(find_contradictions(record), "signal invalid, no breakout yet")) == 1

    def test_diverging_triangle_sideways_without_breakout_is_fine(self):
        record = make_analysis(
            long_trend="sideways",
            patterns=[PricePattern("triangle_diverging", "long", "none")],
        )
        assert only(find_contradictions(record), "Diverging Triangle") == []

    def test_diverging_triangle_down_against_long(self):
        record = make_analysis(patterns=[PricePattern("triangle_diverging", "short", "down")])
        assert len(only(find_contradictions(record), "conflicting with the long entry")) == 1

    def test_pattern_findings_follow_list_order(self):
        record = make_analysis(
            long_trend="down", mid_trend="up", short_trend="up",
            patterns=[
                PricePattern("flag_down", "short"),
                PricePattern("double_bottom", "long"),
                PricePattern("double_top", "medium"),
            ],
        )
        findings = find_contradictions(record)
        names = [f.rsplit(" (", 1)[0] for f in findings if "pattern)" in f]
        assert names == [
            "short-term (<=1 week) Bear Flag",
            "long-term (>4 weeks) Double Bottom",
            "medium-term (1-4 weeks) Double Top",
        ]


class TestRiskAndIndicators:
    def test_indicator_disagreement(self):
        record = make_analysis(
            ema_trends=("up", "down", "sideways"),
            kst_crosses=("cross_up", "cross_down", "none"),
        )
        findings = find_contradictions(record)
        assert findings == [EMA_INCONSISTENT, KST_INCONSISTENT]

    def test_two_of_three_is_acceptable(self):
        record = make_analysis(ema_trends=("up", "up", "down"))
        assert EMA_INCONSISTENT not in find_contradictions(record)

    def test_stop_too_wide(self):
        findings = find_contradictions(make_analysis(stop_loss_rate=12.0, leverage=1))
        assert findings == [STOP_TOO_WIDE]

    def test_stop_too_tight(self):
        findings = find_contradictions(make_analysis(stop_loss_rate=0.5, leverage=10))
        assert findings == [STOP_TOO_TIGHT]

    def test_stop_boundaries_clean(self):
        assert find_contradictions(make_analysis(stop_loss_rate=10.0, leverage=1)) == []
        assert find_contradictions(make_analysis(stop_loss_rate=1.0, leverage=1)) == []

    def test_extreme_leverage_risk(self):
        findings = find_contradictions(make_analysis(stop_loss_rate=5.0, leverage=20))
        assert findings == [LEVER_RISK_EXTREME]

    def test_elevated_leverage_risk(self):
        findings = find_contradictions(make_analysis(stop_loss_rate=5.0, leverage=10))
        assert findings == [LEVER_RISK_ELEVATED]

    def test_explicit_high_risk_flag(self):
        record = make_analysis(stop_loss_rate=5.0, leverage=20)
        assert find_contradictions(record, True) == [LEVER_RISK_EXTREME]

    def test_false_flag_does_not_hide_extreme_risk(self):
        record = make_analysis(stop_loss_rate=5.0, leverage=15)
        assert record.lever_stop_loss_risk == pytest.approx(75.0)
        assert find_contradictions(record, False) == [LEVER_RISK_EXTREME]

    def test_true_flag_on_safe_record_adds_nothing(self, caplog):
        record = make_analysis(leverage=5)
        with caplog.at_level(logging.WARNING, logger="tradecheck.analysis.contradictions"):
            assert find_contradictions(record, True) == []
        assert "disagrees" in caplog.text

    def test_true_flag_on_elevated_record_stays_moderate(self):
        record = make_analysis(stop_loss_rate=5.0, leverage=10)
        assert find_contradictions(record, True) == [LEVER_RISK_ELEVATED]

    def test_no_direction_support(self):
        record = make_analysis(long_trend="down", mid_trend="down", short_trend="down")
        assert find_contradictions(record) == [NO_DIRECTION_SUPPORT]


class TestOrdering:
    def test_full_rule_order(self):
        record = make_analysis(
            direction="long",
            long_trend="down", mid_trend="down", short_trend="sideways",
            rsi_level="oversold",
            break_times=3,
            stop_loss_rate=12.0, leverage=10,
            patterns=[PricePattern("flag_up", "medium")],
            ema_trends=("up", "down", "sideways"),
            kst_crosses=("cross_up", "cross_down", "none"),
        )
        findings = find_contradictions(record)
        assert findings == [
            DOWNTREND_OVERSOLD,
            TRENDLINE_WEAKENED,
            TRENDLINE_INVALIDATED,
            "medium-term (1-4 weeks) Bull Flag (bullish pattern) conflicts "
            "with the mid-term downtrend",
            EMA_INCONSISTENT,
            KST_INCONSISTENT,
            STOP_TOO_WIDE,
            LEVER_RISK_EXTREME,
            NO_DIRECTION_SUPPORT,
        ]
