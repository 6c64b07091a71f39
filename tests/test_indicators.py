from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from scanner.signals.indicators import Direction, compute_ema, compute_rsi, momentum_snapshot


def test_ema_shorter_than_period_is_all_undefined() -> None:
    ema = compute_ema([1.0, 2.0, 3.0], period=5)

    assert len(ema) == 3
    assert ema.isna().all()


def test_ema_empty_input_returns_empty_series() -> None:
    assert compute_ema([], period=3).empty


def test_ema_seeds_with_simple_average() -> None:
    ema = compute_ema([1.0, 2.0, 3.0, 4.0, 5.0], period=3)

    assert ema.iloc[:2].isna().all()
    assert ema.tolist()[2:] == pytest.approx([2.0, 3.0, 4.0])


def test_ema_of_constant_series_stays_constant() -> None:
    ema = compute_ema([10.0] * 30, period=14)

    assert ema.iloc[:13].isna().all()
    assert ema.iloc[13:].tolist() == pytest.approx([10.0] * 17)


def test_ema_keeps_input_index() -> None:
    closes = pd.Series([1.0, 2.0, 3.0, 4.0], index=[10, 11, 12, 13])

    assert list(compute_ema(closes, 2).index) == [10, 11, 12, 13]


def test_ema_rejects_non_positive_period() -> None:
    with pytest.raises(ValueError):
        compute_ema([1.0, 2.0], period=0)


def test_rsi_strictly_increasing_is_100() -> None:
    closes = [float(v) for v in range(1, 21)]
    rsi = compute_rsi(closes, period=14)

    assert len(rsi) == len(closes)
    assert rsi.iloc[:14].isna().all()
    assert rsi.iloc[14:].tolist() == pytest.approx([100.0] * 6)


def test_rsi_strictly_decreasing_is_0() -> None:
    closes = [float(v) for v in range(40, 20, -1)]
    rsi = compute_rsi(closes, period=3)

    assert rsi.iloc[:3].isna().all()
    assert rsi.iloc[3:].tolist() == pytest.approx([0.0] * (len(closes) - 3))


def test_rsi_needs_more_values_than_period() -> None:
    assert compute_rsi([1.0, 2.0, 3.0], period=3).empty
    assert len(compute_rsi([1.0, 2.0, 3.0, 4.0], period=3)) == 4


def test_rsi_uses_wilder_smoothing() -> None:
    # diffs: +1, -1, +2, then -2
    rsi = compute_rsi([10.0, 11.0, 10.0, 12.0, 10.0], period=3)

    seed_gain, seed_loss = 3.0 / 3, 1.0 / 3
    assert rsi.iloc[3] == pytest.approx(100 - 100 / (1 + seed_gain / seed_loss))

    avg_gain = (seed_gain * 2 + 0.0) / 3
    avg_loss = (seed_loss * 2 + 2.0) / 3
    assert rsi.iloc[4] == pytest.approx(100 - 100 / (1 + avg_gain / avg_loss))


def test_rsi_flat_series_saturates_at_100() -> None:
    rsi = compute_rsi([5.0] * 6, period=3)

    assert rsi.iloc[3:].tolist() == pytest.approx([100.0] * 3)


def test_momentum_snapshot_requires_lookback_values() -> None:
    assert momentum_snapshot([50.0] * 13, lookback=14) is None


def test_momentum_snapshot_pump_and_dump_strength_are_equal() -> None:
    window = [60.0, 45.0, 72.5, 38.0, 55.0, 50.0, 41.0, 66.0, 70.0, 52.0, 49.0, 58.0, 61.0, 63.0]
    snapshot = momentum_snapshot(window, lookback=14)

    assert snapshot is not None
    assert snapshot.pump_strength == snapshot.dump_strength
    assert snapshot.pump_strength == pytest.approx(72.5 - 38.0)
    assert snapshot.recent_high == 72.5
    assert snapshot.recent_low == 38.0
    assert snapshot.direction == Direction.PUMP
    assert snapshot.strength == pytest.approx(3.0)


def test_momentum_snapshot_uses_only_trailing_window() -> None:
    series = [0.0, 100.0] + [50.0] * 13 + [55.0]
    snapshot = momentum_snapshot(series, lookback=14)

    assert snapshot.recent_high == 55.0
    assert snapshot.recent_low == 50.0


def test_momentum_snapshot_ignores_undefined_values_inside_window() -> None:
    window = [40.0] + [math.nan] * 6 + [90.0, 10.0] + [math.nan] * 4 + [30.0]
    snapshot = momentum_snapshot(window, lookback=14)

    assert snapshot.recent_high == 90.0
    assert snapshot.recent_low == 10.0
    assert snapshot.direction == Direction.DUMP


def test_momentum_snapshot_all_undefined_window_is_absent() -> None:
    assert momentum_snapshot([np.nan] * 14, lookback=14) is None


def test_momentum_snapshot_undefined_endpoint_is_absent() -> None:
    assert momentum_snapshot([np.nan] + [50.0] * 13, lookback=14) is None
    assert momentum_snapshot([50.0] * 13 + [np.nan], lookback=14) is None


def test_momentum_snapshot_equal_endpoints_are_neutral() -> None:
    snapshot = momentum_snapshot([40.0, 80.0] + [60.0] * 11 + [40.0], lookback=14)

    assert snapshot.direction == Direction.NEUTRAL
    assert snapshot.strength == 0.0
