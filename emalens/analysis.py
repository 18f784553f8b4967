"""
EMA Analysis — 短/长 EMA 逐根 K 线状态分析
==========================================
Walks a candle series once and annotates every interior bar with the state
of a short and a long EMA: slope, turning points, bars since the last turn,
golden/death crosses, bars since the last cross, candle colors and the
recent history of short-EMA turns.

Bars analysed: indices 2 .. n-2. Turn detection needs bar i+1, so the last
bar is never analysed; the first two are skipped. Minimum input: 4 bars.

Distances count from the most recent event *including the current bar*:
a bar that is itself a turn (or cross) reports distance 0. Before the first
event the distance is measured from index 0.
"""
import logging
from typing import List, Sequence

from emalens.indicators import ema
from emalens.types import (
    Candle, CandleColor, CrossType, EmaAbove, EmaAnalysis, EmaPosition,
    SlopeDirection, TurnType,
)

logger = logging.getLogger(__name__)

MIN_ANALYSIS_BARS = 4


class InsufficientDataError(ValueError):
    """Raised when a candle series is too short to analyse."""

    def __init__(self, bars: int, required: int = MIN_ANALYSIS_BARS):
        self.bars = bars
        self.required = required
        super().__init__(
            f"Insufficient data: {bars} candles provided, minimum {required} required."
        )


# ── Per-bar classifiers ───────────────────────────────────────────────────────

def candle_color(c: Candle) -> CandleColor:
    if c.close > c.open:
        return CandleColor.GREEN
    if c.close < c.open:
        return CandleColor.RED
    return CandleColor.EQUAL


def slope(prev: float, now: float) -> float:
    return now - prev


def slope_direction(value: float) -> SlopeDirection:
    """NaN slopes (warm-up) fall through to PARALLEL."""
    if value > 0:
        return SlopeDirection.UP
    if value < 0:
        return SlopeDirection.DOWN
    return SlopeDirection.PARALLEL


def turn_type(prev: float, now: float, nxt: float) -> TurnType:
    """TURN_UP at a strict local minimum, TURN_DOWN at a strict local maximum."""
    if prev > now and nxt > now:
        return TurnType.TURN_UP
    if prev < now and nxt < now:
        return TurnType.TURN_DOWN
    return TurnType.NONE


def ema_position(c: Candle, value: float) -> EmaPosition:
    if value > c.high:
        return EmaPosition.ABOVE_CANDLE
    if value < c.low:
        return EmaPosition.BELOW_CANDLE
    return EmaPosition.INSIDE_CANDLE


def ema_above(short: float, long: float) -> EmaAbove:
    if short > long:
        return EmaAbove.SHORT_ABOVE
    if short < long:
        return EmaAbove.LONG_ABOVE
    return EmaAbove.EQUAL


def cross_type(short_prev: float, long_prev: float,
               short_now: float, long_now: float) -> CrossType:
    """Strict crossing between bar i-1 and bar i. Touching is not a cross."""
    if short_prev < long_prev and short_now > long_now:
        return CrossType.GOLDEN_CROSS
    if short_prev > long_prev and short_now < long_now:
        return CrossType.DEATH_CROSS
    return CrossType.NONE


def back_turn(history: Sequence[TurnType], idx: int, back: int) -> TurnType:
    """Turn recorded `back` bars before idx; NONE when that is before index 0."""
    if idx >= back:
        return history[idx - back]
    return TurnType.NONE


# ── Main analysis ─────────────────────────────────────────────────────────────

def analyze_ema(candles: Sequence[Candle], short_period: int,
                long_period: int) -> List[EmaAnalysis]:
    """Analyse a short/long EMA pair over `candles`.

    Args:
        candles: Bars ordered oldest to newest.
        short_period: Period of the short EMA.
        long_period: Period of the long EMA.

    Returns:
        One EmaAnalysis per bar i in 2 .. len(candles)-2, oldest first.
        Warm-up bars are still emitted; their NaN EMA values classify as
        Parallel / None / InsideCandle / Equal.

    Raises:
        InsufficientDataError: fewer than MIN_ANALYSIS_BARS candles.
    """
    n = len(candles)
    if n < MIN_ANALYSIS_BARS:
        logger.debug(f"analyze_ema: {n} candles < minimum {MIN_ANALYSIS_BARS}")
        raise InsufficientDataError(n)

    ema_short = [v.value for v in ema(candles, short_period)]
    ema_long = [v.value for v in ema(candles, long_period)]

    # Rolling state for this pass only. Order matters: each bar reads what
    # every earlier bar wrote.
    last_turn_short = 0
    last_turn_long = 0
    last_cut = 0
    short_turns = [TurnType.NONE] * n

    out = []
    for i in range(2, n - 1):
        c = candles[i]

        slope_short = slope(ema_short[i - 1], ema_short[i])
        slope_long = slope(ema_long[i - 1], ema_long[i])

        turn_s = turn_type(ema_short[i - 1], ema_short[i], ema_short[i + 1])
        short_turns[i] = turn_s
        if turn_s is not TurnType.NONE:
            last_turn_short = i

        turn_l = turn_type(ema_long[i - 1], ema_long[i], ema_long[i + 1])
        if turn_l is not TurnType.NONE:
            last_turn_long = i

        cut = cross_type(ema_short[i - 1], ema_long[i - 1], ema_short[i], ema_long[i])
        if cut is not CrossType.NONE:
            last_cut = i

        out.append(EmaAnalysis(
            time_candle=c.time,
            color_candle=candle_color(c),

            ema_short_value=ema_short[i],
            ema_short_slope_value=slope_short,
            ema_short_slope_direction=slope_direction(slope_short),
            is_ema_short_turn_type=turn_s,
            short_distance_from_last_turn=i - last_turn_short,
            position_short=ema_position(c, ema_short[i]),

            ema_long_value=ema_long[i],
            ema_long_slope_value=slope_long,
            ema_long_slope_direction=slope_direction(slope_long),
            is_ema_long_turn_type=turn_l,
            long_distance_from_last_turn=i - last_turn_long,
            position_long=ema_position(c, ema_long[i]),

            is_ema_cut_type=cut,
            distance_from_cut_point=i - last_cut,

            previous_color_back1=candle_color(candles[i - 1]),
            # color lookback says UNKNOWN before the series; turn lookback says NONE
            previous_color_back3=candle_color(candles[i - 3]) if i >= 3 else CandleColor.UNKNOWN,

            is_ema_short_turn_type_back1=back_turn(short_turns, i, 1),
            is_ema_short_turn_type_back2=back_turn(short_turns, i, 2),
            is_ema_short_turn_type_back3=back_turn(short_turns, i, 3),
            is_ema_short_turn_type_back4=back_turn(short_turns, i, 4),

            ema_above=ema_above(ema_short[i], ema_long[i]),
            ema_above_diff=ema_short[i] - ema_long[i],
        ))

    logger.debug(
        f"analyze_ema: {n} candles, short={short_period}, long={long_period} "
        f"→ {len(out)} records"
    )
    return out
