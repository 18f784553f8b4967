"""
Technical Indicators — 通用技术指标（纯数学，与策略/交易所无关）
================================================================
SMA, EMA, WMA, HMA, EHMA, MACD over an ordered candle sequence.

Every engine returns a list the same length as its input. Bars inside the
warm-up window hold NaN (SENTINEL) instead of being dropped, so index i
always lines up with candles[i]. NaN inputs poison every window that
contains them through plain float arithmetic; nothing is special-cased.

Degenerate periods (0, negative, longer than the series) give all-NaN
output rather than an exception.
"""
import math
from dataclasses import replace
from typing import List, Sequence

from emalens.types import Candle, MacdResult, ValueAtTime

SENTINEL = float("nan")


# ── Series utilities ──────────────────────────────────────────────────────────

def extract_close(candles: Sequence[Candle]) -> List[float]:
    return [c.close for c in candles]


def wrap_output(candles: Sequence[Candle], values: Sequence[float]) -> List[ValueAtTime]:
    """Pair values back with the timestamps of the candles they came from."""
    return [ValueAtTime(time=c.time, value=v) for c, v in zip(candles, values)]


def with_closes(candles: Sequence[Candle], closes: Sequence[float]) -> List[Candle]:
    """Synthetic candles: same time/open/high/low, close replaced.

    Lets a derived series (an EMA, a MACD line) be fed to an engine that
    reads closing prices. The original candles are left untouched.
    """
    return [replace(c, close=v) for c, v in zip(candles, closes)]


# ── Moving averages ───────────────────────────────────────────────────────────

def sma(candles: Sequence[Candle], period: int) -> List[ValueAtTime]:
    """Simple Moving Average of closes over a trailing window."""
    prices = extract_close(candles)
    out = [SENTINEL] * len(prices)

    if period <= 0 or len(prices) < period:
        return wrap_output(candles, out)

    for i in range(period - 1, len(prices)):
        out[i] = sum(prices[i - period + 1:i + 1]) / period

    return wrap_output(candles, out)


def ema(candles: Sequence[Candle], period: int) -> List[ValueAtTime]:
    """Exponential Moving Average of closes.

    Seeded with the SMA of the first `period` closes at index period-1,
    then EMA[i] = close[i] * k + EMA[i-1] * (1-k) with k = 2 / (period+1).
    Earlier bars are NaN. period=1 gives k=1, i.e. the closes themselves.
    """
    prices = extract_close(candles)
    out = [SENTINEL] * len(prices)

    if period <= 0 or len(prices) < period:
        return wrap_output(candles, out)

    k = 2 / (period + 1)
    prev = sum(prices[:period]) / period
    out[period - 1] = prev
    for i in range(period, len(prices)):
        prev = prices[i] * k + prev * (1 - k)
        out[i] = prev

    return wrap_output(candles, out)


def wma_values(values: Sequence[float], period: int) -> List[float]:
    """Linearly weighted moving average over any scalar series.

    Weights period, period-1, ..., 1 apply to values[i], values[i-1], ...
    and the sum is divided by period*(period+1)/2.
    """
    out = [SENTINEL] * len(values)
    if period <= 0 or len(values) < period:
        return out

    denom = period * (period + 1) / 2
    for i in range(period - 1, len(values)):
        total = 0.0
        for j in range(period):
            total += values[i - j] * (period - j)
        out[i] = total / denom

    return out


def wma(candles: Sequence[Candle], period: int) -> List[ValueAtTime]:
    return wrap_output(candles, wma_values(extract_close(candles), period))


def hma(candles: Sequence[Candle], period: int) -> List[ValueAtTime]:
    """Hull Moving Average.

    HMA = WMA(2 * WMA(close, period // 2) - WMA(close, period), round(sqrt(period)))

    period < 2 would make the half window empty, so it returns all NaN.
    """
    if period < 2:
        return wrap_output(candles, [SENTINEL] * len(candles))

    prices = extract_close(candles)
    half = period // 2
    # sqrt of an integer is never exactly x.5, so banker's rounding can't bite
    sqrt_n = int(round(math.sqrt(period)))

    w_half = wma_values(prices, half)
    w_full = wma_values(prices, period)
    diff = [2 * a - b for a, b in zip(w_half, w_full)]

    return wrap_output(candles, wma_values(diff, sqrt_n))


def ehma(candles: Sequence[Candle], period: int) -> List[ValueAtTime]:
    """HMA of the EMA: the EMA series is fed to hma() as if it were closes."""
    ema_vals = [v.value for v in ema(candles, period)]
    return hma(with_closes(candles, ema_vals), period)


# ── MACD ──────────────────────────────────────────────────────────────────────

def macd(candles: Sequence[Candle], fast_period: int, slow_period: int,
         signal_period: int) -> MacdResult:
    """MACD line (fast EMA - slow EMA), signal line (EMA of the MACD line)
    and histogram (MACD - signal).

    The MACD line is passed to ema() with its warm-up NaNs intact. The
    signal EMA seeds from the mean of the first `signal_period` values, so
    a NaN there (any slow_period > 1) leaves signal and histogram all NaN.
    """
    ema_fast = [v.value for v in ema(candles, fast_period)]
    ema_slow = [v.value for v in ema(candles, slow_period)]

    macd_line = [f - s for f, s in zip(ema_fast, ema_slow)]
    signal_line = [v.value for v in ema(with_closes(candles, macd_line), signal_period)]
    histogram = [m - s for m, s in zip(macd_line, signal_line)]

    return MacdResult(
        macd=wrap_output(candles, macd_line),
        signal=wrap_output(candles, signal_line),
        histogram=wrap_output(candles, histogram),
    )
