"""
Indicator pipeline — one call computes every series for a candle set.

candles → sma / ema / wma / hma / ehma / macd (configured periods)
        → analyze_ema (short/long analysis periods)
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from emalens.analysis import MIN_ANALYSIS_BARS, analyze_ema
from emalens.config import EmalensConfig, get_config
from emalens.indicators import ehma, ema, hma, macd, sma, wma
from emalens.types import Candle, EmaAnalysis, MacdResult, ValueAtTime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndicatorBundle:
    sma: List[ValueAtTime]
    ema: List[ValueAtTime]
    wma: List[ValueAtTime]
    hma: List[ValueAtTime]
    ehma: List[ValueAtTime]
    macd: MacdResult
    analysis: List[EmaAnalysis] = field(default_factory=list)


def compute_indicators(candles: Sequence[Candle], config: Optional[EmalensConfig] = None,
                       include_analysis: bool = True) -> IndicatorBundle:
    """Run every engine over `candles` with the configured periods.

    Non-finite OHLC fields are not rejected; they propagate as NaN.

    Raises:
        InsufficientDataError: include_analysis and fewer than 4 candles.
    """
    cfg = config or get_config()
    ma = cfg.moving_averages

    bad = sum(1 for c in candles if not c.is_finite)
    if bad:
        logger.warning(f"{bad}/{len(candles)} candles have non-finite OHLC fields, outputs will carry NaN")

    analysis = []
    if include_analysis:
        analysis = analyze_ema(candles, cfg.analysis.short_period, cfg.analysis.long_period)

    bundle = IndicatorBundle(
        sma=sma(candles, ma.sma_period),
        ema=ema(candles, ma.ema_period),
        wma=wma(candles, ma.wma_period),
        hma=hma(candles, ma.hma_period),
        ehma=ehma(candles, ma.ehma_period),
        macd=macd(candles, cfg.macd.fast_period, cfg.macd.slow_period, cfg.macd.signal_period),
        analysis=analysis,
    )
    logger.info(
        f"Indicators computed: {len(candles)} candles, "
        f"EMA{cfg.analysis.short_period}/EMA{cfg.analysis.long_period} analysis={len(analysis)} records"
    )
    return bundle


def latest_analysis(candles: Sequence[Candle], short_period: int,
                    long_period: int) -> Optional[EmaAnalysis]:
    """Most recent analysed bar (the one before the last), or None if too short."""
    if len(candles) < MIN_ANALYSIS_BARS:
        return None
    return analyze_ema(candles, short_period, long_period)[-1]
