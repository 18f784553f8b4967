"""
Core data types shared by the indicator engines and the EMA analysis.
"""
import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping


class CandleColor(str, Enum):
    GREEN = "Green"
    RED = "Red"
    EQUAL = "Equal"
    UNKNOWN = "Unknown"  # only for lookbacks that fall before the series


class SlopeDirection(str, Enum):
    UP = "Up"
    DOWN = "Down"
    PARALLEL = "Parallel"


class TurnType(str, Enum):
    TURN_UP = "TurnUp"      # local minimum
    TURN_DOWN = "TurnDown"  # local maximum
    NONE = "None"


class CrossType(str, Enum):
    GOLDEN_CROSS = "GoldenCross"
    DEATH_CROSS = "DeathCross"
    NONE = "None"


class EmaPosition(str, Enum):
    ABOVE_CANDLE = "AboveCandle"
    BELOW_CANDLE = "BelowCandle"
    INSIDE_CANDLE = "InsideCandle"


class EmaAbove(str, Enum):
    SHORT_ABOVE = "ShortAbove"
    LONG_ABOVE = "LongAbove"
    EQUAL = "Equal"


# Exchange snapshots use one-letter keys ('t', 'o', ...) with string values
_SHORT_KEYS = {"time": "t", "open": "o", "high": "h", "low": "l", "close": "c"}

MAX_TIME = 2**64 - 1


def _parse_time(raw: Any) -> int:
    """Whole-number timestamp from int, integral float or numeric string."""
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(raw)
        return int(raw)
    try:
        return int(raw)
    except ValueError:
        f = float(raw)  # "1700000000000.0"
        if not f.is_integer():
            raise
        return int(f)


@dataclass(frozen=True)
class Candle:
    """One OHLC bar. Sequence order is time order.

    time must fit an unsigned 64-bit timestamp; OHLC fields are not checked
    and non-finite prices propagate as NaN.
    """
    time: int
    open: float
    high: float
    low: float
    close: float

    def __post_init__(self):
        if not 0 <= self.time <= MAX_TIME:
            raise ValueError(f"Candle time must be in [0, 2**64), got {self.time}")

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "Candle":
        """Build a candle from a dict with long or exchange-style short keys.

        Values may be numbers or numeric strings (Hyperliquid returns strings).
        Raises ValueError naming the offending field.
        """
        values = {}
        for name, short in _SHORT_KEYS.items():
            if name in row:
                raw = row[name]
            elif short in row:
                raw = row[short]
            else:
                raise ValueError(f"Candle field missing: {name!r} (or {short!r})")
            try:
                values[name] = _parse_time(raw) if name == "time" else float(raw)
            except (TypeError, ValueError, OverflowError):
                raise ValueError(f"Candle field {name!r} is not numeric: {raw!r}") from None
        return cls(**values)

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.open, self.high, self.low, self.close))


@dataclass(frozen=True)
class ValueAtTime:
    """Indicator output at one bar. value is NaN during warm-up."""
    time: int
    value: float

    @property
    def is_defined(self) -> bool:
        return not math.isnan(self.value)


@dataclass(frozen=True)
class MacdResult:
    macd: List[ValueAtTime]
    signal: List[ValueAtTime]
    histogram: List[ValueAtTime]


@dataclass(frozen=True)
class EmaAnalysis:
    """Annotated state of the short/long EMA pair at one bar."""
    time_candle: int
    color_candle: CandleColor

    ema_short_value: float
    ema_short_slope_value: float
    ema_short_slope_direction: SlopeDirection
    is_ema_short_turn_type: TurnType
    short_distance_from_last_turn: int
    position_short: EmaPosition

    ema_long_value: float
    ema_long_slope_value: float
    ema_long_slope_direction: SlopeDirection
    is_ema_long_turn_type: TurnType
    long_distance_from_last_turn: int
    position_long: EmaPosition

    is_ema_cut_type: CrossType
    distance_from_cut_point: int

    previous_color_back1: CandleColor
    previous_color_back3: CandleColor

    is_ema_short_turn_type_back1: TurnType
    is_ema_short_turn_type_back2: TurnType
    is_ema_short_turn_type_back3: TurnType
    is_ema_short_turn_type_back4: TurnType

    ema_above: EmaAbove
    ema_above_diff: float

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with labels flattened to their strings."""
        return {k: v.value if isinstance(v, Enum) else v for k, v in asdict(self).items()}
