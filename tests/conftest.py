"""
Shared fixtures for emalens tests.
Everything here is pure computation; the only I/O is tmp config dirs.
"""
import math
import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from emalens.types import Candle


def candles_from_closes(closes, start=1_700_000_000_000, step=60_000, spread=1.0):
    """Candles whose open equals close, high/low = close ± spread."""
    return [
        Candle(time=start + i * step, open=c, high=c + spread, low=c - spread, close=c)
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def wave_candles():
    """200 bars of a noisy sine wave with plenty of turns and crosses."""
    closes = [100 + 10 * math.sin(i * 0.15) + 2 * math.sin(i * 1.3) for i in range(200)]
    return [
        Candle(time=1_700_000_000_000 + i * 60_000, open=closes[i - 1] if i else c,
               high=c + 1.5, low=c - 1.5, close=c)
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def make_candles():
    return candles_from_closes
