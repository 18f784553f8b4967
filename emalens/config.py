"""
Centralized configuration loader for emalens.
Reads config.toml from the first found config directory:
  1. $EMALENS_CONFIG_DIR environment variable
  2. ./config/  (running from a checkout)
  3. package_dir/../config/

Only default periods live here. The indicator engines take explicit
periods and never read config; pipeline.compute_indicators does.
"""
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR_ENV = "EMALENS_CONFIG_DIR"


# --- Config search ---
def _find_config_dir() -> Path:
    """Find config directory by priority."""
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        p = Path(env_dir)
        if p.exists():
            return p

    local = Path.cwd() / "config"
    if local.exists() and (local / "config.toml").exists():
        return local

    # Fallback: package_dir/../config/ (defaults are used if it's missing too)
    return Path(__file__).parent.parent / "config"


# --- Data classes ---
@dataclass(frozen=True)
class AnalysisConfig:
    short_period: int = 8
    long_period: int = 21

@dataclass(frozen=True)
class MacdConfig:
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9

@dataclass(frozen=True)
class MovingAverageConfig:
    sma_period: int = 20
    ema_period: int = 20
    wma_period: int = 20
    hma_period: int = 16
    ehma_period: int = 16

@dataclass(frozen=True)
class EmalensConfig:
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    macd: MacdConfig = field(default_factory=MacdConfig)
    moving_averages: MovingAverageConfig = field(default_factory=MovingAverageConfig)


# --- Loader ---
def _load_toml(path: Path) -> dict:
    """Load TOML file, return empty dict if missing."""
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


_CONFIG = None

def get_config() -> EmalensConfig:
    """Load and cache config from config.toml."""
    global _CONFIG
    if _CONFIG is not None:
        return _CONFIG

    data = _load_toml(_find_config_dir() / "config.toml")

    _CONFIG = EmalensConfig(
        analysis=AnalysisConfig(**data.get("analysis", {})),
        macd=MacdConfig(**data.get("macd", {})),
        moving_averages=MovingAverageConfig(**data.get("moving_averages", {})),
    )
    return _CONFIG


def reload_config() -> EmalensConfig:
    """Force reload config (useful for tests)."""
    global _CONFIG
    _CONFIG = None
    return get_config()
