"""
Root conftest — global safety nets for ALL test directories.
Keeps tests off any config.toml on the machine running them.
"""
import pytest

import emalens.config as config


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Point config lookup at an empty dir → dataclass defaults."""
    monkeypatch.setenv(config.CONFIG_DIR_ENV, str(tmp_path))
    config._CONFIG = None
    yield
    config._CONFIG = None
