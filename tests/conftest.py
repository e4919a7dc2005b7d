import os
from pathlib import Path

import pytest

import config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the user's real config file and STEPSHIFT_* variables out of every test."""
    for name in list(os.environ):
        if name.startswith("STEPSHIFT_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(config, "user_config_dir", lambda *args, **kwargs: str(tmp_path / "user_config"))
    monkeypatch.chdir(tmp_path)
    config.get_config.cache_clear()
    yield
    config.get_config.cache_clear()
