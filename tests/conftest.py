import pytest

from core import config


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    logfile = tmp_path / "x_grapher_log.jsonl"
    monkeypatch.setattr(config, "LOGFILE", str(logfile))
    return logfile
