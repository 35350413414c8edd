import logging

import pytest

from shipflow.utils import logging_config
from shipflow.utils.logging_config import setup_logging


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "shipflow.log"
    logger = setup_logging(level="DEBUG", log_file=log_file)
    assert logger.name == "shipflow"
    logging.getLogger("shipflow.core.engine").debug(f"spawn {['bash', '-c', 'ls']}")
    for h in logging.getLogger().handlers:
        h.flush()
    text = log_file.read_text()
    assert "spawn ['bash', '-c', 'ls']" in text
    assert "DEBUG" in text


def test_console_handler_on_stderr_only(capsys):
    setup_logging(level="INFO")
    logging.getLogger("shipflow.test").warning("careful")
    logging.getLogger("shipflow.test").info("quiet")
    captured = capsys.readouterr()
    assert "careful" in captured.err
    assert "quiet" not in captured.err
    assert captured.out == ""


def test_setup_logging_replaces_handlers(tmp_path):
    setup_logging(level="INFO", log_file=tmp_path / "a.log")
    setup_logging(level="INFO")
    assert len(logging.getLogger().handlers) == 1


def _record_fsync(monkeypatch):
    synced = []
    monkeypatch.setattr(logging_config.os, "fsync", synced.append)
    return synced


def test_fsync_env_syncs_log_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SHIPFLOW_LOG_FSYNC", "1")
    synced = _record_fsync(monkeypatch)
    setup_logging(level="INFO", log_file=tmp_path / "run.log")
    logging.getLogger("shipflow.test").info("step done")
    assert synced
    assert "step done" in (tmp_path / "run.log").read_text()


@pytest.mark.parametrize("value", [None, "0", "no"])
def test_log_file_not_synced_by_default(tmp_path, monkeypatch, value):
    if value is None:
        monkeypatch.delenv("SHIPFLOW_LOG_FSYNC", raising=False)
    else:
        monkeypatch.setenv("SHIPFLOW_LOG_FSYNC", value)
    synced = _record_fsync(monkeypatch)
    setup_logging(level="INFO", log_file=tmp_path / "run.log")
    logging.getLogger("shipflow.test").info("step done")
    assert synced == []
