import json

import pytest

from delve import logging_utils


def test_key_value_format(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    line = logging_utils._format("info", event="exit_created", x=3, degenerate=False, note="two words", skip=None)
    assert line.startswith("level=info ts=")
    assert "event=exit_created" in line
    assert "x=3" in line
    assert "degenerate=false" in line
    assert 'note="two words"' in line
    assert "skip" not in line


def test_json_format(monkeypatch):
    monkeypatch.setattr(logging_utils, "JSON_MODE", True)
    rec = json.loads(logging_utils._format("warn", event="main_path_degenerate", placed=4))
    assert rec["level"] == "warn" and rec["placed"] == 4 and rec["event"] == "main_path_degenerate"


def test_level_filtering(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["warn"])
    log = logging_utils.get_logger("delve.test")
    log.info(event="hidden")
    log.warn(event="shown")
    log.error(event="to_stderr")
    out, err = capsys.readouterr()
    assert "hidden" not in out
    assert "event=shown" in out and "logger=delve.test" in out
    assert "event=to_stderr" in err


def test_bind_adds_context(monkeypatch, capsys):
    monkeypatch.setattr(logging_utils, "JSON_MODE", False)
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["info"])
    base = logging_utils.get_logger("delve.bind")
    child = base.bind(seed=7)
    child.info(event="generated")
    base.info(event="plain")
    lines = capsys.readouterr().out.strip().splitlines()
    assert "seed=7" in lines[0]
    assert "seed" not in lines[1]


def test_configure(monkeypatch):
    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.CURRENT_LEVEL)
    monkeypatch.setattr(logging_utils, "JSON_MODE", logging_utils.JSON_MODE)
    logging_utils.configure(level="ERROR", json_mode=True)
    assert logging_utils.CURRENT_LEVEL == 40 and logging_utils.JSON_MODE is True
    with pytest.raises(ValueError):
        logging_utils.configure(level="loud")


def test_loggers_are_cached():
    assert logging_utils.get_logger("a.b") is logging_utils.get_logger("a.b")
