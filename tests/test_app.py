from __future__ import annotations

import logging

import app


def test_redacting_formatter_masks_secrets() -> None:
    formatter = app._RedactingFormatter(["s3cret", ""], fmt="%(message)s")
    record = logging.LogRecord("holobot", logging.INFO, __file__, 1, "token=s3cret", None, None)
    assert formatter.format(record) == "token=***"


def test_redaction_values_come_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("HOLOBOT_TOKEN", "abc")
    monkeypatch.setenv("HOLOBOT_PASSWORD", "abcdef")
    assert app._collect_redaction_values({}) == ["abcdef", "abc"]
    assert app._collect_redaction_values({"redact": {"enabled": False}}) == []


def test_time_subcommand_prints_tables(capsys) -> None:
    app.main(["time", "call at 9am PT or 10 people"])
    out = capsys.readouterr().out
    assert '"9am PT" is:' in out
    assert 'I couldn\'t understand the time "10 people".' in out


def test_time_subcommand_without_times(capsys) -> None:
    app.main(["time", "nothing here"])
    assert capsys.readouterr().out == "No times found.\n"
