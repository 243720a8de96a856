"""Log formatters — structured fields surfaced from logging extras."""

import json
import logging

from teambuilder.infrastructure.observability import (
    ContextTextFormatter, JSONFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "teambuilder.test", logging.INFO, __file__, 1, "Member joined", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_formats_core_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "teambuilder.test"
    assert payload["message"] == "Member joined"
    assert "timestamp" in payload


def test_surfaces_domain_extras_as_strings():
    payload = json.loads(JSONFormatter().format(
        _record(team_id="t-1", user_id="u-1", error_code="NOT_MEMBER", count=3),
    ))
    assert payload["team_id"] == "t-1"
    assert payload["error_code"] == "NOT_MEMBER"
    assert payload["count"] == "3"
    assert "invitation_id" not in payload


def test_setup_logging_replaces_root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug", "json")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_text_format_appends_domain_ids():
    line = ContextTextFormatter().format(_record(team_id="t-1", invitation_id="i-9"))
    assert line.endswith("Member joined [team_id=t-1 invitation_id=i-9]")


def test_text_format_without_extras_is_plain():
    assert ContextTextFormatter().format(_record()).endswith("Member joined")
