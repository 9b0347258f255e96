import logging

from patchforge import apply_auto
from patchforge._logging import NoopLogger, resolve_logger


def test_resolve_logger_default_noop():
    lg = resolve_logger()
    assert isinstance(lg, NoopLogger)
    # Should not raise:
    lg.debug("hello")
    lg.info("world")


def test_resolve_logger_enabled_creates_logger(caplog):
    with caplog.at_level(logging.INFO):
        lg = resolve_logger(enabled=True, name="patchforge.test")
        lg.info("test message")
    assert any("test message" in rec.message for rec in caplog.records)


def test_resolve_logger_uses_passed_logger():
    custom = logging.getLogger("x")
    assert resolve_logger(logger=custom) is custom


def test_apply_is_silent_by_default(caplog):
    """Library code logs nothing unless the caller opts in."""
    edit = "<<<<<<< SEARCH\nmissing\n=======\nx\n>>>>>>> REPLACE\n"
    with caplog.at_level(logging.DEBUG):
        apply_auto("a\n", edit)
    assert not [rec for rec in caplog.records if rec.name.startswith("patchforge")]


def test_apply_logs_failures_when_enabled(caplog):
    edit = "<<<<<<< SEARCH\nmissing\n=======\nx\n>>>>>>> REPLACE\n"
    with caplog.at_level(logging.DEBUG):
        apply_auto("a\n", edit, log=True)
    messages = [rec.getMessage() for rec in caplog.records]
    assert any("Block 1" in m and "not found" in m for m in messages)


def test_telemetry_is_logged_through_passed_logger(caplog):
    lg = logging.getLogger("harness")
    edit = "<<<<<<< SEARCH\na\n=======\nb\n>>>>>>> REPLACE\n"
    with caplog.at_level(logging.INFO, logger="harness"):
        apply_auto("a\n", edit, {"enableTelemetry": True}, logger=lg)
    assert any("applied via exact" in rec.getMessage() for rec in caplog.records)


def test_noop_logger_reports_disabled():
    assert resolve_logger().isEnabledFor(logging.DEBUG) is False


def test_candidate_listing_logged_at_debug(caplog):
    from patchforge import find_best_match

    lg = logging.getLogger("harness.debug")
    with caplog.at_level(logging.DEBUG, logger="harness.debug"):
        find_best_match("x\ny\nx\n", "x\n", logger=lg)
    assert any("Strategy exact: 2 candidate(s) [0:1.00, 4:1.00]" in rec.getMessage() for rec in caplog.records)
