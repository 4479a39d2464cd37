import logging

from literary_graphs.events import log_event


def test_log_event_emits_payload():
    seen = []
    log_event("hello", lambda kind, payload: seen.append((kind, payload)), n_nodes=3)
    assert seen == [("log", {"message": "hello", "n_nodes": 3})]


def test_failing_emit_is_logged_not_raised(caplog):
    def broken(kind, payload):
        raise RuntimeError("ui gone")

    with caplog.at_level(logging.DEBUG, logger="literary_graphs"):
        log_event("still fine", broken)

    assert "emit callback failed" in caplog.text
