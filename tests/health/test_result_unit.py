from __future__ import annotations

from src.health.result import Result, Status


def test_make_defaults_to_ok():
    result = Result.make("all good")
    assert result.status is Status.OK
    assert result.notification_message == "all good"
    assert result.metadata == {}


def test_fluent_failed_with_meta():
    result = Result.make().meta({"a/b": [{"advisoryId": "X"}]}).short_summary("1").failed("bad")
    assert result.status is Status.FAILED
    assert result.to_dict() == {
        "status": "failed",
        "notification_message": "bad",
        "short_summary": "1",
        "meta": {"a/b": [{"advisoryId": "X"}]},
    }


def test_status_change_keeps_message_when_none_given():
    result = Result.make("kept").warning()
    assert result.status is Status.WARNING
    assert result.notification_message == "kept"
