"""Tests for event classification."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st
from structlog.testing import capture_logs

from kubesentry.models.events import Level
from kubesentry.pipeline.classifier import classify, event_level, skip_event

from ..conftest import make_event

_unknown_types = st.text(max_size=12).filter(lambda t: t not in {"Normal", "Warning", "Error"})


class TestSkip:
    def test_normal_is_skipped(self) -> None:
        result = classify(make_event(type="Normal"))
        assert result.keep is False

    def test_warning_is_kept(self) -> None:
        assert skip_event(make_event(type="Warning")) is False

    @given(_unknown_types)
    def test_every_non_normal_type_is_kept(self, event_type: str) -> None:
        assert classify(make_event(type=event_type)).keep is True


class TestLevel:
    def test_warning(self) -> None:
        assert classify(make_event(type="Warning")).level == Level.WARNING

    def test_error(self) -> None:
        assert classify(make_event(type="Error")).level == Level.ERROR

    @given(_unknown_types)
    def test_unknown_is_info(self, event_type: str) -> None:
        assert classify(make_event(type=event_type)).level == Level.INFO


class TestUnexpectedTypeLogging:
    def test_unknown_type_logs_exactly_once(self) -> None:
        event = make_event(type="Critical")
        with capture_logs() as logs:
            level = event_level(event)

        assert level == Level.INFO
        unexpected = [entry for entry in logs if entry["event"] == "unexpected_event_type"]
        assert len(unexpected) == 1
        assert unexpected[0]["event_type"] == "Critical"
        assert unexpected[0]["log_level"] == "warning"

    def test_known_types_do_not_log(self) -> None:
        with capture_logs() as logs:
            classify(make_event(type="Warning"))
            classify(make_event(type="Error"))
            classify(make_event(type="Normal"))
        assert logs == []

    def test_one_line_per_event(self) -> None:
        with capture_logs() as logs:
            for _ in range(3):
                classify(make_event(type="Custom"))
        assert sum(1 for entry in logs if entry["event"] == "unexpected_event_type") == 3
