from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

import pytest

from styled_text import StyledString
from styled_text.runtime import telemetry


class RecordingLogger:
    def __init__(self) -> None:
        self.records: List[Tuple[str, str, Dict[str, str]]] = []
        self.profiles: List[str] = []

    def _record(self, level: str, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.records.append((level, message, dict(pairs)))

    def debug_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self._record("debug", message, pairs)

    def info_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self._record("info", message, pairs)

    def warning_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self._record("warning", message, pairs)

    def error_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self._record("error", message, pairs)

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiles.append(name)
        yield


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    logger = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: logger)
    return logger


def test_replace_span_reports_stats(recorder: RecordingLogger) -> None:
    with telemetry.replace_span("text", 10) as stats:
        stats.record(4, 12)

    assert recorder.profiles == ["replace::text"]
    assert recorder.records == [
        (
            "debug",
            "replace::done",
            {"kind": "text", "subject_length": "10", "spans": "4", "new_length": "12"},
        )
    ]


def test_replace_span_reports_failure_and_reraises(recorder: RecordingLogger) -> None:
    with pytest.raises(KeyError):
        with telemetry.replace_span("pattern", 3):
            raise KeyError("missing")

    level, message, payload = recorder.records[-1]
    assert (level, message) == ("error", "replace::fail")
    assert payload["reason"] == "'missing'"
    assert "new_length" not in payload


def test_record_event_payload(recorder: RecordingLogger) -> None:
    telemetry.record_event("thing.happened", level="WARNING", data={"count": 2})

    assert recorder.records == [
        ("warning", "event::thing.happened", {"event": "thing.happened", "count": "2"})
    ]


def test_record_event_rejects_unknown_level(recorder: RecordingLogger) -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("x", level="trace")


def test_pattern_replace_logs_lengths(recorder: RecordingLogger) -> None:
    string = StyledString("a-b-c")

    string.replace_pattern("-", "+-")

    assert string.text == "a+-b+-c"
    assert recorder.profiles == ["replace::pattern"]
    assert recorder.records[-1][2] == {
        "kind": "pattern",
        "subject_length": "5",
        "spans": "6",
        "new_length": "7",
    }


def test_replace_without_match_logs_no_new_length(recorder: RecordingLogger) -> None:
    StyledString("abc").replace_text("zz", "y")

    assert recorder.records[-1][2] == {"kind": "text", "subject_length": "3", "spans": "0"}


def test_invalid_pattern_event_carries_offset(recorder: RecordingLogger) -> None:
    StyledString("abc").replace_pattern("a(b", "x")

    events = [
        payload
        for _, message, payload in recorder.records
        if message == "event::pattern.invalid"
    ]
    assert len(events) == 1
    assert events[0]["pattern"] == "a(b"
    assert events[0]["offset"].isdigit()


def test_environment_drives_logger_name(monkeypatch: pytest.MonkeyPatch) -> None:
    created: List[str] = []

    class FakeLogger:
        @classmethod
        def with_config(cls, name: str, config: object) -> str:
            created.append(name)
            return name

    monkeypatch.setattr(telemetry.tl, "Logger", FakeLogger)
    monkeypatch.setenv("STYLED_TEXT_LOGGER", "custom")
    telemetry.configure(config=object())

    assert telemetry.get_logger() == "custom"
    assert telemetry.get_logger("styled_text.replace") == "styled_text.replace"
    assert created == ["custom", "styled_text.replace"]

    telemetry.configure()
    assert telemetry._LOGGERS == {}
