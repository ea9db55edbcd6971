"""Tests for RawEvent parsing from API payloads."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from kubesentry.errors import MalformedEventError
from kubesentry.models.events import RawEvent

from ..conftest import make_event_dict


class TestFromDict:
    def test_full_payload(self) -> None:
        event = RawEvent.from_dict(
            make_event_dict(action="Killing", cluster_name="eu-1", field_path="spec.containers{web}")
        )

        assert event.reason == "Unhealthy"
        assert event.type == "Warning"
        assert event.message == "Liveness probe failed"
        assert event.source_component == "kubelet"
        assert event.source_host == "node-a"
        assert event.count == 3
        assert event.action == "Killing"
        assert event.cluster_name == "eu-1"
        assert event.uid == "event-uid-1"
        assert event.resource_version == "100"
        assert event.involved_object.kind == "Pod"
        assert event.involved_object.namespace == "prod"
        assert event.involved_object.name == "web-1"
        assert event.involved_object.field_path == "spec.containers{web}"
        assert event.involved_object.uid == "pod-uid-1"
        assert event.creation_timestamp == datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)

    def test_missing_count_defaults_to_one(self) -> None:
        assert RawEvent.from_dict(make_event_dict(count=None)).count == 1

    def test_missing_timestamp(self) -> None:
        obj = make_event_dict()
        del obj["metadata"]["creationTimestamp"]
        assert RawEvent.from_dict(obj).creation_timestamp is None

    def test_unparseable_timestamp(self) -> None:
        assert RawEvent.from_dict(make_event_dict(creation_timestamp="yesterday")).creation_timestamp is None

    def test_null_fields_become_empty_strings(self) -> None:
        obj = make_event_dict()
        obj["message"] = None
        obj["source"] = None
        event = RawEvent.from_dict(obj)
        assert event.message == ""
        assert event.source_component == ""

    def test_payload_without_kind_is_accepted(self) -> None:
        obj = make_event_dict()
        del obj["kind"]
        assert RawEvent.from_dict(obj).reason == "Unhealthy"


class TestMalformed:
    @pytest.mark.parametrize("payload", [None, "event", 42, ["a"]])
    def test_non_mapping(self, payload: object) -> None:
        with pytest.raises(MalformedEventError):
            RawEvent.from_dict(payload)

    def test_wrong_kind(self) -> None:
        obj = make_event_dict()
        obj["kind"] = "Pod"
        with pytest.raises(MalformedEventError, match="kind"):
            RawEvent.from_dict(obj)

    def test_involved_object_not_mapping(self) -> None:
        obj = make_event_dict()
        obj["involvedObject"] = "Pod/web-1"
        with pytest.raises(MalformedEventError):
            RawEvent.from_dict(obj)
