"""Tests for ezkonnect.k8s.watch — the change-confirmation watch."""

from __future__ import annotations

import copy
import time

import pytest
from kubernetes.client.exceptions import ApiException

from ezkonnect.core.deadline import Deadline
from ezkonnect.core.errors import ClusterAccessError
from ezkonnect.k8s.watch import FIELD_SPEC, FIELD_STATUS, ConfirmationOutcome, ConfirmationWatch
from tests._support import FakeWatch, instrumented_app


def _watch(fake_cluster, name="checkout", field=FIELD_STATUS, namespace="shop") -> ConfirmationWatch:
    return ConfirmationWatch(
        fake_cluster.custom,
        namespace,
        name,
        field,
        watch_factory=lambda: FakeWatch(fake_cluster.events, fake_cluster.watch_calls),
    )


def _modified(resource, **status):
    obj = copy.deepcopy(resource)
    obj["status"].update(status)
    return {"type": "MODIFIED", "object": obj}


class TestConfirmationWatch:
    def test_confirms_on_status_change(self, fake_cluster):
        resource = fake_cluster.add_resource(instrumented_app("checkout", "shop"))
        deadline = Deadline.after(2)
        watch = _watch(fake_cluster).start(deadline)

        fake_cluster.events.put(_modified(resource, tracesInstrumented=True))

        assert watch.wait(deadline) is ConfirmationOutcome.CONFIRMED
        assert deadline.elapsed < 2

    def test_unchanged_modification_is_ignored(self, fake_cluster):
        resource = fake_cluster.add_resource(instrumented_app("checkout", "shop"))
        deadline = Deadline.after(0.5)
        watch = _watch(fake_cluster).start(deadline)

        fake_cluster.events.put({"type": "MODIFIED", "object": copy.deepcopy(resource)})

        assert watch.wait(deadline) is ConfirmationOutcome.TIMED_OUT

    def test_spec_watch_ignores_status_change(self, fake_cluster):
        resource = fake_cluster.add_resource(instrumented_app("checkout", "shop", log_type="nginx"))
        deadline = Deadline.after(0.5)
        watch = _watch(fake_cluster, field=FIELD_SPEC).start(deadline)

        fake_cluster.events.put(_modified(resource, tracesInstrumented=True))

        assert watch.wait(deadline) is ConfirmationOutcome.TIMED_OUT

    def test_spec_change_confirms(self, fake_cluster):
        resource = fake_cluster.add_resource(instrumented_app("checkout", "shop", log_type="nginx"))
        deadline = Deadline.after(2)
        watch = _watch(fake_cluster, field=FIELD_SPEC).start(deadline)

        obj = copy.deepcopy(resource)
        obj["spec"]["logType"] = "apache"
        fake_cluster.events.put({"type": "MODIFIED", "object": obj})

        assert watch.wait(deadline) is ConfirmationOutcome.CONFIRMED

    def test_added_event_refreshes_baseline(self, fake_cluster):
        deadline = Deadline.after(2)
        watch = _watch(fake_cluster).start(deadline)

        created = instrumented_app("checkout", "shop")
        fake_cluster.events.put({"type": "ADDED", "object": copy.deepcopy(created)})
        fake_cluster.events.put({"type": "MODIFIED", "object": copy.deepcopy(created)})
        fake_cluster.events.put(_modified(created, tracesInstrumented=True))

        assert watch.wait(deadline) is ConfirmationOutcome.CONFIRMED

    def test_watch_is_scoped_to_one_resource(self, fake_cluster):
        fake_cluster.add_resource(instrumented_app("checkout", "shop"))
        deadline = Deadline.after(2)
        watch = _watch(fake_cluster).start(deadline)
        fake_cluster.events.put(_modified(instrumented_app("checkout", "shop"), tracesInstrumented=True))
        watch.wait(deadline)

        fake_cluster.custom.list_namespaced_custom_object.assert_called_once_with(
            "logz.io",
            "v1alpha1",
            "shop",
            "instrumentedapplications",
            field_selector="metadata.name=checkout",
        )
        call = fake_cluster.watch_calls[0]
        assert call["field_selector"] == "metadata.name=checkout"
        assert call["resource_version"] == "100"
        assert 1 <= call["timeout_seconds"] <= 2
        assert 0 < call["_request_timeout"] <= 2

    def test_timeout_stops_watch(self, fake_cluster):
        fake_cluster.add_resource(instrumented_app("checkout", "shop"))
        deadline = Deadline.after(0.3)
        watch = _watch(fake_cluster).start(deadline)

        started = time.monotonic()
        assert watch.wait(deadline) is ConfirmationOutcome.TIMED_OUT
        assert time.monotonic() - started < 1.5
        assert watch._watch.stopped is True

    def test_read_timeout_at_deadline_is_not_an_error(self, fake_cluster):
        fake_cluster.add_resource(instrumented_app("checkout", "shop"))
        deadline = Deadline.after(0.2)
        watch = _watch(fake_cluster).start(deadline)

        time.sleep(0.3)
        fake_cluster.events.put(TimeoutError("read timed out"))

        assert watch._future.result(timeout=2) is False
        watch.stop()

    def test_stream_error_is_raised_on_wait(self, fake_cluster):
        fake_cluster.add_resource(instrumented_app("checkout", "shop"))
        deadline = Deadline.after(2)
        watch = _watch(fake_cluster).start(deadline)

        fake_cluster.events.put(ApiException(status=403, reason="Forbidden"))

        with pytest.raises(ClusterAccessError, match="Error watching resource Forbidden"):
            watch.wait(deadline)

    def test_list_error_raised_on_start(self, fake_cluster):
        fake_cluster.custom.list_namespaced_custom_object.side_effect = ApiException(
            status=500, reason="Internal Server Error"
        )
        with pytest.raises(ClusterAccessError, match="Error listing resources"):
            _watch(fake_cluster).start(Deadline.after(1))

    def test_single_use(self, fake_cluster):
        deadline = Deadline.after(0.2)
        watch = _watch(fake_cluster).start(deadline)
        with pytest.raises(RuntimeError):
            watch.start(deadline)
        watch.wait(deadline)
