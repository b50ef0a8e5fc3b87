"""
Change-confirmation watch on a single ``InstrumentedApplication``.

After the annotate flow mutates a workload it needs evidence that the
companion operator noticed.  :class:`ConfirmationWatch` watches the one
custom resource named after the workload and resolves as soon as the
watched sub-document (``status`` for traces, ``spec`` for logs) differs
from the last version it saw.

Lifecycle::

    watch = ConfirmationWatch(custom_api, "shop", "checkout", "status")
    watch.start(deadline)          # list baseline, open watch thread
    ... mutate the workload ...
    outcome = watch.wait(deadline) # CONFIRMED or TIMED_OUT, always stops

``start`` lists the resource first and opens the watch from the list's
``resourceVersion``, so an update that lands between the mutation and
the moment the watch connection is actually established is still
delivered.  ``start`` must therefore run before the mutation.

The watch runs on a daemon thread that completes a
``concurrent.futures.Future`` exactly once: ``True`` on a change,
``False`` when the deadline passes, or an exception on API failure.
The server-side ``timeout_seconds`` is the time left on the deadline,
rounded up.  The client-side read timeout (``_request_timeout``) is the
exact time left, so a blocked stream is torn down and its connection
released when the deadline passes.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from contextlib import closing
from enum import Enum
from typing import Any

from kubernetes import client, watch
from kubernetes.client.exceptions import ApiException

from ezkonnect.core.deadline import Deadline
from ezkonnect.core.errors import ClusterAccessError
from ezkonnect.core.logging import get_logger
from ezkonnect.k8s.client import RESOURCE_GROUP, RESOURCE_PLURAL, RESOURCE_VERSION

logger = get_logger(__name__)

FIELD_STATUS = "status"
FIELD_SPEC = "spec"

# Floor for the client-side read timeout of one watch connection
_MIN_READ_TIMEOUT = 0.1


class ConfirmationOutcome(str, Enum):
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"


class ConfirmationWatch:
    """One-shot watch for a change of ``field`` on one named resource.

    Not reusable: create one per annotate item.
    """

    def __init__(
        self,
        custom: client.CustomObjectsApi,
        namespace: str,
        name: str,
        field: str,
        *,
        watch_factory: Callable[[], watch.Watch] = watch.Watch,
    ):
        self.namespace = namespace
        self.name = name
        self.field = field
        self._custom = custom
        self._watch_factory = watch_factory
        self._watch: watch.Watch | None = None
        self._thread: threading.Thread | None = None
        self._stopped = threading.Event()
        self._future: Future[bool] = Future()
        self._last_seen: Any = None

    @property
    def field_selector(self) -> str:
        return f"metadata.name={self.name}"

    def start(self, deadline: Deadline) -> ConfirmationWatch:
        """Record the current sub-document and open the watch."""
        if self._thread is not None:
            raise RuntimeError("ConfirmationWatch instances are single-use")

        try:
            listing = self._custom.list_namespaced_custom_object(
                RESOURCE_GROUP,
                RESOURCE_VERSION,
                self.namespace,
                RESOURCE_PLURAL,
                field_selector=self.field_selector,
            )
        except ApiException as exc:
            raise ClusterAccessError(f"Error listing resources {exc.reason}", cause=exc).with_context(
                resource=RESOURCE_PLURAL, namespace=self.namespace, name=self.name
            ) from exc

        items = listing.get("items") or []
        if items:
            self._last_seen = items[0].get(self.field)
        else:
            logger.warning("confirmation_target_missing", namespace=self.namespace, name=self.name)
        resource_version = (listing.get("metadata") or {}).get("resourceVersion")

        self._watch = self._watch_factory()
        self._thread = threading.Thread(
            target=self._run,
            args=(resource_version, deadline),
            name=f"confirm-{self.namespace}/{self.name}",
            daemon=True,
        )
        self._thread.start()
        return self

    def wait(self, deadline: Deadline) -> ConfirmationOutcome:
        """Block until a change is seen or ``deadline`` passes; always stops the watch."""
        try:
            confirmed = self._future.result(timeout=deadline.remaining())
        except TimeoutError:
            confirmed = False
        finally:
            self.stop()

        if confirmed:
            logger.info("change_confirmed", namespace=self.namespace, name=self.name, field=self.field)
            return ConfirmationOutcome.CONFIRMED
        logger.warning("confirmation_timeout", namespace=self.namespace, name=self.name, field=self.field)
        return ConfirmationOutcome.TIMED_OUT

    def stop(self) -> None:
        self._stopped.set()
        if self._watch is not None:
            self._watch.stop()

    # ------------------------------------------------------------------ #
    # Watch thread
    # ------------------------------------------------------------------ #

    def _run(self, resource_version: str | None, deadline: Deadline) -> None:
        try:
            while not self._stopped.is_set() and not deadline.is_expired():
                if self._consume(resource_version, deadline):
                    self._resolve(True)
                    return
                # The server closed the stream early; resume where it left off
                resource_version = self._watch.resource_version or resource_version
                self._stopped.wait(timeout=min(0.5, deadline.remaining()))
            self._resolve(False)
        except ApiException as exc:
            self._fail(f"Error watching resource {exc.reason}", exc, deadline)
        except Exception as exc:  # noqa: BLE001
            self._fail(f"Error watching resource {exc}", exc, deadline)

    def _fail(self, message: str, exc: Exception, deadline: Deadline) -> None:
        if self._stopped.is_set() or deadline.is_expired():
            # read timeout at the deadline or a stream torn down by stop()
            self._resolve(False)
            return
        error = ClusterAccessError(message, cause=exc).with_context(
            resource=RESOURCE_PLURAL, namespace=self.namespace, name=self.name
        )
        if not self._future.done():
            self._future.set_exception(error)

    def _consume(self, resource_version: str | None, deadline: Deadline) -> bool:
        kwargs: dict[str, Any] = {
            "field_selector": self.field_selector,
            "timeout_seconds": deadline.remaining_whole_seconds(),
            "_request_timeout": max(deadline.remaining(), _MIN_READ_TIMEOUT),
        }
        if resource_version:
            kwargs["resource_version"] = resource_version

        stream = self._watch.stream(
            self._custom.list_namespaced_custom_object,
            RESOURCE_GROUP,
            RESOURCE_VERSION,
            self.namespace,
            RESOURCE_PLURAL,
            **kwargs,
        )
        with closing(stream):
            for event in stream:
                if self._stopped.is_set():
                    return False
                if self._changed(event):
                    return True
        return False

    def _changed(self, event: Mapping[str, Any]) -> bool:
        obj = event.get("object")
        if not isinstance(obj, Mapping):
            return False

        current = obj.get(self.field)
        event_type = event.get("type")
        if event_type == "ADDED":
            self._last_seen = current
            return False
        if event_type != "MODIFIED":
            return False

        changed = current != self._last_seen
        self._last_seen = current
        return changed

    def _resolve(self, confirmed: bool) -> None:
        if not self._future.done():
            self._future.set_result(confirmed)
