"""Tests for ezkonnect.ops.state — listing and projection."""

from __future__ import annotations

from kubernetes.client.exceptions import ApiException

from ezkonnect.k8s.models import InstrumentedApplication
from ezkonnect.ops.result import CLUSTER_ERROR
from ezkonnect.ops.state import PodTemplateInfo, get_state, project, resolve_service_name
from tests._support import instrumented_app, make_deployment, make_statefulset


def _decode(*docs):
    return [InstrumentedApplication.from_object(d) for d in docs]


class TestResolveServiceName:
    def test_annotation_wins(self):
        template = PodTemplateInfo({"logz.io/service-name": "custom"}, ("a", "b"))
        assert resolve_service_name("a", "checkout", template) == "custom"

    def test_multi_container_uses_container_name(self):
        template = PodTemplateInfo({}, ("web", "sidecar"))
        assert resolve_service_name("web", "checkout", template) == "web"

    def test_container_equals_owner(self):
        assert resolve_service_name("checkout", "checkout") == "checkout"

    def test_fallback_prefixes_lowercased_owner(self):
        template = PodTemplateInfo({}, ("server",))
        assert resolve_service_name("server", "Checkout", template) == "checkout-server"

    def test_empty_annotation_ignored(self):
        template = PodTemplateInfo({"logz.io/service-name": ""}, ("server",))
        assert resolve_service_name("server", "api", template) == "api-server"

    def test_no_container(self):
        assert resolve_service_name(None, "api") is None


class TestProject:
    def test_one_record_per_language_entry(self):
        apps = _decode(
            instrumented_app(
                "deployment-checkout",
                "shop",
                owner=("Deployment", "checkout"),
                languages=[
                    {"language": "java", "containerName": "checkout"},
                    {"language": "python", "containerName": "worker", "opentelemetryPreconfigured": True},
                ],
                traces_instrumented=True,
                log_type="nginx",
            )
        )
        records = project(apps)

        assert len(records) == 2
        first, second = records
        assert first.name == "deployment-checkout"
        assert first.controller_kind == "deployment"
        assert first.traces_instrumentable is True
        assert first.traces_instrumented is True
        assert first.language == "java"
        assert first.application is None
        assert first.service_name == "checkout"
        assert first.opentelemetry_preconfigured is False
        assert first.log_type == "nginx"
        assert first.detection_status == "Completed"
        assert second.service_name == "checkout-worker"
        assert second.opentelemetry_preconfigured is True

    def test_applications_are_not_instrumentable(self):
        apps = _decode(
            instrumented_app(
                "db",
                owner=("StatefulSet", "db"),
                applications=[{"application": "postgres", "containerName": "db"}],
            )
        )
        (record,) = project(apps)
        assert record.traces_instrumentable is False
        assert record.application == "postgres"
        assert record.container_name == "db"
        assert record.language is None
        assert record.service_name is None
        assert record.opentelemetry_preconfigured is False

    def test_no_detection_yields_single_record(self):
        (record,) = project(_decode(instrumented_app("pending", phase="Pending")))
        assert record.container_name is None
        assert record.application is None
        assert record.language is None
        assert record.service_name is None
        assert record.traces_instrumentable is False
        assert record.opentelemetry_preconfigured is None
        assert record.detection_status == "Pending"

    def test_empty_list_yields_no_records(self):
        assert project(_decode(instrumented_app("x", languages=[]))) == []

    def test_internal_and_ownerless_skipped(self):
        apps = _decode(
            instrumented_app("ezkonnect-ui"),
            instrumented_app("kubernetes-instrumentor"),
            instrumented_app("orphan", owner=None),
            instrumented_app("checkout"),
        )
        assert [r.name for r in project(apps)] == ["checkout"]

    def test_template_lookup_by_owner(self):
        apps = _decode(
            instrumented_app(
                "deployment-api",
                "shop",
                owner=("Deployment", "api"),
                languages=[{"language": "go", "containerName": "server"}],
            )
        )
        templates = {("deployment", "shop", "api"): PodTemplateInfo({"logz.io/service-name": "api-gw"}, ("server",))}
        assert project(apps, templates)[0].service_name == "api-gw"


class TestGetState:
    def test_end_to_end(self, fake_cluster, ctx):
        fake_cluster.add_workload(
            make_deployment("checkout", "shop", annotations={"logz.io/service-name": "checkout-svc"})
        )
        fake_cluster.add_resource(
            instrumented_app(
                "deployment-checkout",
                "shop",
                owner=("Deployment", "checkout"),
                languages=[{"language": "java", "containerName": "checkout"}],
            )
        )
        fake_cluster.add_resource(
            instrumented_app(
                "statefulset-db",
                "data",
                owner=("StatefulSet", "db"),
                applications=[{"application": "mysql", "containerName": "db"}],
            )
        )

        result = get_state(ctx)

        assert result.success is True
        assert [(r.name, r.service_name) for r in result.data] == [
            ("deployment-checkout", "checkout-svc"),
            ("statefulset-db", None),
        ]
        fake_cluster.custom.list_cluster_custom_object.assert_called_once_with(
            "logz.io", "v1alpha1", "instrumentedapplications"
        )

    def test_owner_read_once(self, fake_cluster, ctx):
        fake_cluster.add_workload(make_statefulset("db", "data", containers=["db", "exporter"]))
        for name in ("statefulset-db-a", "statefulset-db-b"):
            fake_cluster.add_resource(
                instrumented_app(
                    name,
                    "data",
                    owner=("StatefulSet", "db"),
                    languages=[{"language": "java", "containerName": "exporter"}],
                )
            )

        result = get_state(ctx)

        assert [r.service_name for r in result.data] == ["exporter", "exporter"]
        assert fake_cluster.apps.read_namespaced_stateful_set.call_count == 1

    def test_missing_owner_falls_back(self, fake_cluster, ctx):
        fake_cluster.add_resource(
            instrumented_app(
                "deployment-gone",
                owner=("Deployment", "gone"),
                languages=[{"language": "node", "containerName": "web"}],
            )
        )
        result = get_state(ctx)
        assert result.success is True
        assert result.data[0].service_name == "gone-web"

    def test_owner_read_error_fails(self, fake_cluster, ctx):
        fake_cluster.fail_reads[("deployment", "default", "api")] = ApiException(status=403, reason="Forbidden")
        fake_cluster.add_resource(
            instrumented_app("api", languages=[{"language": "go", "containerName": "api"}])
        )
        result = get_state(ctx)
        assert result.success is False
        assert result.error.code == CLUSTER_ERROR

    def test_list_failure(self, fake_cluster, ctx):
        fake_cluster.custom.list_cluster_custom_object.side_effect = ApiException(status=500, reason="boom")
        result = get_state(ctx)
        assert result.success is False
        assert result.error.code == CLUSTER_ERROR
        assert "Error listing resources" in result.error.message

    def test_empty_cluster(self, ctx):
        result = get_state(ctx)
        assert result.success is True
        assert result.data == []
