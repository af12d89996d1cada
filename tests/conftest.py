from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException

from propagation_latency.collection import ClusterReader

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def rfc3339(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def managed(manager: str, operation: str = "Update", subresource: str | None = None, time: datetime | None = None):
    return client.V1ManagedFieldsEntry(
        manager=manager,
        operation=operation,
        subresource=subresource,
        time=time,
    )


def meta(name: str, namespace: str = "perf-test-0", created: datetime = T0, managed_fields=None):
    return client.V1ObjectMeta(
        name=name,
        namespace=namespace,
        creation_timestamp=created,
        managed_fields=managed_fields,
    )


def deployment(name: str, desired: int | None, ready: int | None, **kwargs) -> client.V1Deployment:
    return client.V1Deployment(
        metadata=meta(name, **kwargs),
        spec=client.V1DeploymentSpec(
            replicas=desired,
            selector=client.V1LabelSelector(match_labels={"app": name}),
            template=client.V1PodTemplateSpec(),
        ),
        status=client.V1DeploymentStatus(ready_replicas=ready),
    )


def custom_object(name: str, namespace: str = "cluster1", created: datetime = T0, **extra) -> dict:
    obj = {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "creationTimestamp": rfc3339(created),
        }
    }
    obj.update(extra)
    return obj


class FakeListApi:
    """Stands in for CoreV1Api/AppsV1Api: every list_namespaced_* call returns the configured items."""

    def __init__(self, items_by_method: dict[str, list] | None = None, error: ApiException | None = None):
        self.items_by_method = items_by_method or {}
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def __getattr__(self, method: str):
        if not method.startswith("list_namespaced_"):
            raise AttributeError(method)

        def _list(namespace: str):
            self.calls.append((method, namespace))
            if self.error is not None:
                raise self.error
            return SimpleNamespace(items=self.items_by_method.get(method, []))

        return _list


class FakeCustomApi:
    """Stands in for CustomObjectsApi."""

    def __init__(self, items: list[dict] | None = None, objects: dict[str, dict] | None = None, error=None):
        self.items = items or []
        self.objects = objects or {}
        self.error = error
        self.calls: list[dict] = []

    def list_namespaced_custom_object(self, group, version, namespace, plural, **kwargs):
        self.calls.append({"group": group, "version": version, "namespace": namespace, "plural": plural, **kwargs})
        if self.error is not None:
            raise self.error
        return {"items": self.items}

    def list_cluster_custom_object(self, group, version, plural, **kwargs):
        self.calls.append({"group": group, "version": version, "namespace": None, "plural": plural, **kwargs})
        if self.error is not None:
            raise self.error
        return {"items": self.items}

    def get_cluster_custom_object(self, group, version, plural, name):
        self.calls.append({"group": group, "version": version, "plural": plural, "name": name})
        if self.error is not None:
            raise self.error
        if name not in self.objects:
            raise ApiException(status=404, reason="Not Found")
        return self.objects[name]


@pytest.fixture
def make_reader():
    def _make(context: str = "wds1", core=None, apps=None, custom=None) -> ClusterReader:
        reader = ClusterReader(context, api_client=client.ApiClient())
        reader._apis["core"] = core or FakeListApi()
        reader._apis["apps"] = apps or FakeListApi()
        reader._custom = custom or FakeCustomApi()
        return reader

    return _make
