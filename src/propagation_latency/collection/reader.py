"""Read standard and custom resources from one plane into snapshot records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, NamedTuple

import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from propagation_latency.collection.models import (
    BINDING_POLICIES,
    Condition,
    GroupVersionResource,
    ObjectSnapshot,
    WorkSnapshot,
)
from propagation_latency.errors import ClusterConnectionError, CollectionError
from propagation_latency.timestamps import parse_timestamp, to_utc

logger = logging.getLogger(__name__)

# Controllers whose field ownership marks an object as system-managed
KNOWN_MANAGERS = ("kube-controller-manager", "controller-manager", "kubelet")

WORK_STATUS_PREFIX = "v1-pod-"


class ManagedField(NamedTuple):
    manager: str
    operation: str
    subresource: str
    time: datetime | None


def _new_api_client(kubeconfig: str | None, context: str) -> client.ApiClient:
    """Build an API client bound to one kubeconfig context without touching the global default."""
    try:
        return config.new_client_from_config(
            config_file=str(kubeconfig) if kubeconfig else None,
            context=context,
            persist_config=False,
        )
    except (config.ConfigException, OSError, yaml.YAMLError) as e:
        raise ClusterConnectionError(context, str(e)) from e


def _typed_managed_fields(meta: Any) -> list[ManagedField]:
    """Normalize V1ManagedFieldsEntry items."""
    out = []
    for mf in getattr(meta, "managed_fields", None) or []:
        out.append(
            ManagedField(
                manager=mf.manager or "",
                operation=mf.operation or "",
                subresource=mf.subresource or "",
                time=to_utc(mf.time) if mf.time else None,
            )
        )
    return out


def _unstructured_managed_fields(obj: dict[str, Any]) -> list[ManagedField]:
    """Normalize metadata.managedFields of an untyped object."""
    out = []
    for mf in (obj.get("metadata") or {}).get("managedFields") or []:
        raw_time = mf.get("time")
        out.append(
            ManagedField(
                manager=mf.get("manager") or "",
                operation=mf.get("operation") or "",
                subresource=mf.get("subresource") or "",
                time=parse_timestamp(raw_time) if raw_time else None,
            )
        )
    return out


def status_update_time(fields: Iterable[ManagedField]) -> datetime | None:
    """Time of the first Update on the status subresource, if any."""
    for mf in fields:
        if mf.operation == "Update" and mf.subresource == "status":
            return mf.time
    return None


def known_manager(fields: Iterable[ManagedField]) -> str:
    """First manager in the audit trail that is a known controller identity."""
    for mf in fields:
        if mf.manager in KNOWN_MANAGERS:
            return mf.manager
    return ""


# ---------------------------------------------------------------------------
# Standard kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StandardKind:
    """How to list and parse one standard kind."""

    api: str  # core | apps
    lister: str
    parse: Callable[[Any], ObjectSnapshot]


STANDARD_KINDS: dict[str, StandardKind] = {}


def register_standard_kind(kind: str, api: str, lister: str) -> Callable:
    def decorator(fn: Callable[[Any], ObjectSnapshot]) -> Callable[[Any], ObjectSnapshot]:
        STANDARD_KINDS[kind] = StandardKind(api=api, lister=lister, parse=fn)
        return fn

    return decorator


def _object_snapshot(obj: Any, condition: Condition, with_status: bool = True) -> ObjectSnapshot:
    fields = _typed_managed_fields(obj.metadata)
    return ObjectSnapshot(
        name=obj.metadata.name,
        namespace=obj.metadata.namespace or "default",
        created_at=to_utc(obj.metadata.creation_timestamp),
        status_updated_at=status_update_time(fields) if with_status else None,
        condition=condition,
        manager=known_manager(fields),
    )


@register_standard_kind("deployments", api="apps", lister="list_namespaced_deployment")
def parse_deployment(dep: Any) -> ObjectSnapshot:
    """Available iff ready replicas match the desired count."""
    desired = dep.spec.replicas if dep.spec and dep.spec.replicas is not None else 1
    ready = (dep.status.ready_replicas if dep.status else None) or 0
    condition = Condition.AVAILABLE if ready == desired else Condition.UNAVAILABLE
    return _object_snapshot(dep, condition)


@register_standard_kind("services", api="core", lister="list_namespaced_service")
def parse_service(svc: Any) -> ObjectSnapshot:
    return _object_snapshot(svc, Condition.ACTIVE)


@register_standard_kind("secrets", api="core", lister="list_namespaced_secret")
def parse_secret(secret: Any) -> ObjectSnapshot:
    # Secrets carry no status
    return _object_snapshot(secret, Condition.EXISTS, with_status=False)


@register_standard_kind("configmaps", api="core", lister="list_namespaced_config_map")
def parse_config_map(cm: Any) -> ObjectSnapshot:
    return _object_snapshot(cm, Condition.EXISTS, with_status=False)


# ---------------------------------------------------------------------------
# Custom resources
# ---------------------------------------------------------------------------

TARGET_EXTRACTORS: dict[str, Callable[[dict[str, Any]], str]] = {}


def register_target_extractor(resource: str) -> Callable:
    def decorator(fn: Callable[[dict[str, Any]], str]) -> Callable[[dict[str, Any]], str]:
        TARGET_EXTRACTORS[resource] = fn
        return fn

    return decorator


@register_target_extractor("manifestworks")
def manifest_work_target(obj: dict[str, Any]) -> str:
    """Name of the first embedded manifest that exposes one."""
    workload = (obj.get("spec") or {}).get("workload") or {}
    for manifest in workload.get("manifests") or []:
        if not isinstance(manifest, dict):
            continue
        name = (manifest.get("metadata") or {}).get("name")
        if name:
            return str(name)
    return ""


@register_target_extractor("workstatuses")
def work_status_target(obj: dict[str, Any]) -> str:
    name = (obj.get("metadata") or {}).get("name") or ""
    return name.removeprefix(WORK_STATUS_PREFIX)


@register_target_extractor("appliedmanifestworks")
def applied_manifest_work_target(obj: dict[str, Any]) -> str:
    for res in (obj.get("status") or {}).get("appliedResources") or []:
        if isinstance(res, dict) and res.get("name"):
            return str(res["name"])
    return ""


def parse_work(obj: dict[str, Any], gvr: GroupVersionResource) -> WorkSnapshot:
    """Build WorkSnapshot from an untyped custom object."""
    meta = obj.get("metadata") or {}
    created = meta.get("creationTimestamp")
    if not created:
        raise ValueError(f"{meta.get('name') or '<unnamed>'} has no creationTimestamp")
    extract = TARGET_EXTRACTORS.get(gvr.resource)
    return WorkSnapshot(
        name=meta.get("name") or "",
        namespace=meta.get("namespace") or "",
        created_at=parse_timestamp(created),
        updated_at=status_update_time(_unstructured_managed_fields(obj)),
        status_phase=str((obj.get("status") or {}).get("phase") or ""),
        target_object=extract(obj) if extract else "",
    )


class ClusterReader:
    """Lists resources from the cluster behind one kubeconfig context."""

    def __init__(
        self,
        context: str,
        kubeconfig: str | None = None,
        api_client: client.ApiClient | None = None,
    ) -> None:
        self.context = context
        api = api_client or _new_api_client(kubeconfig, context)
        self._apis: dict[str, Any] = {
            "core": client.CoreV1Api(api),
            "apps": client.AppsV1Api(api),
        }
        self._custom = client.CustomObjectsApi(api)

    def list_standard(self, kind: str, namespace: str) -> list[ObjectSnapshot]:
        """Snapshot every object of a standard kind in namespace."""
        spec = STANDARD_KINDS.get(kind)
        if spec is None:
            logger.debug("Skipping unrecognized kind %s on %s", kind, self.context)
            return []
        lister = getattr(self._apis[spec.api], spec.lister)
        try:
            items = lister(namespace=namespace).items
        except ApiException as e:
            raise CollectionError(self.context, kind, namespace, str(e.reason)) from e
        return [spec.parse(item) for item in items]

    def list_custom(
        self,
        gvr: GroupVersionResource,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> list[WorkSnapshot]:
        """Snapshot custom resources; an empty namespace lists cluster-wide."""
        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        try:
            if namespace:
                body = self._custom.list_namespaced_custom_object(
                    gvr.group, gvr.version, namespace, gvr.resource, **kwargs
                )
            else:
                body = self._custom.list_cluster_custom_object(
                    gvr.group, gvr.version, gvr.resource, **kwargs
                )
        except ApiException as e:
            raise CollectionError(self.context, str(gvr), namespace, str(e.reason)) from e
        try:
            return [parse_work(item, gvr) for item in body.get("items") or []]
        except ValueError as e:
            raise CollectionError(self.context, str(gvr), namespace, f"malformed object: {e}") from e

    def get_binding_policy_created(self, name: str) -> datetime:
        """Creation instant of the cluster-scoped binding policy called name."""
        gvr = BINDING_POLICIES
        try:
            obj = self._custom.get_cluster_custom_object(gvr.group, gvr.version, gvr.resource, name)
        except ApiException as e:
            raise CollectionError(
                self.context,
                f"{gvr}/{name}",
                None,
                f"{e.reason}; was the binding policy created after the deployment?",
            ) from e
        created = (obj.get("metadata") or {}).get("creationTimestamp")
        if not created:
            raise CollectionError(self.context, f"{gvr}/{name}", None, "no creationTimestamp")
        return parse_timestamp(created)
