from __future__ import annotations

from datetime import timedelta

import pytest

from propagation_latency.collection import Condition, ObjectSnapshot, WorkSnapshot
from propagation_latency.config import get_settings
from propagation_latency.errors import CollectionError, ReconstructionError
from propagation_latency.experiment import Planes, run_experiment

from conftest import T0, at

LABEL = "transport.kubestellar.io/originOwnerReferenceBindingKey"


class FakeReader:
    """Plane reader returning canned snapshots and recording every call in a shared log."""

    def __init__(self, context, log, standard=None, custom=None, fail_on=None):
        self.context = context
        self.log = log
        self.standard = standard or {}
        self.custom = custom or {}
        self.fail_on = fail_on

    def list_standard(self, kind, namespace):
        self.log.append((self.context, "standard", kind, namespace))
        if self.fail_on == kind:
            raise CollectionError(self.context, kind, namespace, "Forbidden")
        return self.standard.get(kind, [])

    def list_custom(self, gvr, namespace=None, label_selector=None):
        self.log.append((self.context, "custom", gvr.resource, namespace, label_selector))
        return self.custom.get(gvr.resource, [])

    def get_binding_policy_created(self, name):
        self.log.append((self.context, "binding", name))
        return T0


def _deploy(created, status, ns="perf-test-0"):
    return ObjectSnapshot(
        name="nginx", namespace=ns, created_at=created, status_updated_at=status, condition=Condition.AVAILABLE
    )


def _work(name, created):
    return WorkSnapshot(name=name, namespace="perf-test-0", created_at=created)


def _planes(log, *, work_statuses=True, wec_fail_on=None):
    custom_its = {"manifestworks": [_work("mw", at(2))]}
    if work_statuses:
        custom_its["workstatuses"] = [_work("v1-pod-nginx", at(6))]
    return Planes(
        wds=FakeReader("wds1", log, standard={"deployments": [_deploy(at(1), at(7))]}),
        its=FakeReader("its1", log, custom=custom_its),
        wec=FakeReader(
            "cluster1",
            log,
            standard={"deployments": [_deploy(at(4), at(5))]},
            custom={"appliedmanifestworks": [_work("amw", at(3))]},
            fail_on=wec_fail_on,
        ),
    )


def _settings(tmp_path, **overrides):
    values = dict(
        wds_context="wds1",
        its_context="its1",
        wec_context="cluster1",
        num_namespaces=1,
        output_dir=tmp_path,
    )
    values.update(overrides)
    return get_settings(**values)


def test_short_experiment_produces_report(tmp_path):
    log: list = []
    result = run_experiment(_settings(tmp_path), _planes(log))

    assert result.report is not None
    assert result.report.interval("Total Downsync").value == timedelta(seconds=3)
    assert result.report.interval("Total Upsync").value == timedelta(seconds=2)
    assert result.report.interval("End-to-End").value == timedelta(seconds=6)
    assert (tmp_path / "latency_results.txt").is_file()
    assert (tmp_path / "latency_results.json").is_file()
    assert (tmp_path / "perf-test-0" / "secrets-wec" / "secrets.tsv").is_file()
    assert (tmp_path / "perf-test-0" / "appliedmanifestworks" / "appliedmanifestworks.tsv").is_file()


def test_collection_order_within_namespace(tmp_path):
    log: list = []
    run_experiment(_settings(tmp_path), _planes(log))

    standard = [entry for entry in log if entry[1] == "standard"]
    assert [(e[0], e[2]) for e in standard[:4]] == [
        ("wds1", "deployments"),
        ("cluster1", "deployments"),
        ("wds1", "secrets"),
        ("cluster1", "secrets"),
    ]
    kinds = [entry[1] for entry in log]
    assert kinds.index("custom") > max(i for i, k in enumerate(kinds) if k == "standard")
    assert kinds[-1] == "binding"


def test_custom_resources_use_binding_selector(tmp_path):
    log: list = []
    run_experiment(_settings(tmp_path), _planes(log))

    custom = [entry for entry in log if entry[1] == "custom"]
    assert custom == [
        ("its1", "custom", "manifestworks", "cluster1", f"{LABEL}=perf-test-0"),
        ("its1", "custom", "workstatuses", "cluster1", f"{LABEL}=perf-test-0"),
        ("cluster1", "custom", "appliedmanifestworks", None, None),
    ]


def test_applied_works_variant_from_its_with_filter(tmp_path):
    log: list = []
    planes = _planes(log)
    planes.its.custom["appliedmanifestworks"] = [_work("amw", at(3))]
    settings = _settings(tmp_path, applied_work_plane="its", filter_applied_works=True, its_work_namespace="ws-ns")

    run_experiment(settings, planes)

    custom = [entry for entry in log if entry[1] == "custom"]
    assert custom[0][3] == "ws-ns"
    assert custom[2] == ("its1", "custom", "appliedmanifestworks", None, f"{LABEL}=perf-test-0")


def test_every_namespace_collected_but_first_reconstructed(tmp_path):
    log: list = []
    run_experiment(_settings(tmp_path, num_namespaces=3), _planes(log))

    namespaces = {entry[3] for entry in log if entry[1] == "standard"}
    assert namespaces == {"perf-test-0", "perf-test-1", "perf-test-2"}
    assert [entry for entry in log if entry[1] == "binding"] == [("wds1", "binding", "nginx-bpolicy")]
    assert (tmp_path / "perf-test-2" / "deployments-wds" / "deployments.tsv").is_file()


def test_missing_work_status_still_reports(tmp_path):
    result = run_experiment(_settings(tmp_path), _planes([], work_statuses=False))
    assert result.report is not None
    assert result.report.timestamps.work_status_update is None
    assert not result.report.interval("WEC status→WDS status").valid


def test_collection_error_aborts_run(tmp_path):
    log: list = []
    with pytest.raises(CollectionError):
        run_experiment(_settings(tmp_path), _planes(log, wec_fail_on="configmaps"))
    assert not (tmp_path / "latency_results.txt").exists()
    assert not any(entry[1] == "custom" for entry in log)


def test_missing_deployment_record_writes_no_report(tmp_path):
    log: list = []
    planes = _planes(log)
    planes.wds.standard = {}
    with pytest.raises(ReconstructionError):
        run_experiment(_settings(tmp_path), planes)
    assert not (tmp_path / "latency_results.txt").exists()


def test_long_experiment_is_placeholder(tmp_path):
    log: list = []
    result = run_experiment(_settings(tmp_path, exp_type="l"), _planes(log))
    assert result.report is None
    assert log == []
