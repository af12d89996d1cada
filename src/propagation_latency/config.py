"""Configuration for a latency collection run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BINDING_LABEL_KEY = "transport.kubestellar.io/originOwnerReferenceBindingKey"


class Settings(BaseSettings):
    """Run settings loaded from environment and .env, overridden by CLI arguments."""

    model_config = SettingsConfigDict(
        env_prefix="PROPAGATION_LATENCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    wds_context: str = Field(default="wds1", description="Context of the workload-definition plane")
    its_context: str = Field(default="its1", description="Context of the inventory/transport plane")
    wec_context: str = Field(default="cluster1", description="Context of the workload-execution cluster")

    # Experiment
    num_namespaces: int = Field(default=1, ge=1, description="Number of perf-test namespaces to collect")
    output_dir: Path = Field(default=Path("results"), description="Directory for record files and reports")
    exp_type: Literal["s", "l"] = Field(
        default="s",
        description="Experiment type: s (short, single sample) or l (long-running, not implemented)",
    )
    namespace_prefix: str = Field(default="perf-test-", description="Prefix of synthetic namespaces")
    binding_policy: str = Field(
        default="nginx-bpolicy",
        description="Name of the binding policy whose creation is the timeline origin",
    )
    binding_label_key: str = Field(
        default=BINDING_LABEL_KEY,
        description="Label key linking transport objects to their origin binding",
    )
    its_work_namespace: str | None = Field(
        default=None,
        description="ITS namespace holding manifest-works and work-statuses (default: WEC context name)",
    )
    applied_work_plane: Literal["wec", "its"] = Field(
        default="wec",
        description="Plane that applied-manifest-works are collected from",
    )
    filter_applied_works: bool = Field(
        default=False,
        description="Apply the binding label selector to applied-manifest-works too",
    )
    standard_kinds: list[str] = Field(
        default_factory=lambda: ["deployments", "secrets", "configmaps", "services"],
        description="Standard resource kinds snapshotted from WDS and WEC",
    )

    def namespaces(self) -> list[str]:
        return [f"{self.namespace_prefix}{i}" for i in range(self.num_namespaces)]

    def label_selector(self, namespace: str) -> str:
        return f"{self.binding_label_key}={namespace}"

    @property
    def work_namespace(self) -> str:
        return self.its_work_namespace or self.wec_context


def get_settings(**overrides: Any) -> Settings:
    """Return validated settings instance; explicit overrides win over the environment."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
