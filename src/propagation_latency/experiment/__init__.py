"""Experiment: drive collection across planes and produce the latency report."""

from propagation_latency.experiment.driver import (
    ExperimentResult,
    Planes,
    collect_namespace,
    print_result,
    run_experiment,
)

__all__ = [
    "ExperimentResult",
    "Planes",
    "collect_namespace",
    "print_result",
    "run_experiment",
]
