"""Component health probes, the concurrent probe runner and verdict aggregation."""

from .aggregator import HEADLINES, health_recommendations, overall_health
from .cluster import ClusterClient, KubernetesClusterClient, NodeInfo, PodInfo
from .probes import (
    CLUSTER_PROBES,
    STATIC_PROBES,
    HealthProbe,
    ProbeContext,
    ProbeOutcome,
    compute_quality_metrics,
    default_probes,
)
from .runner import HealthCollector, ProbeRunner

__all__ = [
    "CLUSTER_PROBES",
    "ClusterClient",
    "HEADLINES",
    "HealthCollector",
    "HealthProbe",
    "KubernetesClusterClient",
    "NodeInfo",
    "PodInfo",
    "ProbeContext",
    "ProbeOutcome",
    "ProbeRunner",
    "STATIC_PROBES",
    "compute_quality_metrics",
    "default_probes",
    "health_recommendations",
    "overall_health",
]
