"""Prometheus metrics for monitoring risk tiers, fired signals and entity recognition"""

from typing import List
from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "dealshield_analysis_total",
    "Total messages analyzed",
    ["tier"],  # LOW | MEDIUM | HIGH
)

signal_counter = Counter(
    "dealshield_signal_total",
    "Signal detector firings",
    ["signal"],  # detector code
)

risk_score_histogram = Histogram(
    "dealshield_risk_score",
    "Distribution of clamped risk scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

# Entity recognition metrics
ner_latency_histogram = Histogram(
    "ner_latency_seconds",
    "Entity recognition response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0],
)

ner_failure_counter = Counter(
    "ner_failures_total",
    "Failed entity recognition calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(tier: str, score: int, signals: List[str]) -> None:
    """Record analysis metrics for monitoring tier distribution and signal frequency"""
    analysis_counter.labels(tier=tier).inc()
    risk_score_histogram.observe(score)
    for signal in signals:
        signal_counter.labels(signal=signal).inc()
