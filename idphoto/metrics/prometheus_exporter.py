"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


images_processed_total = Counter(
    "images_processed_total",
    "Total number of normalisation requests by document type and outcome.",
    ["document_type", "outcome"],
)

image_encode_quality = Histogram(
    "image_encode_quality",
    "JPEG quality level of the returned encode attempt.",
    buckets=(0.05, 0.15, 0.25, 0.35, 0.45, 0.55, 0.65, 0.75, 0.85, 0.95),
)
