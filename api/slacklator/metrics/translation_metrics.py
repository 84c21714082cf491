"""Prometheus metrics for the translation cost-optimization pipeline."""

from prometheus_client import Counter, Histogram

translation_resolutions_total = Counter(
    "slacklator_translation_resolutions_total",
    "Translation requests by the tier that satisfied them",
    ["tier"],
)

provider_calls_total = Counter(
    "slacklator_provider_calls_total",
    "Calls made to the external translation provider",
    ["operation"],
)

provider_errors_total = Counter(
    "slacklator_provider_errors_total",
    "Translation provider failures",
    ["operation"],
)

language_detection_total = Counter(
    "slacklator_language_detection_total",
    "Language detection outcomes by backend/result",
    ["backend", "result"],
)

popular_phrase_promotions_total = Counter(
    "slacklator_popular_phrase_promotions_total",
    "Cache entries promoted to the extended lifetime",
)

store_degradations_total = Counter(
    "slacklator_store_degradations_total",
    "Persistent store failures that fell back to memory-only mode",
    ["operation"],
)

translation_duration_seconds = Histogram(
    "slacklator_translation_duration_seconds",
    "Duration of translate() calls",
    ["tier"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
