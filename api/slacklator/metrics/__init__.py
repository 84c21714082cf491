"""Centralized metrics module for Prometheus instrumentation.

Usage:
    from slacklator.metrics.translation_metrics import provider_calls_total
"""

from slacklator.metrics import translation_metrics

__all__ = ["translation_metrics"]
