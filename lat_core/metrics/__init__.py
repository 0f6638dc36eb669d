"""
Metrics Module: Diagnostics, counters, histograms.

- Counters: ranging_epochs, pipeline_fixes, candidates_in, etc.
- Histograms: residuals, candidate counts
- Drop reason codes (no silent drops)

Usage:
    from lat_core.metrics import get_metrics
    
    metrics = get_metrics()
    metrics.increment('ranging_epochs')
    metrics.increment_drop('candidate_outlier')
    metrics.record_histogram('pipeline_residual_m', 0.42)
"""

from .counters import MetricsCollector, CounterSnapshot

# Process-wide collector
_global_metrics = None


def get_metrics() -> MetricsCollector:
    """
    Get the global metrics collector singleton.
    
    Returns:
        MetricsCollector instance
    """
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = MetricsCollector()
    return _global_metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _global_metrics
    _global_metrics = MetricsCollector()


__all__ = ['MetricsCollector', 'CounterSnapshot', 'get_metrics', 'reset_metrics']
