"""
Unit tests for metrics module.

Tests cover:
- Counter increment (single-threaded and multi-threaded)
- Drop reason tracking
- Histogram recording and statistics
- Snapshot and reset functionality
- Global singleton
"""

import logging
import threading
import time

import pytest

from lat_core.metrics import MetricsCollector, get_metrics, reset_metrics


class TestMetricsCollectorBasic:
    """Tests for basic metrics collector functionality."""

    def test_initialization(self):
        """Standard counters start at 0; unknown counters read as 0."""
        collector = MetricsCollector()

        assert collector.get_counter('ranging_epochs') == 0
        assert collector.get_counter('pipeline_fixes') == 0
        assert collector.get_counter('unknown_counter') == 0

    def test_increment_counter(self):
        collector = MetricsCollector()

        collector.increment('ranging_epochs')
        assert collector.get_counter('ranging_epochs') == 1

        collector.increment('ranging_epochs', 5)
        assert collector.get_counter('ranging_epochs') == 6

    def test_increment_drop_with_valid_reason(self):
        collector = MetricsCollector()

        collector.increment_drop('candidate_outlier')
        assert collector.get_counter('items_dropped') == 1
        assert collector.get_drop_count('candidate_outlier') == 1

        snapshot = collector.snapshot()
        assert snapshot.drop_reasons['candidate_outlier'] == 1

    def test_increment_drop_unknown_reason(self, caplog):
        """Unknown reasons log a warning and are still counted."""
        collector = MetricsCollector()

        with caplog.at_level(logging.WARNING, logger='lat_core.metrics.counters'):
            collector.increment_drop('unknown_reason')

        assert 'unknown_reason' in caplog.text
        assert collector.get_counter('items_dropped') == 1

    def test_multiple_drop_reasons(self):
        collector = MetricsCollector()

        collector.increment_drop('range_failed', 3)
        collector.increment_drop('candidate_outlier', 5)
        collector.increment_drop('filter_flush', 2)

        snapshot = collector.snapshot()

        assert snapshot.drop_reasons['range_failed'] == 3
        assert snapshot.drop_reasons['candidate_outlier'] == 5
        assert snapshot.drop_reasons['filter_flush'] == 2
        assert snapshot.total_dropped() == 10


class TestHistograms:
    """Tests for histogram functionality."""

    def test_record_histogram(self):
        collector = MetricsCollector()

        collector.record_histogram('pipeline_residual_m', 1.23)
        collector.record_histogram('pipeline_residual_m', 2.45)
        collector.record_histogram('pipeline_residual_m', 1.80)

        stats = collector.get_histogram_stats('pipeline_residual_m')

        assert stats is not None
        assert stats['count'] == 3
        assert abs(stats['mean'] - 1.826) < 0.01
        assert stats['min'] == 1.23
        assert stats['max'] == 2.45

    def test_histogram_empty(self):
        collector = MetricsCollector()
        assert collector.get_histogram_stats('nonexistent') is None

    def test_histogram_percentiles(self):
        collector = MetricsCollector()

        for i in range(100):
            collector.record_histogram('test', float(i))

        stats = collector.get_histogram_stats('test')

        assert stats['count'] == 100
        assert 49 < stats['median'] < 51
        assert 94 < stats['p95'] < 96
        assert 98 < stats['p99'] < 100

    def test_histogram_max_samples_bounded(self):
        """Histograms never grow past max_samples."""
        collector = MetricsCollector()

        for i in range(15000):
            collector.record_histogram('test', float(i), max_samples=1000)

        samples = collector.snapshot().histograms['test']
        assert len(samples) <= 1000
        # Most recent samples are kept
        assert samples[-1] == 14999.0


class TestSnapshotAndReset:
    """Tests for snapshot and reset."""

    def test_snapshot_creates_copy(self):
        collector = MetricsCollector()

        collector.increment('ranging_epochs', 10)
        snapshot1 = collector.snapshot()

        collector.increment('ranging_epochs', 5)
        snapshot2 = collector.snapshot()

        assert snapshot1.counters['ranging_epochs'] == 10
        assert snapshot2.counters['ranging_epochs'] == 15

    def test_snapshot_timestamp(self):
        collector = MetricsCollector()

        before = time.time()
        snapshot = collector.snapshot()
        after = time.time()

        assert before <= snapshot.timestamp <= after

    def test_snapshot_drop_rate(self):
        collector = MetricsCollector()

        collector.increment_drop('range_failed', 5)
        collector.increment_drop('filter_flush', 3)

        rate = collector.snapshot().drop_rate(100)
        assert abs(rate - 8.0) < 0.01

    def test_drop_rate_zero_items(self):
        collector = MetricsCollector()
        assert collector.snapshot().drop_rate(0) == 0.0

    def test_reset_clears_and_reinitializes(self):
        collector = MetricsCollector()

        collector.increment('ranging_epochs', 100)
        collector.increment_drop('candidate_outlier', 5)
        collector.record_histogram('pipeline_residual_m', 1.23)

        collector.reset()

        snapshot = collector.snapshot()
        assert snapshot.counters['ranging_epochs'] == 0
        assert snapshot.total_dropped() == 0
        assert not snapshot.histograms
        for reason in collector.DROP_REASONS:
            assert snapshot.drop_reasons[reason] == 0


class TestThreadSafety:
    """Tests for thread-safe operations."""

    def test_concurrent_increment(self):
        collector = MetricsCollector()
        num_threads = 10
        increments_per_thread = 1000

        def worker():
            for _ in range(increments_per_thread):
                collector.increment('ranging_epochs')

        threads = [threading.Thread(target=worker) for _ in range(num_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert collector.get_counter('ranging_epochs') == num_threads * increments_per_thread

    def test_concurrent_drop_reasons(self):
        collector = MetricsCollector()
        num_threads = 5
        increments_per_thread = 200
        reasons = ['range_failed', 'filter_flush', 'candidate_outlier']

        def worker(reason: str):
            for _ in range(increments_per_thread):
                collector.increment_drop(reason)

        threads = [
            threading.Thread(target=worker, args=(reason,))
            for reason in reasons
            for _ in range(num_threads)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = collector.snapshot()
        for reason in reasons:
            assert snapshot.drop_reasons[reason] == num_threads * increments_per_thread


class TestGlobalSingleton:
    """Tests for global metrics singleton."""

    def test_get_metrics_returns_same_instance(self):
        assert get_metrics() is get_metrics()

    def test_reset_metrics_creates_new_instance(self):
        metrics1 = get_metrics()
        metrics1.increment('test_counter', 100)

        reset_metrics()

        metrics2 = get_metrics()
        assert metrics2 is not metrics1
        assert metrics2.get_counter('test_counter') == 0


class TestSummary:
    """Tests for the text summary."""

    @pytest.mark.parametrize("reason", sorted(MetricsCollector.DROP_REASONS))
    def test_drop_reason_listed(self, reason):
        collector = MetricsCollector()
        collector.increment_drop(reason, 2)

        assert reason in collector.format_summary()

    def test_print_summary(self, capsys):
        collector = MetricsCollector()

        collector.increment('pipeline_attempts', 100)
        collector.increment_drop('insufficient_anchors', 5)
        collector.record_histogram('pipeline_residual_m', 1.23)

        collector.print_summary()

        captured = capsys.readouterr()
        assert 'METRICS SUMMARY' in captured.out
        assert 'pipeline_attempts' in captured.out
        assert 'pipeline_residual_m' in captured.out
