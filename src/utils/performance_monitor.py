# ========================
# src/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Times dataset loads and tracks process memory while they run.
"""

import time
import os
import logging
from contextlib import contextmanager
from typing import Dict, Any

import psutil

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """
    Tracks elapsed time, rows handled and peak memory for one operation.
    """

    def __init__(self, name: str = "Pipeline"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.records_processed = 0

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.time()
        self.peak_memory_mb = self._get_memory_usage_mb()
        logger.debug(f"{self.name} - monitoring started, memory {self.peak_memory_mb:.2f} MB")

    def update_progress(self, records: int) -> None:
        """
        Record rows handled so far.

        Args:
            records (int): Number of rows processed since the last update
        """
        self.records_processed += records
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.time()
        total_time = self.end_time - self.start_time if self.start_time else 0
        throughput = self.records_processed / total_time if total_time > 0 else 0

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'records_processed': self.records_processed,
            'average_throughput_records_per_second': throughput,
            'peak_memory_usage_mb': self.peak_memory_mb,
        }

        logger.info(
            f"{summary['name']} - {summary['records_processed']:,} records in "
            f"{total_time:.2f}s ({throughput:.0f} records/sec), "
            f"peak memory {self.peak_memory_mb:.2f} MB"
        )
        return summary

    def _get_memory_usage_mb(self) -> float:
        """Get current memory usage in MB."""
        try:
            memory_bytes = psutil.Process(os.getpid()).memory_info().rss
        except psutil.Error as e:
            logger.debug(f"Could not get memory usage: {e}")
            return 0.0
        return memory_bytes / (1024 * 1024)


@contextmanager
def monitor_performance(name: str = "Pipeline"):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
