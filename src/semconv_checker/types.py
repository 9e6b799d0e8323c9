"""
Core enums shared by the compliance engine, logger and CLI.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Section(str, Enum):
    """Which part of an export call a log event refers to."""
    RESOURCE = "resource"
    METRIC = "metric"


class MetricShape(str, Enum):
    """Values of the ``data`` oneof on an OTLP ``Metric``.

    ``UNSET`` covers a metric whose oneof was never populated.
    """
    GAUGE = "gauge"
    SUM = "sum"
    HISTOGRAM = "histogram"
    EXPONENTIAL_HISTOGRAM = "exponential_histogram"
    SUMMARY = "summary"
    UNSET = "unset"


class ExitCode(IntEnum):
    """Process exit status for one-shot and offline checks."""
    CLEAN = 0
    VIOLATION = 100
