"""Reporting module - scan result output."""

from .json_reporter import ScanReporter
from .table import instance_rows, render_table

__all__ = [
    "ScanReporter",
    "instance_rows",
    "render_table",
]
