"""Discovery module - SSRP broadcast and response collection."""

from .collector import ResponseCollector, Transport
from .timeout_handler import ScanDeadline

__all__ = [
    "ResponseCollector",
    "ScanDeadline",
    "Transport",
]
