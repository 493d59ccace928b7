"""Data models for SQL Server Resolution Protocol discovery.

Defines dataclasses for discovered instances, raw datagrams and
per-scan statistics.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence


# Column names of the data-source table, in wire order
DATA_SOURCE_COLUMNS = ("ServerName", "InstanceName", "IsClustered", "Version")

# Number of value tokens an entry must carry to decode
FIELD_COUNT = len(DATA_SOURCE_COLUMNS)

CLUSTERED_FLAG = "yes"


@dataclass(frozen=True)
class SqlInstance:
    """A SQL Server instance announced by a server-browser agent."""
    server_name: str
    instance_name: str
    is_clustered: bool
    version: str

    @classmethod
    def from_values(cls, values: Sequence[str]) -> "SqlInstance":
        """Build an instance from the first four value tokens of an entry.

        Args:
            values: Value tokens in wire order.

        Raises:
            ValueError: If fewer than four values are given.
        """
        if len(values) < FIELD_COUNT:
            raise ValueError(
                f"Expected at least {FIELD_COUNT} values, got {len(values)}"
            )
        return cls(
            server_name=values[0],
            instance_name=values[1],
            is_clustered=values[2].lower() == CLUSTERED_FLAG,
            version=values[3],
        )

    def to_row(self) -> dict[str, str]:
        """Convert to a data-source table row."""
        return {
            "ServerName": self.server_name,
            "InstanceName": self.instance_name,
            "IsClustered": "Yes" if self.is_clustered else "No",
            "Version": self.version,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "server_name": self.server_name,
            "instance_name": self.instance_name,
            "is_clustered": self.is_clustered,
            "version": self.version,
        }

    def __str__(self) -> str:
        clustered = " (clustered)" if self.is_clustered else ""
        return f"{self.server_name}\\{self.instance_name} {self.version}{clustered}"


@dataclass
class Datagram:
    """One datagram as received from the network."""
    data: bytes
    address: Optional[tuple] = None

    @property
    def length(self) -> int:
        return len(self.data)


@dataclass
class ScanStats:
    """Counters collected over a single scan."""
    datagrams_received: int = 0
    datagrams_discarded: int = 0
    payloads: int = 0
    records: int = 0
    entries_dropped: int = 0
    duration_ms: int = 0

    @property
    def has_anomalies(self) -> bool:
        """Whether any datagram or entry had to be skipped."""
        return self.datagrams_discarded > 0 or self.entries_dropped > 0

    def to_dict(self) -> dict[str, int]:
        return {
            "datagrams_received": self.datagrams_received,
            "datagrams_discarded": self.datagrams_discarded,
            "payloads": self.payloads,
            "records": self.records,
            "entries_dropped": self.entries_dropped,
            "duration_ms": self.duration_ms,
        }
