"""SQL Server Resolution Protocol client.

Discovers SQL Server instances on the local network segment:
1. Broadcast the browse probe (UDP 1434)
2. Collect responses for the collection window
3. Decode every response into SqlInstance records
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .discovery.collector import ResponseCollector, Transport
from .protocol.decoder import data_source_rows, decode_payload
from .protocol.schema import ScanStats, SqlInstance
from .transport.udp_transport import BROADCAST_ADDRESS, SQL_BROWSER_PORT, UDPTransport

logger = logging.getLogger(__name__)


DEFAULT_WAIT_TIMEOUT_MS = 5000
DEFAULT_RECEIVE_TIMEOUT_MS = 1000


@dataclass
class ClientConfig:
    """Configuration for discovery scans. Timeouts are in milliseconds."""
    wait_timeout: int = DEFAULT_WAIT_TIMEOUT_MS
    receive_timeout: int = DEFAULT_RECEIVE_TIMEOUT_MS
    broadcast_address: str = BROADCAST_ADDRESS
    port: int = SQL_BROWSER_PORT

    def __post_init__(self):
        if self.wait_timeout < 0:
            raise ValueError(f"wait_timeout must not be negative, got {self.wait_timeout}")
        if self.receive_timeout <= 0:
            raise ValueError(f"receive_timeout must be positive, got {self.receive_timeout}")
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port {self.port}")

    @property
    def wait_seconds(self) -> float:
        return self.wait_timeout / 1000

    @property
    def receive_seconds(self) -> float:
        return self.receive_timeout / 1000


TransportFactory = Callable[[ClientConfig], Transport]


def udp_transport_factory(config: ClientConfig) -> UDPTransport:
    return UDPTransport(config.broadcast_address, config.port)


class Scan:
    """One discovery scan: a lazy, single-use sequence of SqlInstance.

    The scan owns its transport. The transport is released when the window
    closes, when a transport error ends the scan, or when ``close()`` is
    called (also on context-manager exit).
    """

    def __init__(
        self,
        transport: Transport,
        config: ClientConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.stats = ScanStats()
        self._transport = transport
        self._clock = clock
        self._records = self._run()

    def _run(self) -> Iterator[SqlInstance]:
        collector = ResponseCollector(
            self._transport,
            wait_timeout=self.config.wait_seconds,
            receive_timeout=self.config.receive_seconds,
            stats=self.stats,
            clock=self._clock,
        )
        started = self._clock()
        logger.info(
            "Scanning for SQL Server instances on %s:%d (%d ms)",
            self.config.broadcast_address,
            self.config.port,
            self.config.wait_timeout,
        )

        try:
            for payload in collector.collect():
                for instance in decode_payload(payload, self.stats):
                    self.stats.records += 1
                    yield instance
        finally:
            self._transport.close()
            self.stats.duration_ms = int((self._clock() - started) * 1000)
            logger.info(
                "Scan finished: %d instances from %d responses",
                self.stats.records,
                self.stats.payloads,
            )

    def __iter__(self) -> "Scan":
        return self

    def __next__(self) -> SqlInstance:
        return next(self._records)

    def close(self) -> None:
        """Stop the scan and release its transport."""
        self._records.close()
        # A scan that was never started has not entered its cleanup block.
        self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class SSRPClient:
    """A SQL Server Resolution Protocol client.

    Every scan opens its own transport, so scans are independent of each
    other and may run side by side.
    """

    def __init__(
        self,
        wait_timeout: int = DEFAULT_WAIT_TIMEOUT_MS,
        receive_timeout: int = DEFAULT_RECEIVE_TIMEOUT_MS,
        *,
        broadcast_address: str = BROADCAST_ADDRESS,
        port: int = SQL_BROWSER_PORT,
        transport_factory: Optional[TransportFactory] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize SSRP client.

        Args:
            wait_timeout: Total time in milliseconds to listen for responses. Default: 5000.
            receive_timeout: Longest single wait for a response in milliseconds. Default: 1000.
            broadcast_address: Destination of the probe.
            port: SQL Server Browser port.
            transport_factory: Builds the transport for each scan.
            clock: Monotonic time source for the collection window.
        """
        self.config = ClientConfig(
            wait_timeout=wait_timeout,
            receive_timeout=receive_timeout,
            broadcast_address=broadcast_address,
            port=port,
        )
        self._transport_factory = transport_factory or udp_transport_factory
        self._clock = clock
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _new_transport(self) -> Transport:
        if self._closed:
            raise RuntimeError("SSRPClient is closed")
        return self._transport_factory(self.config)

    def scan(self) -> Scan:
        """Start a new scan.

        Nothing is sent until the first record is requested.

        Returns:
            A Scan yielding SqlInstance records in arrival order.

        Raises:
            RuntimeError: If the client has been closed.
        """
        return Scan(self._new_transport(), self.config, clock=self._clock)

    def get_servers(self) -> list[SqlInstance]:
        """Run one scan to completion and return every record."""
        with self.scan() as scan:
            return list(scan)

    def get_data_sources(self) -> list[dict[str, Optional[str]]]:
        """Run one scan and return its entries as data-source table rows.

        Rows are built straight from the payload, so entries with fewer than
        four values are kept with the missing columns set to None.
        """
        transport = self._new_transport()
        collector = ResponseCollector(
            transport,
            wait_timeout=self.config.wait_seconds,
            receive_timeout=self.config.receive_seconds,
            clock=self._clock,
        )
        rows: list[dict[str, Optional[str]]] = []
        try:
            for payload in collector.collect():
                rows.extend(data_source_rows(payload))
        finally:
            transport.close()
        return rows

    def close(self) -> None:
        """Close the client. Scans already started are not affected."""
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
