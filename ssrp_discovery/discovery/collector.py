"""Response collector for SSRP discovery.

Sends the browse probe once and keeps receiving until the collection
window closes, yielding the payload of every valid response.
"""

import logging
import time
from typing import Callable, Iterator, Optional, Protocol

from ..protocol.decoder import PROBE, parse_datagram
from ..protocol.schema import Datagram, ScanStats
from .timeout_handler import ScanDeadline

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """What the collector needs from a transport."""

    def send_broadcast(self, payload: bytes) -> None: ...

    def receive(self, timeout: float) -> Optional[Datagram]: ...

    def close(self) -> None: ...


class ResponseCollector:
    """Drives the send-once, receive-many loop of one scan."""

    def __init__(
        self,
        transport: Transport,
        wait_timeout: float,
        receive_timeout: float,
        stats: Optional[ScanStats] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize response collector.

        Args:
            transport: Transport to probe and listen on.
            wait_timeout: Collection window in seconds.
            receive_timeout: Longest single wait for a datagram, in seconds.
            stats: Scan counters to update. A fresh ScanStats if omitted.
            clock: Monotonic time source for the window.
        """
        self.transport = transport
        self.wait_timeout = wait_timeout
        self.receive_timeout = receive_timeout
        self.stats = stats if stats is not None else ScanStats()
        self._clock = clock

    def collect(self) -> Iterator[str]:
        """Probe the network and yield response payloads as they arrive.

        Nothing is received until the caller asks for the next payload, and
        the loop ends once the window has closed.

        Raises:
            TransportSendError: If the probe could not be sent.
            TransportReceiveError: If the transport fails while listening.
        """
        self.transport.send_broadcast(PROBE)

        deadline = ScanDeadline(self.wait_timeout, clock=self._clock)
        deadline.start()

        while not deadline.is_expired:
            wait = min(self.receive_timeout, deadline.remaining)
            datagram = self.transport.receive(wait)
            if datagram is None:
                continue

            self.stats.datagrams_received += 1
            payload = parse_datagram(datagram.data)
            if payload is None:
                self.stats.datagrams_discarded += 1
                logger.debug(
                    "Discarding %d byte datagram from %s: not a browse response",
                    datagram.length,
                    datagram.address,
                )
                continue

            self.stats.payloads += 1
            yield payload
