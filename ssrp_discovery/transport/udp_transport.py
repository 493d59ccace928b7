"""UDP transport for SQL Server Resolution Protocol discovery.

Sends the browse probe to the broadcast address on the SQL Server Browser
port (UDP 1434) and receives the replies of every server-browser agent
that answers.
"""

import logging
import socket
from typing import Optional

from ..errors import TransportReceiveError, TransportSendError
from ..protocol.schema import Datagram

logger = logging.getLogger(__name__)


# SQL Server Browser UDP port (fixed)
SQL_BROWSER_PORT = 1434

# Limited broadcast address
BROADCAST_ADDRESS = "255.255.255.255"

MAXIMUM_DATAGRAM_SIZE = 65535


class UDPTransport:
    """Unconnected UDP socket able to broadcast and receive datagrams.

    The socket is created on first use and released by ``close()``.
    One transport serves a single scan at a time.
    """

    def __init__(
        self,
        broadcast_address: str = BROADCAST_ADDRESS,
        port: int = SQL_BROWSER_PORT,
    ):
        """Initialize UDP transport.

        Args:
            broadcast_address: Destination of the probe. Default: 255.255.255.255.
            port: Destination UDP port. Default: 1434.
        """
        self.broadcast_address = broadcast_address
        self.port = port
        self._sock: Optional[socket.socket] = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def _create_socket(self) -> socket.socket:
        """Create and configure the UDP socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        return sock

    def open(self) -> "UDPTransport":
        """Create the socket if it does not exist yet.

        Raises:
            TransportSendError: If the socket cannot be created.
        """
        if self._sock is None:
            try:
                self._sock = self._create_socket()
            except OSError as e:
                raise TransportSendError(f"Could not open UDP socket: {e}") from e
        return self

    def send_broadcast(self, payload: bytes) -> None:
        """Send one datagram to the broadcast address.

        Raises:
            TransportSendError: If the datagram could not be sent.
        """
        self.open()
        destination = (self.broadcast_address, self.port)
        try:
            self._sock.sendto(payload, destination)
        except OSError as e:
            raise TransportSendError(
                f"Could not send probe to {destination[0]}:{destination[1]}: {e}"
            ) from e
        logger.debug("Sent %d byte probe to %s:%d", len(payload), *destination)

    def receive(self, timeout: float) -> Optional[Datagram]:
        """Wait up to ``timeout`` seconds for one datagram.

        Returns:
            The received Datagram, or None if nothing arrived in time.

        Raises:
            TransportReceiveError: On any socket fault other than a timeout.
        """
        if self._sock is None:
            raise TransportReceiveError("Transport is not open.")
        if timeout <= 0:
            return None

        try:
            self._sock.settimeout(timeout)
            data, addr = self._sock.recvfrom(MAXIMUM_DATAGRAM_SIZE)
        except socket.timeout:
            return None
        except OSError as e:
            raise TransportReceiveError(f"Receive failed: {e}") from e

        logger.debug("Received %d bytes from %s", len(data), addr)
        return Datagram(data=data, address=addr)

    def close(self) -> None:
        """Close the UDP socket."""
        if self._sock:
            try:
                self._sock.close()
            except OSError as e:
                logger.debug("Error closing UDP socket: %s", e)
            self._sock = None

    def __enter__(self):
        return self.open()

    def __exit__(self, *args):
        self.close()
