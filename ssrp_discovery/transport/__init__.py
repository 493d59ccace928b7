"""Transport module - UDP communication."""

from .udp_transport import (
    BROADCAST_ADDRESS,
    MAXIMUM_DATAGRAM_SIZE,
    SQL_BROWSER_PORT,
    UDPTransport,
)

__all__ = [
    "BROADCAST_ADDRESS",
    "MAXIMUM_DATAGRAM_SIZE",
    "SQL_BROWSER_PORT",
    "UDPTransport",
]
