"""Exceptions raised by the SSRP discovery client.

Only fatal conditions are exceptions. A receive timeout, a malformed
datagram or a short payload entry are expected on a busy network and are
absorbed by the collector and decoder instead.
"""


class SSRPError(Exception):
    """Base class for all discovery errors."""


class TransportError(SSRPError):
    """A socket-level fault on the discovery transport."""


class TransportSendError(TransportError):
    """The probe could not be sent. The scan produces no records."""


class TransportReceiveError(TransportError):
    """Receiving failed for a reason other than a timeout.

    Raised out of the scan's iterator and ends the scan.
    """
