"""
SQL Server Resolution Protocol (SSRP) discovery.

Broadcasts the one-byte browse probe to UDP port 1434 and decodes the
replies of every SQL Server Browser that answers within the collection
window.

.. code

  with SSRPClient(wait_timeout=5000) as client:
      for instance in client.scan():
          print(instance.server_name, instance.instance_name, instance.version)

"""

from .client import ClientConfig, Scan, SSRPClient
from .errors import (
    SSRPError,
    TransportError,
    TransportReceiveError,
    TransportSendError,
)
from .protocol.schema import ScanStats, SqlInstance

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "Scan",
    "SSRPClient",
    "SSRPError",
    "TransportError",
    "TransportReceiveError",
    "TransportSendError",
    "ScanStats",
    "SqlInstance",
]
