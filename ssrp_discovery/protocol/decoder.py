"""Wire format of SQL Server Resolution Protocol browse responses.

A response datagram is laid out as:

    byte 0      0x05 (SVR_RESP marker)
    bytes 1-2   payload length, unsigned 16-bit little-endian
    bytes 3..   UTF-8 payload of that length; anything after it is ignored

The payload lists one entry per instance, entries separated by ``;;``:

    ServerName;HOST1;InstanceName;SQLEXPRESS;IsClustered;No;Version;15.0.2000.5;;

Each entry alternates key and value tokens. Keys are not checked; the
values are read by position as server name, instance name, clustered flag
and version.
"""

import logging
import struct
from typing import Iterable, Iterator, Optional

from .schema import (
    DATA_SOURCE_COLUMNS,
    FIELD_COUNT,
    ScanStats,
    SqlInstance,
)

logger = logging.getLogger(__name__)


# CLNT_BCAST_EX request
PROBE = b"\x02"

# SVR_RESP marker
RESPONSE_MARKER = 0x05

HEADER = struct.Struct("<BH")

ENTRY_SEPARATOR = ";;"
TOKEN_SEPARATOR = ";"

ENTRY_KEYS = ("ServerName", "InstanceName", "IsClustered", "Version")


def parse_datagram(data: bytes) -> Optional[str]:
    """Extract the payload string from a response datagram.

    Args:
        data: Raw datagram bytes.

    Returns:
        The decoded payload, or None if the datagram is not a well-formed
        response (wrong marker, truncated, or not UTF-8).
    """
    if len(data) < HEADER.size:
        return None

    marker, length = HEADER.unpack_from(data)
    if marker != RESPONSE_MARKER:
        return None

    end = HEADER.size + length
    if len(data) < end:
        return None

    try:
        return data[HEADER.size:end].decode("utf-8")
    except UnicodeDecodeError:
        return None


def split_entries(payload: str) -> list[str]:
    """Split a payload into its non-empty entries."""
    return [entry for entry in payload.split(ENTRY_SEPARATOR) if entry]


def value_tokens(entry: str) -> list[str]:
    """Return the value side of each key/value pair of an entry."""
    return entry.split(TOKEN_SEPARATOR)[1::2]


def decode_entry(entry: str) -> Optional[SqlInstance]:
    """Decode one entry, or return None if it carries too few values."""
    values = value_tokens(entry)
    if len(values) < FIELD_COUNT:
        return None
    return SqlInstance.from_values(values)


def decode_payload(
    payload: str,
    stats: Optional[ScanStats] = None,
) -> Iterator[SqlInstance]:
    """Decode every entry of a payload, in order.

    Entries with fewer than four values are skipped and logged; they do not
    affect neighbouring entries.

    Args:
        payload: Payload string taken from a response datagram.
        stats: Optional scan counters to record dropped entries in.

    Yields:
        One SqlInstance per well-formed entry.
    """
    for entry in split_entries(payload):
        instance = decode_entry(entry)
        if instance is None:
            logger.warning("Skipping entry with too few values: %r", entry)
            if stats is not None:
                stats.entries_dropped += 1
            continue
        yield instance


def data_source_rows(payload: str) -> list[dict[str, Optional[str]]]:
    """Convert a payload into data-source table rows.

    Unlike ``decode_payload`` no entry is rejected: missing columns are
    filled with None, surplus values are ignored and the clustered flag is
    kept as sent.
    """
    rows = []
    for entry in split_entries(payload):
        values: list[Optional[str]] = list(value_tokens(entry)[:FIELD_COUNT])
        values += [None] * (FIELD_COUNT - len(values))
        rows.append(dict(zip(DATA_SOURCE_COLUMNS, values)))
    return rows


def encode_entry(instance: SqlInstance) -> str:
    """Encode one instance as a payload entry."""
    values = (
        instance.server_name,
        instance.instance_name,
        "Yes" if instance.is_clustered else "No",
        instance.version,
    )
    return TOKEN_SEPARATOR.join(
        token for pair in zip(ENTRY_KEYS, values) for token in pair
    )


def encode_payload(instances: Iterable[SqlInstance]) -> str:
    """Encode instances as a payload, each entry terminated by ``;;``."""
    return "".join(encode_entry(i) + ENTRY_SEPARATOR for i in instances)


def encode_response(payload: str) -> bytes:
    """Wrap a payload string in a response datagram."""
    body = payload.encode("utf-8")
    if len(body) > 0xFFFF:
        raise ValueError(f"Payload too large for one datagram: {len(body)} bytes")
    return HEADER.pack(RESPONSE_MARKER, len(body)) + body
