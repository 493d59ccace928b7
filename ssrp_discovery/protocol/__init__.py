"""Protocol module - SSRP wire format and data models."""

from .schema import (
    DATA_SOURCE_COLUMNS,
    Datagram,
    ScanStats,
    SqlInstance,
)
from .decoder import (
    PROBE,
    RESPONSE_MARKER,
    data_source_rows,
    decode_entry,
    decode_payload,
    encode_entry,
    encode_payload,
    encode_response,
    parse_datagram,
    split_entries,
    value_tokens,
)

__all__ = [
    "DATA_SOURCE_COLUMNS",
    "Datagram",
    "ScanStats",
    "SqlInstance",
    "PROBE",
    "RESPONSE_MARKER",
    "data_source_rows",
    "decode_entry",
    "decode_payload",
    "encode_entry",
    "encode_payload",
    "encode_response",
    "parse_datagram",
    "split_entries",
    "value_tokens",
]
