"""
Bitstring Inspector - decode and inspect Bitstring Status List credentials.

Supports:
- Embedded-proof and enveloped (JWT) status list credentials
- GZIP, raw DEFLATE and uncompressed bitstrings
- Bounds-checked single-bit and range queries
- A closed error taxonomy for every failure

JWT signatures and credential proofs are decoded, never verified.
"""

from bitstring_inspector.bits import BitStatus, get_bit_range, get_bit_status
from bitstring_inspector.codec import decode_status_list
from bitstring_inspector.errors import DetailedError, ErrorCode
from bitstring_inspector.models import (
    CredentialType,
    DecodedStatusList,
    DecodeResult,
    StatusListResult,
)
from bitstring_inspector.service import (
    StatusListFetcher,
    decode_document,
    fetch_status_list,
    format_credential_info,
)

__version__ = "0.1.0"

__all__ = [
    "StatusListFetcher",
    "fetch_status_list",
    "decode_document",
    "decode_status_list",
    "format_credential_info",
    "get_bit_status",
    "get_bit_range",
    "BitStatus",
    "CredentialType",
    "DecodedStatusList",
    "DecodeResult",
    "StatusListResult",
    "DetailedError",
    "ErrorCode",
]
