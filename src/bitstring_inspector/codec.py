"""
Decoding of the ``encodedList`` value of a BitstringStatusList.

Decoding: decompress(base64url_decode(encoded_list))

Issuers disagree on padding, alphabet and on whether the bitstring carries a
GZIP header, so both stages try an ordered list of decoders and report the
last failure.
"""

from __future__ import annotations

import base64
import gzip
import logging
import zlib
from typing import Callable

from bitstring_inspector.errors import DetailedError, ErrorCode, create_error
from bitstring_inspector.models import DecodeResult

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


def _decode_base64url_strict(encoded: str) -> bytes:
    return base64.b64decode(encoded, altchars=b"-_", validate=True)


def _decode_base64_manual(encoded: str) -> bytes:
    data = "".join(encoded.split()).replace("-", "+").replace("_", "/")
    data += "=" * (-len(data) % 4)
    return base64.b64decode(data, validate=True)


def _inflate_raw(data: bytes) -> bytes:
    return zlib.decompress(data, -zlib.MAX_WBITS)


def _passthrough(data: bytes) -> bytes:
    return bytes(data)


BASE64_DECODERS: list[tuple[str, Callable[[str], bytes]]] = [
    ("base64url", _decode_base64url_strict),
    ("base64-manual", _decode_base64_manual),
]

# Tried in order when the data has no GZIP header
NON_GZIP_DECOMPRESSORS: list[tuple[str, Callable[[bytes], bytes]]] = [
    ("raw-deflate", _inflate_raw),
    ("uncompressed", _passthrough),
]


def decode_base64url(encoded: str) -> bytes | DetailedError:
    """Decode a Base64URL string, tolerating missing padding.

    Args:
        encoded: Base64URL (or standard Base64) text.

    Returns:
        The decoded bytes, or a DetailedError with BASE64_DECODE_ERROR.
    """
    last_error: Exception | None = None
    for name, decoder in BASE64_DECODERS:
        try:
            return decoder(encoded)
        except ValueError as e:
            logger.warning("%s decode failed: %s", name, e)
            last_error = e

    return create_error(
        ErrorCode.BASE64_DECODE_ERROR,
        "Failed to decode Base64URL data",
        f"The encoded list could not be decoded from Base64URL format. {last_error}",
        suggestion="The encoded data may be corrupted or not properly Base64URL encoded.",
    )


def decompress_bitstring(data: bytes) -> bytes | DetailedError:
    """Decompress a status list bitstring.

    GZIP data (magic bytes ``1f 8b``) must inflate cleanly. Anything else is
    tried as raw DEFLATE and then taken as already uncompressed.

    Args:
        data: Bytes recovered from the Base64URL stage.

    Returns:
        The uncompressed bitstring, or a DetailedError.
    """
    if data[:2] == GZIP_MAGIC:
        try:
            return gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            logger.error("GZIP decompression failed: %s", e)
            return create_error(
                ErrorCode.GZIP_DECODE_ERROR,
                "Failed to decompress GZIP data",
                f"The GZIP compressed data could not be decompressed. {e}",
                suggestion="The compressed data may be corrupted. Try fetching the credential again.",
            )

    for name, decompressor in NON_GZIP_DECOMPRESSORS:
        try:
            return decompressor(data)
        except (zlib.error, ValueError, TypeError) as e:
            logger.warning("%s decompression failed: %s", name, e)

    header = data[:10].hex(" ")
    return create_error(
        ErrorCode.DECOMPRESSION_ERROR,
        "Failed to decompress data",
        f"Unable to decompress the encoded list. Tried GZIP and raw deflate. Data header: {header}",
        suggestion="The data may not be compressed or uses an unsupported compression format.",
    )


def decode_status_list(encoded_list: str) -> DecodeResult:
    """Decode an ``encodedList`` value into its bitstring.

    Args:
        encoded_list: Base64URL-encoded, usually GZIP-compressed bitstring.

    Returns:
        DecodeResult holding either the bitstring or the error.
    """
    try:
        compressed = decode_base64url(encoded_list)
        if isinstance(compressed, DetailedError):
            return DecodeResult(error=compressed)

        decompressed = decompress_bitstring(compressed)
        if isinstance(decompressed, DetailedError):
            return DecodeResult(error=decompressed)

        return DecodeResult(data=decompressed)

    except Exception as e:
        logger.exception("Error decoding status list (sample: %.100s)", encoded_list)
        return DecodeResult(
            error=create_error(
                ErrorCode.UNKNOWN_ERROR,
                "Failed to decode status list",
                str(e) or type(e).__name__,
                suggestion="An unexpected error occurred while decoding. Please report this issue.",
            )
        )
