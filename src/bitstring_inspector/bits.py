"""
Bounds-checked access to a decoded status list bitstring.

Bit ``i`` lives in byte ``i // 8`` at position ``i % 8``, where position 0 is
the least significant bit of the byte.
"""

from __future__ import annotations

from dataclasses import dataclass

from bitstring_inspector.errors import DetailedError, ErrorCode, create_error

MAX_RANGE_SIZE = 10000


@dataclass(frozen=True)
class BitStatus:
    """Status of a single bit in a range query."""

    index: int
    status: bool
    purpose: str


def get_bit_status(bits: bytes, index: int) -> bool | DetailedError:
    """Get the value of the bit at the given index.

    Args:
        bits: Decompressed bitstring.
        index: Zero-based bit index.

    Returns:
        True if the bit is set, False if unset, or a DetailedError with
        INVALID_BIT_INDEX if the index is out of range.
    """
    if index < 0:
        return create_error(
            ErrorCode.INVALID_BIT_INDEX,
            "Invalid bit index",
            f"Bit index must be non-negative, but got {index}.",
            suggestion="Use a valid index starting from 0.",
        )

    byte_index = index // 8
    max_index = len(bits) * 8 - 1

    if byte_index >= len(bits):
        return create_error(
            ErrorCode.INVALID_BIT_INDEX,
            "Bit index out of range",
            f"Index {index} exceeds the maximum index {max_index}.",
            suggestion=f"Valid range is 0 to {max_index}.",
        )

    return (bits[byte_index] >> (index % 8)) & 1 != 0


def get_bit_range(
    bits: bytes,
    start: int,
    end: int,
    purpose: str,
) -> list[BitStatus] | DetailedError:
    """Get the status of every bit in ``[start, end]``.

    Args:
        bits: Decompressed bitstring.
        start: First index, inclusive.
        end: Last index, inclusive.
        purpose: The status purpose declared by the credential.

    Returns:
        BitStatus entries ordered by index, or a DetailedError with
        INVALID_BIT_RANGE.
    """
    if start < 0:
        return create_error(
            ErrorCode.INVALID_BIT_RANGE,
            "Invalid start index",
            f"Start index must be non-negative, but got {start}.",
            suggestion="Use a valid start index starting from 0.",
        )

    if end < start:
        return create_error(
            ErrorCode.INVALID_BIT_RANGE,
            "Invalid bit range",
            f"End index ({end}) must be greater than or equal to start index ({start}).",
            suggestion="Ensure the end index is not less than the start index.",
        )

    max_index = len(bits) * 8 - 1
    if start > max_index:
        return create_error(
            ErrorCode.INVALID_BIT_RANGE,
            "Start index out of range",
            f"Start index {start} exceeds the maximum index {max_index}.",
            suggestion=f"Valid range is 0 to {max_index}.",
        )

    if end > max_index:
        return create_error(
            ErrorCode.INVALID_BIT_RANGE,
            "End index out of range",
            f"End index {end} exceeds the maximum index {max_index}.",
            suggestion=f"Valid range is 0 to {max_index}.",
        )

    range_size = end - start + 1
    if range_size > MAX_RANGE_SIZE:
        return create_error(
            ErrorCode.INVALID_BIT_RANGE,
            "Range too large",
            f"Range size ({range_size}) is too large. "
            f"Maximum allowed is {MAX_RANGE_SIZE} bits.",
            suggestion="Try a smaller range or check specific bits individually.",
        )

    return [
        BitStatus(
            index=i,
            status=(bits[i // 8] >> (i % 8)) & 1 != 0,
            purpose=purpose,
        )
        for i in range(start, end + 1)
    ]


def count_set_bits(bits: bytes) -> int:
    """Count the bits set to 1."""
    return sum(bin(byte).count("1") for byte in bits)
