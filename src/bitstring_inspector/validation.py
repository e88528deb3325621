"""
Structural checks on an unwrapped status list credential.

Runs before any decoding so each malformed input gets one specific
diagnostic.
"""

from __future__ import annotations

from typing import Any

from bitstring_inspector.errors import DetailedError, ErrorCode, create_error
from bitstring_inspector.models import BITSTRING_STATUS_LIST_TYPE, StatusListCredential


def validate_credential(claims: dict[str, Any]) -> StatusListCredential | DetailedError:
    """Check that the claims carry a well-formed BitstringStatusList subject.

    Args:
        claims: Credential claims, already unwrapped from any envelope.

    Returns:
        The typed StatusListCredential, or a DetailedError.
    """
    subject = claims.get("credentialSubject")
    if not subject:
        return create_error(
            ErrorCode.MISSING_BITSTRING_LIST,
            "Missing BitstringStatusList",
            "The credential does not contain a credentialSubject field.",
            suggestion="The credential structure is invalid. Verify it's a status list credential.",
        )

    subject_type = subject.get("type") if isinstance(subject, dict) else None
    if subject_type != BITSTRING_STATUS_LIST_TYPE:
        return create_error(
            ErrorCode.INVALID_CREDENTIAL_FORMAT,
            f'Invalid BitstringStatusList: unexpected type "{subject_type}"',
            f'Expected type "{BITSTRING_STATUS_LIST_TYPE}" but got "{subject_type}".',
            suggestion="The credential is not a valid Bitstring Status List credential.",
        )

    encoded_list = subject.get("encodedList")
    if not encoded_list or not isinstance(encoded_list, str):
        return create_error(
            ErrorCode.INVALID_CREDENTIAL_FORMAT,
            "Missing encoded list",
            "The BitstringStatusList does not contain an encodedList field.",
            suggestion="The status list credential is incomplete or corrupted.",
        )

    return StatusListCredential.from_dict(claims)
