"""
Detection and unwrapping of credential envelopes.

A status list credential is delivered either directly (embedded proof) or as
an EnvelopedVerifiableCredential whose ``id`` is a data URL holding a JWT.

The JWT signature is NOT verified; only the payload claims are decoded.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from bitstring_inspector.errors import DetailedError, ErrorCode, create_error
from bitstring_inspector.models import (
    ENVELOPED_CREDENTIAL_TYPE,
    CredentialType,
    EmbeddedCredential,
    EnvelopedCredential,
)

logger = logging.getLogger(__name__)

# Checked in order; the first match is stripped
DATA_URL_PREFIXES = (
    "data:application/vc+jwt,",
    "data:application/vc-ld+jwt,",
    "data:application/vc+ld+jwt,",
    "data:application/jwt,",
)


@dataclass(frozen=True)
class UnwrappedCredential:
    """Credential claims plus where they came from."""

    claims: dict[str, Any]
    credential_type: CredentialType
    original: dict[str, Any] | None = field(default=None, repr=False)


def classify_document(
    document: Any,
) -> EnvelopedCredential | EmbeddedCredential | DetailedError:
    """Decide whether a fetched document is enveloped or embedded-proof.

    Args:
        document: Parsed JSON document.

    Returns:
        The typed credential variant, or a DetailedError.
    """
    if not isinstance(document, dict):
        return create_error(
            ErrorCode.INVALID_CREDENTIAL_FORMAT,
            "Invalid credential format",
            f"Expected a JSON object but got {type(document).__name__}.",
            suggestion="Ensure the URL points to a valid verifiable credential.",
        )

    credential_type = document.get("type")
    if not credential_type:
        return create_error(
            ErrorCode.MISSING_CREDENTIAL_TYPE,
            "Invalid credential format",
            'The credential is missing the required "type" field.',
            suggestion="Ensure the URL points to a valid verifiable credential.",
        )

    if credential_type == ENVELOPED_CREDENTIAL_TYPE:
        return EnvelopedCredential(id=document.get("id") or "", document=document)

    if isinstance(credential_type, (str, list)):
        return EmbeddedCredential(type=credential_type, document=document)

    return create_error(
        ErrorCode.UNSUPPORTED_CREDENTIAL_TYPE,
        "Unsupported credential type",
        f'Credential type "{credential_type}" is not supported.',
        suggestion=(
            'Expected "EnvelopedVerifiableCredential" or a standard credential '
            "with embedded proof."
        ),
    )


def strip_data_url_prefix(value: str) -> str | None:
    """Remove a recognized data URL prefix, or return None if there is none."""
    for prefix in DATA_URL_PREFIXES:
        if value.startswith(prefix):
            return value[len(prefix):]
    return None


def decode_jwt_payload(token: str) -> dict[str, Any] | DetailedError:
    """Decode the payload of a compact JWT without verifying it.

    Args:
        token: ``header.payload.signature``.

    Returns:
        The payload claims, or a DetailedError.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return create_error(
            ErrorCode.JWT_PARSE_ERROR,
            "Invalid JWT structure",
            f"JWT must have 3 parts (header.payload.signature), but found {len(parts)} parts.",
            suggestion="The JWT token is malformed or corrupted.",
        )

    payload = parts[1]
    if not payload:
        return create_error(
            ErrorCode.JWT_PARSE_ERROR,
            "Empty JWT payload",
            "The JWT payload section is empty.",
            suggestion="The JWT token is corrupted.",
        )

    padded = payload + "=" * (-len(payload) % 4)
    try:
        text = base64.b64decode(
            padded.replace("-", "+").replace("_", "/"), validate=True
        ).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        return create_error(
            ErrorCode.BASE64_DECODE_ERROR,
            "Failed to decode JWT payload",
            f"Could not decode the JWT payload from Base64. {e}",
            suggestion="The JWT payload is not valid Base64 encoded data.",
        )

    try:
        claims = json.loads(text)
    except json.JSONDecodeError as e:
        return create_error(
            ErrorCode.INVALID_JSON,
            "Invalid JWT payload JSON",
            f"The JWT payload is not valid JSON. {e}",
            suggestion="The JWT contains malformed data.",
        )

    if not isinstance(claims, dict) or not claims.get("credentialSubject"):
        return create_error(
            ErrorCode.INVALID_CREDENTIAL_FORMAT,
            "Invalid credential in JWT",
            "The decoded JWT does not contain a valid StatusListCredential.",
            suggestion="The JWT payload does not match the expected credential format.",
        )

    return claims


def decode_enveloped_credential(
    enveloped: EnvelopedCredential,
) -> dict[str, Any] | DetailedError:
    """Extract the credential claims from an EnvelopedVerifiableCredential.

    Args:
        enveloped: The wrapper whose ``id`` holds a data URL with a JWT.

    Returns:
        The credential claims, or a DetailedError.
    """
    if not enveloped.id or not isinstance(enveloped.id, str):
        return create_error(
            ErrorCode.JWT_PARSE_ERROR,
            "Missing JWT token",
            "The EnvelopedVerifiableCredential does not contain an id field with the JWT.",
            suggestion="The credential format is invalid.",
        )

    token = strip_data_url_prefix(enveloped.id)
    if token is None:
        return create_error(
            ErrorCode.JWT_PARSE_ERROR,
            "Invalid JWT format",
            "The id field does not contain a valid JWT token with a recognized "
            f'prefix. Got: "{enveloped.id[:50]}..."',
            suggestion='Expected format: "data:application/vc+jwt,{JWT_TOKEN}" or similar',
        )

    if not token:
        return create_error(
            ErrorCode.JWT_PARSE_ERROR,
            "Empty JWT token",
            "The JWT token is empty after removing the data URL prefix.",
            suggestion="The credential format is invalid.",
        )

    return decode_jwt_payload(token)


def unwrap_credential(document: Any) -> UnwrappedCredential | DetailedError:
    """Classify a document and unwrap it if enveloped.

    Args:
        document: Parsed JSON document.

    Returns:
        UnwrappedCredential, or a DetailedError.
    """
    shape = classify_document(document)
    if isinstance(shape, DetailedError):
        return shape

    if isinstance(shape, EmbeddedCredential):
        logger.debug("Embedded-proof credential of type %s", shape.type)
        return UnwrappedCredential(
            claims=shape.document,
            credential_type=CredentialType.EMBEDDED,
        )

    logger.debug("Enveloped credential, decoding JWT payload")
    claims = decode_enveloped_credential(shape)
    if isinstance(claims, DetailedError):
        return claims

    return UnwrappedCredential(
        claims=claims,
        credential_type=CredentialType.ENVELOPED,
        original=shape.document,
    )
